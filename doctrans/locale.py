#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Language Support - Target locales and their human-readable names
"""

from dataclasses import dataclass
from typing import Dict


# Language database (BCP 47 primary subtag -> English name)
LANGUAGE_NAMES: Dict[str, str] = {
    "ar": "Arabic",
    "bg": "Bulgarian",
    "cs": "Czech",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "es": "Spanish",
    "et": "Estonian",
    "fi": "Finnish",
    "fr": "French",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "hu": "Hungarian",
    "id": "Indonesian",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "nl": "Dutch",
    "no": "Norwegian",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "sk": "Slovak",
    "sl": "Slovenian",
    "sr": "Serbian",
    "sv": "Swedish",
    "th": "Thai",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "vi": "Vietnamese",
    "zh": "Chinese",
}

# Full tags whose name is not "<language> (<region>)"
SPECIAL_NAMES: Dict[str, str] = {
    "zh-Hans": "Chinese (Simplified)",
    "zh-Hant": "Chinese (Traditional)",
    "pt-BR": "Portuguese (Brazil)",
    "en-GB": "English (United Kingdom)",
    "en-US": "English (United States)",
}


@dataclass(frozen=True)
class TargetLocale:
    """A translation target language"""
    tag: str
    display_name: str

    @classmethod
    def from_tag(cls, tag: str) -> "TargetLocale":
        """Build a locale from a tag such as "de", "pt_BR" or "zh-Hant"."""
        normalized = tag.strip().replace("_", "-")
        if not normalized:
            raise ValueError("locale tag must not be blank")
        parts = normalized.split("-")
        parts[0] = parts[0].lower()
        normalized = "-".join(parts)
        return cls(tag=normalized, display_name=display_name_for(normalized))

    def __str__(self) -> str:
        return f"{self.display_name} ({self.tag})"


def display_name_for(tag: str) -> str:
    """English name for a locale tag, falling back to the tag itself."""
    if tag in SPECIAL_NAMES:
        return SPECIAL_NAMES[tag]
    language, _, region = tag.partition("-")
    name = LANGUAGE_NAMES.get(language.lower())
    if name is None:
        return tag
    return f"{name} ({region})" if region else name
