#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
MarkdownDocument - Front matter and body of one Markdown file.

The YAML front matter block is parsed with PyYAML's BaseLoader so every
scalar stays a string (dates, numbers and booleans are not coerced). Values
are kept as ordered lists: a plain scalar is a one-element list, a YAML
sequence keeps all of its items.
"""

import re
from typing import Dict, Iterable, List, Optional

import yaml

from config.logging_config import get_logger

logger = get_logger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


class _FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks"""


def _represent_str(dumper: yaml.SafeDumper, value: str):
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_FrontMatterDumper.add_representer(str, _represent_str)


def _to_values(raw) -> List[str]:
    if raw is None:
        return [""]
    if isinstance(raw, list):
        return [_scalar_text(item) for item in raw]
    return [_scalar_text(raw)]


def _scalar_text(raw) -> str:
    if isinstance(raw, str):
        return raw
    if raw is None:
        return ""
    # Nested mappings/sequences are kept as their YAML flow text
    return yaml.dump(raw, Dumper=_FrontMatterDumper, default_flow_style=True,
                     allow_unicode=True, sort_keys=False).strip()


class MarkdownDocument:
    """
    A Markdown document split into front matter properties and body.

    Usage:
        doc = MarkdownDocument(path.read_text(encoding="utf-8"))
        title = doc.get_property("title")
        doc.set_property("commit", "abc123")
        text = doc.to_markdown()
    """

    def __init__(self, content: str):
        if content is None:
            raise TypeError("content must not be None")
        self.raw = content
        match = FRONT_MATTER_PATTERN.match(content)
        if match:
            self._properties = self._parse_front_matter(match.group(1))
            self._body = content[match.end():]
        else:
            self._properties = {}
            self._body = content

    @classmethod
    def from_body(cls, body: str) -> "MarkdownDocument":
        """Document without front matter whose body is taken verbatim."""
        doc = cls("")
        doc.raw = body
        doc._body = body
        return doc

    @staticmethod
    def _parse_front_matter(block: str) -> Dict[str, List[str]]:
        try:
            data = yaml.load(block, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            logger.warning(f"Ignoring malformed front matter: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): _to_values(value) for key, value in data.items()}

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def properties(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._properties.items()}

    @property
    def body(self) -> str:
        return self._body

    def get_property(self, key: str) -> Optional[str]:
        """First value of `key`, or None when missing."""
        values = self._properties.get(key)
        if not values:
            return None
        return values[0]

    def set_property(self, key: str, value: str) -> None:
        """Set a single value; existing keys keep their position, new keys go last."""
        if value is None:
            raise TypeError("value must not be None")
        self._properties[key] = [value]

    def merge_front_matter_properties(self, additional: Dict[str, List[str]]) -> None:
        for key, values in additional.items():
            self._properties[key] = list(values)

    def extract_fields(self, names: Iterable[str]) -> Dict[str, str]:
        """Requested fields with a non-blank value, in the order requested."""
        fields = {}
        for name in names:
            value = self.get_property(name)
            if value is not None and value.strip():
                fields[name] = value
        return fields

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize_front_matter(self) -> str:
        """YAML block including the --- fences; empty string without properties."""
        data = {}
        for key, values in self._properties.items():
            if not values:
                continue
            data[key] = values[0] if len(values) == 1 else list(values)
        if not data:
            return ""
        dumped = yaml.dump(
            data,
            Dumper=_FrontMatterDumper,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
            width=float("inf"),
        )
        return f"---\n{dumped}---\n"

    def to_markdown(self) -> str:
        return self.serialize_front_matter() + self._body
