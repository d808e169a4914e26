#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Translation jobs - one document translated into one locale.

Two variants exist:
    NewJob          first-time translation of the whole document
    IncrementalJob  update of an existing translation from a source diff

Jobs are created by the JobClassifier, never modified afterwards, and consumed
once by the Translator.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from config.constants import SHORT_COMMIT_LENGTH

from .document import MarkdownDocument
from .front_matter import extract_translatable_fields
from .locale import TargetLocale

TEMPLATE_NEW_SYSTEM = "translate-new-system"
TEMPLATE_NEW_USER = "translate-new-user"
TEMPLATE_DIFF_SYSTEM = "translate-incremental-diff-system"
TEMPLATE_DIFF_USER = "translate-incremental-diff-user"
TEMPLATE_DIFF_RETRY = "translate-incremental-diff-retry"
TEMPLATE_FRONT_MATTER_SYSTEM = "translate-frontmatter-system"
TEMPLATE_FRONT_MATTER_USER = "translate-frontmatter-user"


def short_commit(commit: Optional[str]) -> str:
    if not commit:
        return ""
    return commit[:SHORT_COMMIT_LENGTH]


@dataclass(frozen=True)
class TranslationJob:
    """Fields shared by every job variant"""
    source_file: Path
    target_file: Path
    locale: TargetLocale
    source_content: str
    current_commit: str
    instructions: Optional[str] = None
    translatable_fields: Optional[List[str]] = None

    job_type = "JOB"
    system_template = ""
    user_template = ""

    def __post_init__(self):
        if not self.current_commit:
            raise ValueError("current_commit must not be empty")
        if self.translatable_fields is not None:
            object.__setattr__(self, "translatable_fields", list(self.translatable_fields))

    @property
    def source_document(self) -> MarkdownDocument:
        return MarkdownDocument(self.source_content)

    @property
    def source_body(self) -> str:
        return self.source_document.body

    @property
    def current_commit_short(self) -> str:
        return short_commit(self.current_commit)

    def common_variables(self) -> Dict[str, str]:
        return {
            "locale": self.locale.display_name,
            "localeTag": self.locale.tag,
            "customInstructions": self.instructions or "",
        }

    def extracted_translatable_fields(self) -> Dict[str, str]:
        """Front matter fields this job sends to the model."""
        return extract_translatable_fields(self.source_document, self.translatable_fields)

    def prompt_variables(self) -> Dict[str, str]:
        raise NotImplementedError


@dataclass(frozen=True)
class NewJob(TranslationJob):
    """First-time translation of a document"""

    job_type = "NEW"
    system_template = TEMPLATE_NEW_SYSTEM
    user_template = TEMPLATE_NEW_USER

    def prompt_variables(self) -> Dict[str, str]:
        variables = self.common_variables()
        # Front matter is translated separately; only the body goes out here
        variables["sourceContent"] = self.source_body
        return variables

    def chunk_variables(self, chunk_content: str) -> Dict[str, str]:
        variables = self.common_variables()
        variables["sourceContent"] = chunk_content
        return variables


@dataclass(frozen=True)
class IncrementalJob(TranslationJob):
    """Update of an existing translation from the source changes since its revision"""
    original_source: str = ""
    existing_translation: str = ""
    diff: str = ""
    translated_commit: str = ""
    commit_count: int = 0

    job_type = "UPDATE"
    system_template = TEMPLATE_DIFF_SYSTEM
    user_template = TEMPLATE_DIFF_USER
    retry_template = TEMPLATE_DIFF_RETRY

    def __post_init__(self):
        super().__post_init__()
        if not self.original_source:
            raise ValueError("original_source must not be empty for an incremental job")
        if not self.existing_translation:
            raise ValueError("existing_translation must not be empty for an incremental job")
        if not self.translated_commit:
            raise ValueError("translated_commit must not be empty for an incremental job")
        if self.commit_count < 0:
            raise ValueError(f"commit_count must not be negative: {self.commit_count}")

    @property
    def existing_translation_body(self) -> str:
        return MarkdownDocument(self.existing_translation).body

    @property
    def translated_commit_short(self) -> str:
        return short_commit(self.translated_commit)

    def extracted_translatable_fields(self) -> Dict[str, str]:
        """Only fields whose value changed since the translated revision."""
        current = extract_translatable_fields(self.source_document, self.translatable_fields)
        original = extract_translatable_fields(
            MarkdownDocument(self.original_source), self.translatable_fields
        )
        return {name: value for name, value in current.items() if original.get(name) != value}

    def prompt_variables(self) -> Dict[str, str]:
        variables = self.common_variables()
        variables["existingTranslation"] = self.existing_translation_body
        variables["diff"] = self.diff
        return variables

    def retry_variables(self, invalid_response: str, error_message: str = "") -> Dict[str, str]:
        variables = self.prompt_variables()
        variables["invalidResponse"] = invalid_response
        variables["errorMessage"] = error_message
        return variables
