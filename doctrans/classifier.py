#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
JobClassifier - Decide per document and locale what translation work is due.

Outcomes:
    NewJob          no usable translation exists yet
    IncrementalJob  translation exists but the source moved on
    Skip            up to date, or the source is not safely committed

The classifier reads files and git history but never writes anything.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from config.constants import COMMIT_FIELD
from config.logging_config import get_logger

from .document import MarkdownDocument
from .git_service import GitService
from .jobs import IncrementalJob, NewJob, TranslationJob
from .locale import TargetLocale

logger = get_logger(__name__)


class SkipReason(Enum):
    """Why a document produced no job"""
    UNCOMMITTED = "uncommitted"
    UNTRACKED = "untracked"
    UP_TO_DATE = "up_to_date"


@dataclass(frozen=True)
class Skip:
    """A document excluded from the batch (not a failure)"""
    source_file: Path
    reason: SkipReason


Classification = Union[TranslationJob, Skip]


class JobClassifier:
    """
    Classifies source documents against their existing translations.

    Usage:
        classifier = JobClassifier(GitService(repo_root), source_dir)
        outcome = classifier.classify(path, content, target_dir, locale)
        if isinstance(outcome, Skip):
            ...
    """

    def __init__(self, git_service: GitService, source_dir: Path):
        self.git_service = git_service
        self.source_dir = Path(source_dir).resolve()

    def relative_path(self, source_file: Path) -> Path:
        absolute = Path(source_file).resolve()
        try:
            return absolute.relative_to(self.source_dir)
        except ValueError:
            return absolute

    def classify(
        self,
        source_file: Path,
        content: str,
        target_dir: Path,
        locale: TargetLocale,
        instructions: Optional[str] = None,
        translatable_fields: Optional[List[str]] = None,
    ) -> Classification:
        """
        Classify one source document for one target locale.

        Raises:
            GitError: when git itself cannot be queried.
            OSError: when the existing translation cannot be read.
        """
        relative = self.relative_path(source_file)

        if not self.git_service.is_clean(source_file):
            logger.error(
                f"[ERROR] Skipping file with uncommitted changes: {relative}. "
                "Commit your changes before translation."
            )
            return Skip(source_file, SkipReason.UNCOMMITTED)

        target_file = Path(target_dir) / relative
        translated_commit = None
        existing_translation = None
        if target_file.exists():
            existing_translation = target_file.read_text(encoding="utf-8")
            translated_commit = MarkdownDocument(existing_translation).get_property(COMMIT_FIELD)
            if translated_commit is None:
                logger.warning(
                    f"[WARN] Existing translation has no commit field: {relative}. Treating as new file."
                )

        info = self.git_service.build_revision_info(source_file, translated_commit)
        if info is None:
            logger.error(
                f"[ERROR] Skipping untracked file: {relative}. Add and commit the file before translation."
            )
            return Skip(source_file, SkipReason.UNTRACKED)

        if info.is_up_to_date:
            return Skip(source_file, SkipReason.UP_TO_DATE)

        common = dict(
            source_file=source_file,
            target_file=target_file,
            locale=locale,
            source_content=content,
            current_commit=info.current_commit,
            instructions=instructions,
            translatable_fields=translatable_fields,
        )

        if info.is_new_file or not existing_translation:
            return NewJob(**common)

        if not info.original_source:
            logger.warning(
                f"[WARN] Cannot retrieve source at commit {info.translated_commit} for {relative}. "
                "Treating as new file."
            )
            return NewJob(**common)

        return IncrementalJob(
            **common,
            original_source=info.original_source,
            existing_translation=existing_translation,
            diff=info.diff or "",
            translated_commit=info.translated_commit,
            commit_count=info.commit_count,
        )

    def report_job(self, job: TranslationJob, relative: Path) -> None:
        if isinstance(job, IncrementalJob):
            logger.info(
                f"[UPDATE] {relative}: {job.translated_commit_short} -> "
                f"{job.current_commit_short} ({job.commit_count} commits)"
            )
        else:
            logger.info(f"[NEW] {relative}")

    def report_up_to_date(self, relative: Path) -> None:
        logger.info(f"[SKIP] {relative} (up to date)")
