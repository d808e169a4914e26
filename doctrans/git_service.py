#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
GitService - Version history lookups through the git command line.

Every query runs `git` in the repository root with a bounded timeout. Paths
are passed relative to the repository root.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from config.constants import GIT_TIMEOUT_SECONDS
from config.logging_config import get_logger

logger = get_logger(__name__)


class GitError(Exception):
    """A git command failed or timed out."""

    def __init__(self, message: str, command: Optional[List[str]] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


@dataclass(frozen=True)
class RevisionInfo:
    """
    History of one source file relative to its existing translation.

    Attributes:
        current_commit: Last commit touching the source file.
        translated_commit: Revision the translation was made from (None: new file).
        commit_count: Commits touching the file between the two revisions.
        diff: Unified diff of the source between the revisions.
        original_source: Source text at the translated revision.
    """
    current_commit: str
    translated_commit: Optional[str] = None
    commit_count: int = 0
    diff: Optional[str] = None
    original_source: Optional[str] = None

    @property
    def is_new_file(self) -> bool:
        return self.translated_commit is None

    @property
    def is_up_to_date(self) -> bool:
        return self.translated_commit is not None and self.translated_commit == self.current_commit

    @property
    def needs_update(self) -> bool:
        return self.translated_commit is not None and self.translated_commit != self.current_commit


class GitService:
    """Thin wrapper over the git CLI for one repository"""

    def __init__(self, repo_root: Path, timeout: float = GIT_TIMEOUT_SECONDS):
        self.repo_root = Path(repo_root).resolve()
        self.timeout = timeout

    @staticmethod
    def find_repo_root(start: Path, timeout: float = GIT_TIMEOUT_SECONDS) -> Path:
        """Top-level directory of the repository containing `start`."""
        start = Path(start).resolve()
        cwd = start if start.is_dir() else start.parent
        output = _run_git(["rev-parse", "--show-toplevel"], cwd, timeout)
        return Path(output.strip()).resolve()

    def _relative(self, file: Path) -> str:
        absolute = Path(file).resolve()
        try:
            return absolute.relative_to(self.repo_root).as_posix()
        except ValueError:
            return absolute.as_posix()

    def _git(self, *args: str) -> str:
        return _run_git(list(args), self.repo_root, self.timeout)

    def get_current_commit(self, file: Path) -> Optional[str]:
        output = self._git("log", "-1", "--format=%H", "--", self._relative(file))
        return output.strip() or None

    def is_clean(self, file: Path) -> bool:
        """True when the file has neither uncommitted nor untracked changes."""
        output = self._git("status", "--porcelain", "--", self._relative(file))
        return not output.strip()

    def get_diff(self, file: Path, from_commit: str, to_commit: str) -> Optional[str]:
        output = self._git("diff", f"{from_commit}..{to_commit}", "--", self._relative(file))
        return output if output.strip() else None

    def get_commit_count(self, file: Path, from_commit: str, to_commit: str) -> int:
        output = self._git("rev-list", "--count", f"{from_commit}..{to_commit}", "--", self._relative(file))
        return int(output.strip()) if output.strip() else 0

    def get_file_at_commit(self, file: Path, commit: str) -> Optional[str]:
        """Content of the file at `commit`, None if it did not exist there."""
        try:
            output = self._git("show", f"{commit}:{self._relative(file)}")
        except GitError as e:
            if e.returncode is None:
                raise
            logger.debug(f"git show {commit} failed for {file}: {e.stderr.strip()}")
            return None
        return output or None

    def build_revision_info(self, file: Path, translated_commit: Optional[str]) -> Optional[RevisionInfo]:
        """
        Collect everything needed to classify a file.

        Returns None when the file has no history at all (untracked).
        """
        current = self.get_current_commit(file)
        if current is None:
            return None

        if translated_commit is None:
            return RevisionInfo(current_commit=current)

        if translated_commit == current:
            return RevisionInfo(current_commit=current, translated_commit=translated_commit)

        return RevisionInfo(
            current_commit=current,
            translated_commit=translated_commit,
            commit_count=self._safe_commit_count(file, translated_commit, current),
            diff=self._safe_diff(file, translated_commit, current),
            original_source=self.get_file_at_commit(file, translated_commit),
        )

    def _safe_diff(self, file: Path, from_commit: str, to_commit: str) -> Optional[str]:
        # An unknown (e.g. rewritten) revision must not abort classification
        try:
            return self.get_diff(file, from_commit, to_commit)
        except GitError as e:
            if e.returncode is None:
                raise
            logger.debug(f"git diff failed for {file}: {e.stderr.strip()}")
            return None

    def _safe_commit_count(self, file: Path, from_commit: str, to_commit: str) -> int:
        try:
            return self.get_commit_count(file, from_commit, to_commit)
        except GitError as e:
            if e.returncode is None:
                raise
            logger.debug(f"git rev-list failed for {file}: {e.stderr.strip()}")
            return 0


def _run_git(args: List[str], cwd: Path, timeout: float) -> str:
    command = ["git", *args]
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command timed out after {timeout} seconds: {' '.join(command)}", command)
    except FileNotFoundError:
        raise GitError("git executable not found", command)

    stdout = completed.stdout.decode("utf-8", errors="replace")
    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace")
        raise GitError(
            f"Git command failed with exit code {completed.returncode}: {stderr.strip()}",
            command, completed.returncode, stderr,
        )
    return stdout
