"""
Diff engine errors and validation results.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .models import DiffHunk


def _truncate(text: Optional[str], limit: int) -> str:
    if text is None:
        return "<none>"
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class DiffParseError(Exception):
    """Raised when text cannot be parsed as a unified diff."""

    def __init__(self, message: str, raw_diff: str = "", line_number: int = 0):
        self.message = message
        self.raw_diff = raw_diff
        self.line_number = line_number
        if line_number > 0:
            message = f"{message} at line {line_number}"
        super().__init__(message)


class DiffApplicationError(Exception):
    """Raised when a hunk does not match the text it is applied to."""

    DETAIL_LIMIT = 50

    def __init__(
        self,
        message: str,
        hunk: Optional[DiffHunk] = None,
        hunk_index: int = -1,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ):
        self.message = message
        self.hunk = hunk
        self.hunk_index = hunk_index
        self.expected = expected
        self.actual = actual
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.hunk_index >= 0:
            text += f" (hunk {self.hunk_index + 1})"
        if self.expected is not None or self.actual is not None:
            text += f"\nExpected: '{_truncate(self.expected, self.DETAIL_LIMIT)}'"
            text += f"\nActual:   '{_truncate(self.actual, self.DETAIL_LIMIT)}'"
        return text


@dataclass(frozen=True)
class ContextMismatch:
    """A context or removed line that differs from the target text."""
    hunk_index: int
    line_number: int  # 1-based
    expected: str
    actual: str


@dataclass(frozen=True)
class DiffValidationResult:
    """Outcome of a non-throwing pre-flight check."""
    valid: bool
    mismatches: List[ContextMismatch] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "DiffValidationResult":
        return cls(True, [])
