#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Diff data model - hunks and lines of a unified diff.

A DiffResult is an ordered list of DiffHunk objects; each hunk carries the
old/new line ranges and its DiffLine entries. An empty DiffResult means
"no change".
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class DiffLineType(Enum):
    """Kind of line inside a hunk"""
    CONTEXT = " "
    ADD = "+"
    REMOVE = "-"

    @property
    def prefix(self) -> str:
        return self.value


@dataclass(frozen=True)
class DiffLine:
    """One line of a hunk, stored without its prefix or line terminator"""
    type: DiffLineType
    content: str

    @classmethod
    def context(cls, content: str) -> "DiffLine":
        return cls(DiffLineType.CONTEXT, content)

    @classmethod
    def add(cls, content: str) -> "DiffLine":
        return cls(DiffLineType.ADD, content)

    @classmethod
    def remove(cls, content: str) -> "DiffLine":
        return cls(DiffLineType.REMOVE, content)

    @property
    def is_context(self) -> bool:
        return self.type is DiffLineType.CONTEXT

    @property
    def is_add(self) -> bool:
        return self.type is DiffLineType.ADD

    @property
    def is_remove(self) -> bool:
        return self.type is DiffLineType.REMOVE

    def to_unified_line(self) -> str:
        return f"{self.type.prefix}{self.content}"


@dataclass(frozen=True)
class DiffHunk:
    """
    One contiguous change region.

    Attributes:
        old_start: 1-based first line in the original (0 for insertion at file start).
        old_count: Number of original lines covered.
        new_start: 1-based first line in the result.
        new_count: Number of result lines covered.
        lines: Context/add/remove lines in order.
    """
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[DiffLine, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for name in ("old_start", "old_count", "new_start", "new_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative: {getattr(self, name)}")
        # Accept any sequence but keep the hunk immutable
        object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def is_insertion_at_start(self) -> bool:
        return self.old_start == 0 and self.old_count == 0

    @property
    def lines_added(self) -> int:
        return sum(1 for line in self.lines if line.is_add)

    @property
    def lines_removed(self) -> int:
        return sum(1 for line in self.lines if line.is_remove)

    @property
    def context_lines(self) -> int:
        return sum(1 for line in self.lines if line.is_context)

    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"

    def to_unified_diff(self) -> str:
        """Serialize the hunk (header plus prefixed lines, each newline-terminated)."""
        parts = [self.header(), "\n"]
        for line in self.lines:
            parts.append(line.to_unified_line())
            parts.append("\n")
        return "".join(parts)


@dataclass(frozen=True)
class DiffResult:
    """Ordered collection of hunks parsed from one unified diff"""
    hunks: Tuple[DiffHunk, ...] = field(default_factory=tuple)
    # Set by a "\ No newline at end of file" marker after the last new-side line
    new_missing_newline: bool = False

    def __post_init__(self):
        object.__setattr__(self, "hunks", tuple(self.hunks))

    @classmethod
    def empty(cls) -> "DiffResult":
        return cls(())

    @property
    def is_empty(self) -> bool:
        return not self.hunks

    @property
    def hunk_count(self) -> int:
        return len(self.hunks)

    @property
    def lines_added(self) -> int:
        return sum(hunk.lines_added for hunk in self.hunks)

    @property
    def lines_removed(self) -> int:
        return sum(hunk.lines_removed for hunk in self.hunks)

    def to_unified_diff(self, old_file: str = "a", new_file: str = "b") -> str:
        if self.is_empty:
            return ""
        parts: List[str] = [f"--- {old_file}\n", f"+++ {new_file}\n"]
        parts.extend(hunk.to_unified_diff() for hunk in self.hunks)
        return "".join(parts)
