#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
UnifiedDiffApplicator - Apply parsed hunks to a text.

Context and removed lines must match the target text exactly; there is no
fuzzy matching and no three-way merge. Hunks are applied from the bottom of
the file upwards so that line numbers of earlier hunks stay valid.
"""

from typing import List

from .exceptions import ContextMismatch, DiffApplicationError, DiffValidationResult
from .models import DiffHunk, DiffResult
from .parser import split_lines

EOF_MARKER = "<EOF>"


def _join_lines(lines: List[str], ends_with_newline: bool) -> str:
    if not lines:
        return ""
    text = "\n".join(lines)
    if ends_with_newline:
        text += "\n"
    return text


def _old_side_count(hunk: DiffHunk) -> int:
    return sum(1 for line in hunk.lines if line.is_context or line.is_remove)


class UnifiedDiffApplicator:
    """Applies a DiffResult to original text, all-or-nothing"""

    def apply(self, original: str, diff: DiffResult) -> str:
        """
        Apply every hunk of `diff` to `original`.

        The original line terminator convention is kept: a trailing newline
        is reproduced only if the original ended with one. An empty original
        has no convention, so the result ends with a newline unless the diff
        carries a "\\ No newline at end of file" marker.

        Raises:
            DiffApplicationError: when a context/removed line does not match
                or a hunk reaches past the end of the text.
        """
        if diff.is_empty:
            return original

        # Mutations happen on a private copy only
        lines = split_lines(original)
        if original:
            ends_with_newline = original.endswith("\n")
        else:
            ends_with_newline = not diff.new_missing_newline

        ordered = sorted(
            enumerate(diff.hunks),
            key=lambda pair: (pair[1].old_start, pair[0]),
            reverse=True,
        )
        for hunk_index, hunk in ordered:
            self._apply_hunk(lines, hunk, hunk_index)

        return _join_lines(lines, ends_with_newline)

    def _apply_hunk(self, lines: List[str], hunk: DiffHunk, hunk_index: int) -> None:
        old_lines = _old_side_count(hunk)

        if hunk.is_insertion_at_start or old_lines == 0:
            # Pure insertion: "-N,0" inserts after line N, "-0,0" at the very start
            insert_at = min(hunk.old_start, len(lines))
            added = [line.content for line in hunk.lines if line.is_add]
            lines[insert_at:insert_at] = added
            return

        start = hunk.old_start - 1
        self._check_context(lines, hunk, hunk_index, start)

        replacement: List[str] = []
        position = start
        for line in hunk.lines:
            if line.is_context:
                replacement.append(lines[position])
                position += 1
            elif line.is_remove:
                position += 1
            else:
                replacement.append(line.content)

        lines[start:start + old_lines] = replacement

    @staticmethod
    def _check_context(lines: List[str], hunk: DiffHunk, hunk_index: int, start: int) -> None:
        position = start
        for line in hunk.lines:
            if line.is_add:
                continue
            if position < 0 or position >= len(lines):
                raise DiffApplicationError(
                    "Hunk extends beyond file end",
                    hunk, hunk_index, line.content, EOF_MARKER,
                )
            actual = lines[position]
            if actual != line.content:
                raise DiffApplicationError(
                    f"Context mismatch at line {position + 1}",
                    hunk, hunk_index, line.content, actual,
                )
            position += 1

    def validate(self, original: str, diff: DiffResult) -> DiffValidationResult:
        """Check every hunk against `original` without raising or mutating."""
        if diff.is_empty:
            return DiffValidationResult.ok()

        lines = split_lines(original)
        mismatches: List[ContextMismatch] = []

        for hunk_index, hunk in enumerate(diff.hunks):
            position = hunk.old_start - 1
            for line in hunk.lines:
                if line.is_add:
                    continue
                if position < 0 or position >= len(lines):
                    mismatches.append(ContextMismatch(hunk_index, position + 1, line.content, EOF_MARKER))
                elif lines[position] != line.content:
                    mismatches.append(ContextMismatch(hunk_index, position + 1, line.content, lines[position]))
                position += 1

        if mismatches:
            return DiffValidationResult(False, mismatches)
        return DiffValidationResult.ok()


def apply_diff(original: str, diff: DiffResult) -> str:
    """Module-level convenience wrapper around UnifiedDiffApplicator.apply."""
    return UnifiedDiffApplicator().apply(original, diff)
