#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
UnifiedDiffParser - Parse unified diff text returned by the LLM.

The parser is lenient where models are sloppy (missing file headers, blank
lines between hunks, omitted counts, "\\ No newline at end of file" markers)
and strict where ambiguity would corrupt the output (unknown line prefixes,
garbage between hunks).

Usage:
    from doctrans.diff import UnifiedDiffParser

    result = UnifiedDiffParser().parse(diff_text)
    for hunk in result.hunks:
        print(hunk.header())
"""

import re
from typing import List, Tuple

from .exceptions import DiffParseError
from .models import DiffHunk, DiffLine, DiffResult

HUNK_HEADER_PATTERN = re.compile(r"^@@\s*-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s*@@")
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

FILE_OLD_PREFIX = "---"
FILE_NEW_PREFIX = "+++"
NO_NEWLINE_PREFIX = "\\"


def split_lines(text: str) -> List[str]:
    """Split on \\n, \\r\\n or \\r without producing a trailing empty element."""
    if not text:
        return []
    lines = LINE_BREAK_PATTERN.split(text)
    if text.endswith(("\n", "\r")):
        lines.pop()
    return lines


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


def _is_file_header(line: str) -> bool:
    return line.startswith(FILE_OLD_PREFIX) or line.startswith(FILE_NEW_PREFIX)


def _is_file_header_pair(lines: List[str], index: int) -> bool:
    """
    True for a "--- old" / "+++ new" pair directly followed by a hunk header.

    Inside a hunk "----" is a removed "---" line and "+++ x" an added "++ x",
    so a single line starting with three dashes or pluses is never enough.
    """
    if index + 2 >= len(lines):
        return False
    return (
        lines[index].startswith(FILE_OLD_PREFIX)
        and lines[index + 1].startswith(FILE_NEW_PREFIX)
        and HUNK_HEADER_PATTERN.match(lines[index + 2]) is not None
    )


class UnifiedDiffParser:
    """Stateless parser for unified diff text"""

    def parse(self, diff_text: str) -> DiffResult:
        """
        Parse unified diff text into hunks.

        Blank or whitespace-only input is a valid "no change" diff.

        Raises:
            DiffParseError: on a malformed hunk header or line prefix.
        """
        if diff_text is None:
            raise TypeError("diff_text must not be None")
        if not diff_text.strip():
            return DiffResult.empty()

        lines = split_lines(diff_text)
        hunks: List[DiffHunk] = []
        new_missing_newline = False
        index = 0

        # Optional file headers
        while index < len(lines):
            line = lines[index]
            if _is_file_header(line) or not line.strip():
                index += 1
            else:
                break

        while index < len(lines):
            line = lines[index]

            if not line.strip() or line.startswith(NO_NEWLINE_PREFIX):
                index += 1
                continue

            if _is_file_header_pair(lines, index):
                index += 2
                continue

            match = HUNK_HEADER_PATTERN.match(line)
            if match is None:
                raise DiffParseError(
                    f"Expected hunk header (@@ ... @@) but found: '{_truncate(line, 40)}'",
                    diff_text,
                    index + 1,
                )

            hunk, index, missing_newline = self._parse_hunk(lines, index, match, diff_text)
            hunks.append(hunk)
            new_missing_newline = new_missing_newline or missing_newline

        return DiffResult(tuple(hunks), new_missing_newline)

    def _parse_hunk(
        self,
        lines: List[str],
        header_index: int,
        match: "re.Match[str]",
        raw_diff: str,
    ) -> Tuple[DiffHunk, int, bool]:
        old_start = int(match.group(1))
        old_count = int(match.group(2)) if match.group(2) is not None else 1
        new_start = int(match.group(3))
        new_count = int(match.group(4)) if match.group(4) is not None else 1

        diff_lines: List[DiffLine] = []
        old_read = 0
        new_read = 0
        missing_newline = False
        index = header_index + 1

        while index < len(lines):
            line = lines[index]

            if line.startswith(NO_NEWLINE_PREFIX):
                # Refers to the preceding line; only the new side matters
                if diff_lines and not diff_lines[-1].is_remove:
                    missing_newline = True
                index += 1
                continue

            if old_read >= old_count and new_read >= new_count:
                break
            if HUNK_HEADER_PATTERN.match(line):
                break
            # As content the pair would have to complete this hunk exactly
            completes_hunk = old_read + 1 == old_count and new_read + 1 == new_count
            if not completes_hunk and _is_file_header_pair(lines, index):
                break

            if line == "":
                # Editors and models strip the single space of empty context lines
                diff_lines.append(DiffLine.context(""))
                old_read += 1
                new_read += 1
            else:
                prefix, content = line[0], line[1:]
                if prefix == " ":
                    diff_lines.append(DiffLine.context(content))
                    old_read += 1
                    new_read += 1
                elif prefix == "+":
                    diff_lines.append(DiffLine.add(content))
                    new_read += 1
                elif prefix == "-":
                    diff_lines.append(DiffLine.remove(content))
                    old_read += 1
                else:
                    raise DiffParseError(
                        f"Invalid line prefix '{prefix}' - expected ' ', '+', or '-'",
                        raw_diff,
                        index + 1,
                    )

            index += 1

        hunk = DiffHunk(old_start, old_count, new_start, new_count, tuple(diff_lines))
        return hunk, index, missing_newline

    def is_valid_diff_format(self, diff_text: str) -> bool:
        """Cheap check: blank text or at least one hunk header."""
        if not diff_text or not diff_text.strip():
            return True
        return any(HUNK_HEADER_PATTERN.match(line) for line in split_lines(diff_text))


def parse_unified_diff(diff_text: str) -> DiffResult:
    """Module-level convenience wrapper around UnifiedDiffParser.parse."""
    return UnifiedDiffParser().parse(diff_text)
