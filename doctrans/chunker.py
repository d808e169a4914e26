#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
DocumentSplitter - Heading-aligned chunking of oversized Markdown bodies.

Large documents are cut at ATX headings (``#`` .. ``######``) so that every
chunk lands inside a size band around the target size. Sizes are measured in
UTF-8 bytes, never in characters.

Usage:
    from doctrans.chunker import DocumentSplitter

    splitter = DocumentSplitter(target_size=32 * 1024)
    for chunk in splitter.split(body):
        print(chunk.index, chunk.heading_text, chunk.size_in_bytes)

Classes:
    DocumentChunk: One contiguous slice of the body.
    DocumentSplitter: The splitting engine.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from config.constants import CHUNK_DEFAULT_TARGET_SIZE, CHUNK_SIZE_TOLERANCE

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$", re.MULTILINE)


@dataclass(frozen=True)
class DocumentChunk:
    """
    A contiguous slice of a document body.

    Attributes:
        index: Position of the chunk (0-based).
        start_offset: UTF-8 byte offset of the first byte in the body.
        end_offset: UTF-8 byte offset one past the last byte.
        content: The literal text of the slice.
        heading_level: 1-6 when the chunk starts at a heading, 0 otherwise.
        heading_text: Text of that heading, if any.
    """
    index: int
    start_offset: int
    end_offset: int
    content: str
    heading_level: int = 0
    heading_text: Optional[str] = None

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"index must not be negative: {self.index}")
        if self.start_offset < 0 or self.end_offset < self.start_offset:
            raise ValueError(f"invalid offsets: {self.start_offset}..{self.end_offset}")
        if not 0 <= self.heading_level <= 6:
            raise ValueError(f"heading_level must be between 0 and 6: {self.heading_level}")

    @property
    def size_in_bytes(self) -> int:
        return len(self.content.encode("utf-8"))

    @property
    def is_intro(self) -> bool:
        return self.heading_level == 0


@dataclass(frozen=True)
class _Heading:
    level: int
    char_offset: int
    byte_offset: int
    text: str


class DocumentSplitter:
    """
    Split Markdown bodies into ordered, heading-aligned chunks.

    Attributes:
        target_size: Desired chunk size in bytes.
        min_size: Lower bound of the acceptable band.
        max_size: Upper bound of the acceptable band.
    """

    def __init__(self, target_size: int = CHUNK_DEFAULT_TARGET_SIZE,
                 tolerance: float = CHUNK_SIZE_TOLERANCE):
        if target_size <= 0:
            raise ValueError("target_size must be positive")
        if not 0 < tolerance < 1:
            raise ValueError("tolerance must be between 0 and 1 (exclusive)")
        self.target_size = target_size
        self.tolerance = tolerance
        self.min_size = int(target_size * (1 - tolerance))
        self.max_size = int(target_size * (1 + tolerance))

    def needs_split(self, body: str) -> bool:
        return len(body.encode("utf-8")) > self.target_size

    def split(self, body: str) -> List[DocumentChunk]:
        """
        Split `body` into chunks whose concatenation is exactly `body`.

        A body under the target size, or one without headings, comes back as
        a single chunk.
        """
        if body is None:
            raise TypeError("body must not be None")

        total_bytes = len(body.encode("utf-8"))
        if total_bytes <= self.target_size:
            return [DocumentChunk(0, 0, total_bytes, body)]

        headings = self._find_headings(body)
        if not headings:
            return [DocumentChunk(0, 0, total_bytes, body)]

        return self._split_at_headings(body, total_bytes, headings)

    @staticmethod
    def _find_headings(body: str) -> List[_Heading]:
        headings = []
        byte_offset = 0
        last_char = 0
        for match in HEADING_PATTERN.finditer(body):
            # Incremental byte offset keeps this linear in the body length
            byte_offset += len(body[last_char:match.start()].encode("utf-8"))
            last_char = match.start()
            headings.append(_Heading(
                level=len(match.group(1)),
                char_offset=match.start(),
                byte_offset=byte_offset,
                text=match.group(2).strip(),
            ))
        return headings

    def _split_at_headings(self, body: str, total_bytes: int,
                           headings: List[_Heading]) -> List[DocumentChunk]:
        chunks: List[DocumentChunk] = []
        by_offset = {heading.byte_offset: heading for heading in headings}
        current_char = 0
        current_byte = 0

        first = headings[0]
        if first.byte_offset > self.min_size:
            chunks.append(DocumentChunk(0, 0, first.byte_offset, body[:first.char_offset]))
            current_char = first.char_offset
            current_byte = first.byte_offset

        while current_byte < total_bytes:
            if total_bytes - current_byte <= self.max_size:
                split_at = None
            else:
                split_at = self._find_best_split(headings, current_byte)

            end_char = split_at.char_offset if split_at else len(body)
            end_byte = split_at.byte_offset if split_at else total_bytes
            start_heading = by_offset.get(current_byte)

            chunks.append(DocumentChunk(
                index=len(chunks),
                start_offset=current_byte,
                end_offset=end_byte,
                content=body[current_char:end_char],
                heading_level=start_heading.level if start_heading else 0,
                heading_text=start_heading.text if start_heading else None,
            ))

            if split_at is None:
                break
            current_char = split_at.char_offset
            current_byte = split_at.byte_offset

        return chunks

    def _find_best_split(self, headings: List[_Heading], current_byte: int) -> Optional[_Heading]:
        candidates = []
        for heading in headings:
            if heading.byte_offset <= current_byte:
                continue
            size = heading.byte_offset - current_byte
            if self.min_size <= size <= self.max_size:
                candidates.append(heading)
            if size > self.max_size:
                break

        if not candidates:
            return self._find_closest_split(headings, current_byte)

        # min() keeps the first heading on equal levels
        return min(candidates, key=lambda heading: heading.level)

    def _find_closest_split(self, headings: List[_Heading], current_byte: int) -> Optional[_Heading]:
        last_valid = None
        for heading in headings:
            if heading.byte_offset <= current_byte:
                continue
            size = heading.byte_offset - current_byte
            if size >= self.min_size:
                if size > self.max_size and last_valid is not None:
                    return last_valid
                last_valid = heading
            if size > self.max_size:
                return heading
        return last_valid
