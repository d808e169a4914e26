"""
Unit tests for doctrans/chunker.py - DocumentSplitter
"""
import pytest

from doctrans.chunker import DocumentChunk, DocumentSplitter


def _section(heading: str, size: int, fill: str = "x") -> str:
    """A heading line followed by filler so that the whole section is `size` bytes."""
    head = heading + "\n"
    repeat = (size - len(head.encode("utf-8")) - 1) // len(fill.encode("utf-8"))
    return head + fill * repeat + "\n"


def _assert_partition(body: str, chunks):
    """Chunks are ordered, contiguous and concatenate back to the body."""
    assert "".join(chunk.content for chunk in chunks) == body
    assert [chunk.index for chunk in chunks] == list(range(len(chunks)))
    assert chunks[0].start_offset == 0
    assert chunks[-1].end_offset == len(body.encode("utf-8"))
    for previous, current in zip(chunks, chunks[1:]):
        assert previous.end_offset == current.start_offset
    for chunk in chunks:
        assert chunk.end_offset - chunk.start_offset == chunk.size_in_bytes


class TestSplitterConfig:
    """Test construction and size band."""

    def test_size_band(self):
        splitter = DocumentSplitter(target_size=100, tolerance=0.2)
        assert splitter.min_size == 80
        assert splitter.max_size == 120

    @pytest.mark.parametrize("target_size", [0, -5])
    def test_invalid_target_size(self, target_size):
        with pytest.raises(ValueError):
            DocumentSplitter(target_size=target_size)

    @pytest.mark.parametrize("tolerance", [0, 1, 1.5, -0.1])
    def test_invalid_tolerance(self, tolerance):
        with pytest.raises(ValueError):
            DocumentSplitter(target_size=100, tolerance=tolerance)

    def test_needs_split_counts_bytes(self):
        """Multi-byte characters count with their encoded size."""
        splitter = DocumentSplitter(target_size=10, tolerance=0.2)
        assert not splitter.needs_split("a" * 10)
        assert splitter.needs_split("ü" * 6)


class TestSplitSimple:
    """Test bodies that are not split."""

    def test_small_body_single_chunk(self):
        body = "# Title\n\nShort.\n"
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        assert len(chunks) == 1
        assert chunks[0].content == body
        assert chunks[0].is_intro

    def test_empty_body(self):
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split("")
        assert len(chunks) == 1
        assert chunks[0].content == ""

    def test_large_body_without_headings(self):
        """Without headings there is nothing to cut at."""
        body = "plain text line\n" * 50
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)
        assert len(chunks) == 1
        assert chunks[0].content == body

    def test_none_rejected(self):
        with pytest.raises(TypeError):
            DocumentSplitter(target_size=100, tolerance=0.2).split(None)


class TestSplitAtHeadings:
    """Test heading-aligned splitting."""

    def test_many_sections_partition(self):
        """Every chunk boundary is a heading and nothing is lost."""
        body = "".join(_section(f"## Section {i}", 65) for i in range(10))
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        assert len(chunks) > 1
        _assert_partition(body, chunks)
        for chunk in chunks:
            assert chunk.content.startswith("## Section ")
            assert chunk.heading_level == 2

    def test_prefers_higher_level_heading(self):
        """Inside the band the heading with the lowest level number wins."""
        body = (
            _section("## A", 85, "a")
            + _section("### B", 25, "b")
            + _section("## C", 206, "c")
        )
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        _assert_partition(body, chunks)
        assert len(chunks) == 2
        assert chunks[0].end_offset == 110
        assert chunks[1].heading_text == "C"
        assert chunks[1].heading_level == 2

    def test_tie_goes_to_first_heading(self):
        """Equal levels inside the band: the earlier heading is used."""
        body = (
            _section("## A", 85, "a")
            + _section("## B", 25, "b")
            + _section("## C", 206, "c")
        )
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        _assert_partition(body, chunks)
        assert chunks[0].end_offset == 85
        assert chunks[1].heading_text == "B"

    def test_long_intro_gets_own_chunk(self):
        """Text before the first heading larger than the minimum is its own chunk."""
        body = "i" * 89 + "\n" + _section("## A", 156, "a")
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        _assert_partition(body, chunks)
        assert len(chunks) == 2
        assert chunks[0].is_intro
        assert chunks[0].heading_text is None
        assert chunks[1].heading_text == "A"

    def test_short_intro_merged_into_first_chunk(self):
        """A short intro stays with the first section."""
        body = "intro\n" + "".join(_section(f"## S{i}", 65) for i in range(6))
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        _assert_partition(body, chunks)
        assert chunks[0].content.startswith("intro\n## S0")
        assert chunks[0].heading_level == 0

    def test_oversized_section_is_not_cut(self):
        """A section larger than the band is kept whole."""
        body = _section("# Big", 400) + _section("# Small", 40)
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        _assert_partition(body, chunks)
        assert chunks[0].content == _section("# Big", 400)

    def test_offsets_are_utf8_bytes(self):
        """Offsets count encoded bytes for non-ASCII text."""
        body = "".join(_section(f"## Größe {i}", 66, "ä") for i in range(8))
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)

        _assert_partition(body, chunks)
        assert len(chunks) > 1

    def test_heading_requires_space(self):
        """'#hashtag' is not a heading."""
        body = "#hashtag\n" + "x" * 300 + "\n"
        chunks = DocumentSplitter(target_size=100, tolerance=0.2).split(body)
        assert len(chunks) == 1


class TestDocumentChunk:
    """Test the chunk value object."""

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            DocumentChunk(-1, 0, 0, "")

    def test_inverted_offsets_rejected(self):
        with pytest.raises(ValueError):
            DocumentChunk(0, 10, 5, "")

    def test_heading_level_range(self):
        with pytest.raises(ValueError):
            DocumentChunk(0, 0, 1, "x", heading_level=7)
