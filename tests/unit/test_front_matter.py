"""
Unit tests for doctrans/front_matter.py - field exchange format
"""
import pytest

from doctrans.document import MarkdownDocument
from doctrans.front_matter import (
    FIELD_SECTION_HEADER,
    FrontMatterIncompleteError,
    extract_body_from_response,
    extract_translatable_fields,
    format_field_block,
    format_fields_for_prompt,
    parse_translated_fields,
)


class TestExtractTranslatableFields:
    """Test selection of fields to translate."""

    def test_configured_fields_only(self, sample_documents):
        doc = MarkdownDocument(sample_documents["with_front_matter"])
        fields = extract_translatable_fields(doc, ["title", "perex"])
        assert fields == {"title": "Getting started", "perex": "Learn the basics"}

    def test_no_configuration(self, sample_documents):
        doc = MarkdownDocument(sample_documents["with_front_matter"])
        assert extract_translatable_fields(doc, None) == {}
        assert extract_translatable_fields(doc, []) == {}


class TestFormatting:
    """Test marker block formatting."""

    def test_field_block(self):
        assert format_field_block("title", "Hello") == "[[title]]\nHello\n[[/title]]\n\n"

    def test_fields_for_prompt(self):
        text = format_fields_for_prompt({"title": "Hello", "perex": "World"})
        assert text.startswith(f"\n\n{FIELD_SECTION_HEADER}\n")
        assert text.index("[[title]]") < text.index("[[perex]]")

    def test_empty_fields(self):
        assert format_fields_for_prompt({}) == ""


class TestParseTranslatedFields:
    """Test reading translated fields back."""

    def test_all_fields_present(self):
        response = "[[title]]\nHallo\n[[/title]]\n\n[[perex]]\nWelt\n[[/perex]]\n"
        parsed = parse_translated_fields(response, {"title": "Hello", "perex": "World"})
        assert parsed == {"title": "Hallo", "perex": "Welt"}

    def test_order_follows_request(self):
        response = "[[perex]]\nWelt\n[[/perex]]\n[[title]]\nHallo\n[[/title]]\n"
        parsed = parse_translated_fields(response, {"title": "Hello", "perex": "World"})
        assert list(parsed) == ["title", "perex"]

    def test_missing_field_raises(self):
        response = "[[title]]\nHallo\n[[/title]]\n"
        with pytest.raises(FrontMatterIncompleteError) as exc_info:
            parse_translated_fields(response, {"title": "Hello", "perex": "World"})

        assert exc_info.value.missing_fields == ["perex"]
        assert str(exc_info.value) == (
            "Translation incomplete: missing front matter fields: [perex]"
        )

    def test_blank_field_counts_as_missing(self):
        response = "[[title]]\n   \n[[/title]]\n"
        with pytest.raises(FrontMatterIncompleteError):
            parse_translated_fields(response, {"title": "Hello"})

    def test_unrequested_fields_ignored(self):
        response = "[[title]]\nHallo\n[[/title]]\n[[author]]\nJane\n[[/author]]\n"
        assert parse_translated_fields(response, {"title": "Hello"}) == {"title": "Hallo"}

    def test_multiline_value(self):
        response = "[[perex]]\nZeile eins\nZeile zwei\n[[/perex]]\n"
        assert parse_translated_fields(response, {"perex": "x"}) == {
            "perex": "Zeile eins\nZeile zwei"
        }

    def test_nothing_expected(self):
        assert parse_translated_fields("anything", {}) == {}

    def test_is_a_value_error(self):
        assert issubclass(FrontMatterIncompleteError, ValueError)


class TestExtractBody:
    """Test separating the body from field blocks."""

    def test_body_after_fields(self):
        payload = (
            f"\n\n{FIELD_SECTION_HEADER}\n"
            "[[title]]\nHallo\n[[/title]]\n\n"
            "# Hallo\n\nText.\n"
        )
        assert extract_body_from_response(payload, {"title": "Hello"}) == "# Hallo\n\nText."

    def test_no_fields_returns_response_unchanged(self):
        assert extract_body_from_response("# Body\n\n", {}) == "# Body\n\n"

    def test_repeated_blocks_removed(self):
        payload = "[[title]]\nA\n[[/title]]\nBody\n[[title]]\nB\n[[/title]]\n"
        assert extract_body_from_response(payload, {"title": "x"}) == "Body"
