"""
Unit tests for doctrans/writer.py - document assembly and output
"""
from pathlib import Path

import pytest

from doctrans.document import MarkdownDocument
from doctrans.front_matter import FrontMatterIncompleteError
from doctrans.jobs import IncrementalJob, NewJob
from doctrans.writer import Writer, build_translated_document

COMMIT = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"
OLD_COMMIT = "0f1e2d3c4b5a69788796a5b4c3d2e1f009876543"


def new_job(locale, content, fields=None):
    return NewJob(Path("docs/a.md"), Path("de/a.md"), locale, content, COMMIT,
                  translatable_fields=fields)


class TestBuildTranslatedDocument:
    """Test merging of source front matter with the translation."""

    def test_body_only(self, german):
        doc = build_translated_document(new_job(german, "# Hello\n"), "# Hallo")

        assert doc.body == "# Hallo\n"
        assert doc.properties == {"commit": [COMMIT]}

    def test_source_properties_copied_and_fields_replaced(self, german, sample_documents):
        job = new_job(german, sample_documents["with_front_matter"], fields=["title", "perex"])
        payload = (
            "[[title]]\nErste Schritte\n[[/title]]\n\n"
            "[[perex]]\nLerne die Grundlagen\n[[/perex]]\n\n"
            "# Erste Schritte"
        )
        doc = build_translated_document(job, payload)

        assert list(doc.properties) == ["title", "perex", "author", "commit"]
        assert doc.get_property("title") == "Erste Schritte"
        assert doc.get_property("perex") == "Lerne die Grundlagen"
        assert doc.get_property("author") == "Jane"
        assert doc.get_property("commit") == COMMIT
        assert doc.body == "# Erste Schritte\n"

    def test_missing_field_in_payload(self, german, sample_documents):
        job = new_job(german, sample_documents["with_front_matter"], fields=["title"])
        with pytest.raises(FrontMatterIncompleteError):
            build_translated_document(job, "# Erste Schritte")

    def test_commit_field_replaced(self, german):
        job = new_job(german, "---\ncommit: stale\n---\n# Hello\n")
        doc = build_translated_document(job, "# Hallo")
        assert doc.get_property("commit") == COMMIT

    def test_incremental_keeps_unchanged_translated_fields(self, german):
        """Fields that were not re-translated keep their existing translation."""
        job = IncrementalJob(
            source_file=Path("docs/a.md"),
            target_file=Path("de/a.md"),
            locale=german,
            source_content="---\ntitle: New title\nperex: Same\n---\n# Hello\n",
            current_commit=COMMIT,
            translatable_fields=["title", "perex"],
            original_source="---\ntitle: Old title\nperex: Same\n---\n# Hello\n",
            existing_translation=(
                f"---\ntitle: Alter Titel\nperex: Gleich\ncommit: {OLD_COMMIT}\n---\n# Hallo\n"
            ),
            diff="",
            translated_commit=OLD_COMMIT,
            commit_count=1,
        )
        doc = build_translated_document(job, "[[title]]\nNeuer Titel\n[[/title]]\n\n# Hallo")

        assert doc.get_property("title") == "Neuer Titel"
        assert doc.get_property("perex") == "Gleich"
        assert doc.get_property("commit") == COMMIT


class TestWriter:
    """Test writing target files."""

    def test_writes_front_matter_blank_line_and_body(self, temp_dir, german, sample_documents):
        job = new_job(german, sample_documents["with_front_matter"], fields=["title"])
        doc = build_translated_document(job, "[[title]]\nErste Schritte\n[[/title]]\n# Erste Schritte")
        target = temp_dir / "de" / "nested" / "a.md"

        written = Writer().write(doc, target)

        assert written == target
        assert target.read_text(encoding="utf-8") == (
            "---\n"
            "title: Erste Schritte\n"
            "perex: Learn the basics\n"
            "author: Jane\n"
            f"commit: {COMMIT}\n"
            "---\n"
            "\n"
            "# Erste Schritte\n"
        )

    def test_written_file_round_trips(self, temp_dir, german):
        doc = build_translated_document(new_job(german, "# Hello\n"), "# Hallo\n\nText.")
        target = Writer().write(doc, temp_dir / "a.md")

        reread = MarkdownDocument(target.read_text(encoding="utf-8"))
        assert reread.get_property("commit") == COMMIT
        assert reread.body == "# Hallo\n\nText.\n"

    def test_overwrites_existing_file(self, temp_dir, german):
        target = temp_dir / "a.md"
        target.write_text("old content", encoding="utf-8")
        Writer().write(build_translated_document(new_job(german, "# Hello\n"), "# Neu"), target)
        assert "old content" not in target.read_text(encoding="utf-8")

    def test_without_properties(self, temp_dir):
        target = Writer().write(MarkdownDocument.from_body("just body\n"), temp_dir / "b.md")
        assert target.read_text(encoding="utf-8") == "just body\n"
