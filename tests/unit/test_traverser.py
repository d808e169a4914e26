"""
Unit tests for doctrans/traverser.py - source enumeration and instructions
"""
import os

import pytest

from doctrans.traverser import Traverser


def write(path, content="# Doc\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestTraversal:
    """Test file selection and ordering."""

    def test_sorted_markdown_files(self, temp_dir):
        write(temp_dir / "b.md")
        write(temp_dir / "a.md")
        write(temp_dir / "sub" / "c.MD")
        write(temp_dir / "notes.txt")

        paths = [s.path for s in Traverser(temp_dir).traverse()]
        root = temp_dir.resolve()

        assert paths == [root / "a.md", root / "b.md", root / "sub" / "c.MD"]

    def test_content_is_read(self, temp_dir):
        write(temp_dir / "a.md", "# Größe\n")
        (source,) = list(Traverser(temp_dir).traverse())
        assert source.content == "# Größe\n"

    def test_custom_regex(self, temp_dir):
        write(temp_dir / "a.md")
        write(temp_dir / "b.markdown")
        paths = [s.path.name for s in Traverser(temp_dir, r".*\.markdown").traverse()]
        assert paths == ["b.markdown"]

    def test_exclusion_patterns_use_relative_path(self, temp_dir):
        write(temp_dir / "drafts" / "x.md")
        write(temp_dir / "guide" / "y.md")
        write(temp_dir / "guide" / "CHANGELOG.md")

        traverser = Traverser(temp_dir, exclusion_patterns=[r"^drafts/", r"CHANGELOG", "  "])
        names = [s.path.name for s in traverser.traverse()]

        assert names == ["y.md"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinks_skipped(self, temp_dir):
        real = write(temp_dir / "real.md")
        try:
            (temp_dir / "link.md").symlink_to(real)
        except OSError:
            pytest.skip("cannot create symlinks")
        names = [s.path.name for s in Traverser(temp_dir).traverse()]
        assert names == ["real.md"]

    def test_missing_source_dir(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            list(Traverser(temp_dir / "missing").traverse())

    def test_source_dir_is_file(self, temp_dir):
        file = write(temp_dir / "a.md")
        with pytest.raises(NotADirectoryError):
            list(Traverser(file).traverse())


class TestInstructions:
    """Test directory scoped instruction manifests."""

    def test_no_instructions(self, temp_dir):
        write(temp_dir / "a.md")
        (source,) = list(Traverser(temp_dir).traverse())
        assert source.instruction_files == []
        assert source.instructions is None

    def test_inherited_and_added(self, temp_dir):
        write(temp_dir / "style.txt", "Use formal address.")
        write(temp_dir / ".doctrans-instructions", "style.txt")
        write(temp_dir / "api" / "terms.txt", "Keep 'endpoint' untranslated.")
        write(temp_dir / "api" / ".doctrans-instructions", " terms.txt ,")
        write(temp_dir / "api" / "ref.md")
        write(temp_dir / "top.md")

        sources = {s.path.name: s for s in Traverser(temp_dir).traverse()}

        assert sources["top.md"].instructions == "Use formal address."
        assert sources["ref.md"].instructions == "Use formal address.\n\nKeep 'endpoint' untranslated."
        assert [p.name for p in sources["ref.md"].instruction_files] == ["style.txt", "terms.txt"]

    def test_replace_manifest_drops_inherited(self, temp_dir):
        write(temp_dir / "style.txt", "Formal.")
        write(temp_dir / ".doctrans-instructions", "style.txt")
        write(temp_dir / "blog" / "casual.txt", "Casual.")
        write(temp_dir / "blog" / ".doctrans-instructions.replace", "casual.txt")
        write(temp_dir / "blog" / "post.md")

        (source,) = [s for s in Traverser(temp_dir).traverse() if s.path.name == "post.md"]
        assert source.instructions == "Casual."

    def test_replace_and_add_in_same_directory(self, temp_dir):
        write(temp_dir / "a.txt", "A")
        write(temp_dir / "b.txt", "B")
        write(temp_dir / ".doctrans-instructions.replace", "a.txt")
        write(temp_dir / ".doctrans-instructions", "b.txt")
        write(temp_dir / "doc.md")

        (source,) = list(Traverser(temp_dir).traverse())
        assert source.instructions == "A\n\nB"

    def test_manifest_entries_relative_to_manifest(self, temp_dir):
        write(temp_dir / "shared" / "glossary.txt", "Glossary.")
        write(temp_dir / "guide" / ".doctrans-instructions", "../shared/glossary.txt")
        write(temp_dir / "guide" / "intro.md")

        (source,) = [s for s in Traverser(temp_dir).traverse() if s.path.name == "intro.md"]
        assert source.instructions == "Glossary."

    def test_missing_instruction_file_is_skipped(self, temp_dir, caplog):
        write(temp_dir / ".doctrans-instructions", "missing.txt")
        write(temp_dir / "a.md")

        with caplog.at_level("WARNING"):
            (source,) = list(Traverser(temp_dir).traverse())

        assert source.instructions is None
        assert any("Instruction file not found" in r.getMessage() for r in caplog.records)

    def test_parent_of_source_dir_not_consulted(self, temp_dir):
        write(temp_dir / "outside.txt", "Outside.")
        write(temp_dir / ".doctrans-instructions", "outside.txt")
        write(temp_dir / "docs" / "a.md")

        (source,) = list(Traverser(temp_dir / "docs").traverse())
        assert source.instructions is None
