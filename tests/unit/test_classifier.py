"""
Unit tests for doctrans/classifier.py - JobClassifier decision table
"""
from pathlib import Path

import pytest

from doctrans.classifier import JobClassifier, Skip, SkipReason
from doctrans.git_service import GitService
from doctrans.jobs import IncrementalJob, NewJob


@pytest.fixture
def setup(git_repo, german):
    """Repository with docs/ as source and de/ as target directory."""
    source_dir = git_repo.path / "docs"
    target_dir = git_repo.path / "de"
    classifier = JobClassifier(GitService(git_repo.path), source_dir)

    def classify(relative: str, **kwargs):
        path = source_dir / relative
        return classifier.classify(
            path, path.read_text(encoding="utf-8"), target_dir, german, **kwargs
        )

    return git_repo, target_dir, classify


def write_translation(target_dir: Path, relative: str, commit: str, body: str = "# Hallo\n"):
    file = target_dir / relative
    file.parent.mkdir(parents=True, exist_ok=True)
    file.write_text(f"---\ncommit: {commit}\n---\n\n{body}", encoding="utf-8")
    return file


class TestClassification:
    """Test every row of the classification table."""

    def test_no_translation_is_new(self, setup):
        repo, target_dir, classify = setup
        head = repo.commit_file("docs/guide.md", "# Hello\n")

        job = classify("guide.md", instructions="Formal", translatable_fields=["title"])

        assert isinstance(job, NewJob)
        assert job.current_commit == head
        assert job.target_file == target_dir / "guide.md"
        assert job.instructions == "Formal"
        assert job.translatable_fields == ["title"]

    def test_nested_target_path_mirrors_source(self, setup):
        repo, target_dir, classify = setup
        repo.commit_file("docs/a/b/deep.md", "# Deep\n")
        assert classify("a/b/deep.md").target_file == target_dir / "a" / "b" / "deep.md"

    def test_up_to_date_is_skipped(self, setup):
        repo, target_dir, classify = setup
        head = repo.commit_file("docs/guide.md", "# Hello\n")
        write_translation(target_dir, "guide.md", head)

        assert classify("guide.md") == Skip(repo.path / "docs" / "guide.md", SkipReason.UP_TO_DATE)

    def test_changed_source_is_incremental(self, setup):
        repo, target_dir, classify = setup
        first = repo.commit_file("docs/guide.md", "# Hello\n")
        write_translation(target_dir, "guide.md", first)
        head = repo.commit_file("docs/guide.md", "# Hello\n\nNew paragraph.\n")

        job = classify("guide.md")

        assert isinstance(job, IncrementalJob)
        assert job.current_commit == head
        assert job.translated_commit == first
        assert job.commit_count == 1
        assert job.original_source == "# Hello\n"
        assert "+New paragraph." in job.diff
        assert job.existing_translation_body == "# Hallo\n"

    def test_translation_without_commit_field_is_new(self, setup):
        repo, target_dir, classify = setup
        repo.commit_file("docs/guide.md", "# Hello\n")
        (target_dir).mkdir()
        (target_dir / "guide.md").write_text("# Hallo\n", encoding="utf-8")

        assert isinstance(classify("guide.md"), NewJob)

    def test_unknown_translated_revision_is_new(self, setup):
        repo, target_dir, classify = setup
        repo.commit_file("docs/guide.md", "# Hello\n")
        write_translation(target_dir, "guide.md", "2" * 40)

        assert isinstance(classify("guide.md"), NewJob)

    def test_uncommitted_changes_are_skipped(self, setup):
        repo, target_dir, classify = setup
        repo.commit_file("docs/guide.md", "# Hello\n")
        repo.write("docs/guide.md", "# Hello edited\n")

        outcome = classify("guide.md")
        assert isinstance(outcome, Skip)
        assert outcome.reason is SkipReason.UNCOMMITTED

    def test_new_untracked_file_counts_as_uncommitted(self, setup):
        """A file git status reports as untracked is not clean."""
        repo, target_dir, classify = setup
        repo.commit_file("docs/other.md", "# Other\n")
        repo.write("docs/guide.md", "# Hello\n")

        assert classify("guide.md").reason is SkipReason.UNCOMMITTED

    def test_ignored_file_without_history_is_untracked(self, setup):
        repo, target_dir, classify = setup
        repo.commit_file(".gitignore", "docs/ignored.md\n")
        repo.write("docs/ignored.md", "# Ignored\n")

        outcome = classify("ignored.md")
        assert isinstance(outcome, Skip)
        assert outcome.reason is SkipReason.UNTRACKED

    def test_classification_does_not_write(self, setup):
        repo, target_dir, classify = setup
        repo.commit_file("docs/guide.md", "# Hello\n")
        classify("guide.md")
        assert not target_dir.exists()


class TestReporting:
    """Test dry-run report lines."""

    def test_relative_path(self, setup):
        repo, target_dir, classify = setup
        classifier = JobClassifier(GitService(repo.path), repo.path / "docs")
        assert classifier.relative_path(repo.path / "docs" / "x" / "y.md") == Path("x/y.md")

    def test_report_lines(self, setup, caplog):
        repo, target_dir, classify = setup
        first = repo.commit_file("docs/guide.md", "# Hello\n")
        write_translation(target_dir, "guide.md", first)
        repo.commit_file("docs/guide.md", "# Hello\n\nMore.\n")
        repo.commit_file("docs/new.md", "# New\n")
        classifier = JobClassifier(GitService(repo.path), repo.path / "docs")

        update = classify("guide.md")
        new = classify("new.md")
        with caplog.at_level("INFO"):
            classifier.report_job(update, Path("guide.md"))
            classifier.report_job(new, Path("new.md"))
            classifier.report_up_to_date(Path("done.md"))

        messages = [record.getMessage() for record in caplog.records]
        assert f"[UPDATE] guide.md: {first[:7]} -> {update.current_commit[:7]} (1 commits)" in messages
        assert "[NEW] new.md" in messages
        assert "[SKIP] done.md (up to date)" in messages
