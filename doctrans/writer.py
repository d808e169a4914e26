"""
Writer - Persists translated documents.

The translated payload (field blocks + body) is merged with the source front
matter: every source property is copied, translated fields overwrite their
source values in place, and the ``commit`` field records the source revision
the translation corresponds to.
"""

from pathlib import Path

from config.constants import COMMIT_FIELD
from config.logging_config import get_logger

from .document import MarkdownDocument
from .front_matter import extract_body_from_response, parse_translated_fields
from .jobs import IncrementalJob, TranslationJob

logger = get_logger(__name__)


def build_translated_document(job: TranslationJob, translated_content: str) -> MarkdownDocument:
    """
    Assemble the target document for a finished job.

    Raises:
        FrontMatterIncompleteError: the payload lacks a field the job translated.
    """
    expected = job.extracted_translatable_fields()
    translated_fields = parse_translated_fields(translated_content, expected)
    body = extract_body_from_response(translated_content, expected)
    if body and not body.endswith("\n"):
        body += "\n"

    doc = MarkdownDocument.from_body(body)
    doc.merge_front_matter_properties(job.source_document.properties)
    if isinstance(job, IncrementalJob):
        # Unchanged fields were not re-sent; keep their existing translation
        existing = MarkdownDocument(job.existing_translation)
        for name, value in existing.extract_fields(job.translatable_fields or []).items():
            if name in doc.properties and name not in translated_fields:
                doc.set_property(name, value)
    for name, value in translated_fields.items():
        doc.set_property(name, value)
    doc.set_property(COMMIT_FIELD, job.current_commit)
    return doc


class Writer:
    """Writes documents as UTF-8, creating parent directories as needed"""

    def write(self, document: MarkdownDocument, target_file: Path) -> Path:
        target = Path(target_file).absolute()
        target.parent.mkdir(parents=True, exist_ok=True)

        front_matter = document.serialize_front_matter()
        body = document.body
        if front_matter and body:
            front_matter += "\n"
        target.write_text(front_matter + body, encoding="utf-8")
        logger.debug(f"Wrote {target}")
        return target
