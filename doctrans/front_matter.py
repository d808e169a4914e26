"""
Front matter field exchange format.

Fields travel to and from the LLM as marker blocks::

    [[title]]
    Getting started
    [[/title]]

The same convention is used for the assembled translation payload so one
parser serves every phase combination.
"""

import re
from typing import Dict, List, Optional

from .document import MarkdownDocument

FIELD_SECTION_HEADER = "=== FRONT MATTER FIELDS TO TRANSLATE ==="
FIELD_BLOCK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]\s*\n(.*?)\n\[\[/\1\]\]", re.DOTALL)
EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


class FrontMatterIncompleteError(ValueError):
    """The model response lacks one or more requested fields."""

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = missing_fields
        super().__init__(
            "Translation incomplete: missing front matter fields: "
            f"[{', '.join(missing_fields)}]"
        )


def extract_translatable_fields(document: MarkdownDocument,
                                field_names: Optional[List[str]]) -> Dict[str, str]:
    """Configured fields that are present with a non-blank value, in configured order."""
    if not field_names:
        return {}
    return document.extract_fields(field_names)


def format_field_block(name: str, value: str) -> str:
    return f"[[{name}]]\n{value}\n[[/{name}]]\n\n"


def format_fields_for_prompt(fields: Dict[str, str]) -> str:
    if not fields:
        return ""
    blocks = "".join(format_field_block(name, value) for name, value in fields.items())
    return f"\n\n{FIELD_SECTION_HEADER}\n{blocks}"


def parse_translated_fields(response: str, expected_fields: Dict[str, str]) -> Dict[str, str]:
    """
    Read translated field values back from a model response.

    Raises:
        FrontMatterIncompleteError: when an expected field is missing or blank.
    """
    result: Dict[str, str] = {}
    if not expected_fields:
        return result

    for match in FIELD_BLOCK_PATTERN.finditer(response):
        name = match.group(1)
        value = match.group(2).strip()
        if name in expected_fields and value:
            result[name] = value

    missing = [name for name in expected_fields if name not in result]
    if missing:
        raise FrontMatterIncompleteError(missing)

    # Keep the order in which fields were requested
    return {name: result[name] for name in expected_fields}


def extract_body_from_response(response: str, field_names: Dict[str, str]) -> str:
    """Strip field blocks and the section header, leaving only the body text."""
    if not field_names:
        return response

    result = response
    for name in field_names:
        start_tag = f"[[{name}]]"
        end_tag = f"[[/{name}]]"
        start = result.find(start_tag)
        while start >= 0:
            end = result.find(end_tag, start)
            if end <= start:
                break
            result = result[:start] + result[end + len(end_tag):]
            start = result.find(start_tag)

    result = result.replace(FIELD_SECTION_HEADER, "")
    result = EXCESS_BLANK_LINES.sub("\n\n", result)
    return result.strip()
