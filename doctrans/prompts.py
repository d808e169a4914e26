"""
Prompts for the translation phases.

Templates use ``{{name}}`` placeholders. Built-in templates live in this
module; a prompt directory can override any of them with ``<name>.txt``.
"""

import re
from pathlib import Path
from typing import Dict, Optional

from config.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)}}")

# =============================================================================
# NEW DOCUMENT
# =============================================================================

TRANSLATE_NEW_SYSTEM = """You are a professional technical translator.
Translate Markdown documentation into {{locale}} ({{localeTag}}).

RULES:
1. Preserve the Markdown structure exactly: headings, lists, tables, block quotes and line breaks.
2. Never translate code blocks, inline code, URLs, link targets, HTML tags or front matter keys.
3. Translate link texts, image alt texts and table contents.
4. Keep product names and identifiers in their original form.
5. Output ONLY the translated document. No explanations, no surrounding code fences.
{{customInstructions}}"""

TRANSLATE_NEW_USER = """Translate the following Markdown document into {{locale}}:

{{sourceContent}}"""

# =============================================================================
# INCREMENTAL UPDATE (UNIFIED DIFF)
# =============================================================================

TRANSLATE_INCREMENTAL_DIFF_SYSTEM = """You are a professional technical translator maintaining
a {{locale}} ({{localeTag}}) translation of Markdown documentation.

You receive the CURRENT TRANSLATION and a unified diff describing how the
ORIGINAL SOURCE changed. Produce a unified diff that updates the current
translation so it reflects those source changes.

OUTPUT FORMAT:
- Output ONLY a unified diff against the current translation (hunks starting with "@@ -a,b +c,d @@").
- Context lines start with a single space, removed lines with "-", added lines with "+".
- Context and removed lines must match the current translation EXACTLY, character for character.
- Line numbers refer to the current translation, not to the source.
- Do not touch parts of the translation that are unaffected by the source changes.
- If no change of the translation is needed, output nothing at all.

TRANSLATION RULES:
- Preserve Markdown structure, code blocks, inline code, URLs and link targets.
- Keep terminology consistent with the existing translation.
{{customInstructions}}"""

TRANSLATE_INCREMENTAL_DIFF_USER = """CURRENT TRANSLATION:
{{existingTranslation}}

SOURCE DIFF:
{{diff}}

Respond with the unified diff for the translation."""

TRANSLATE_INCREMENTAL_DIFF_RETRY = """Your previous answer could not be applied to the current translation.

ERROR:
{{errorMessage}}

YOUR PREVIOUS ANSWER:
{{invalidResponse}}

CURRENT TRANSLATION:
{{existingTranslation}}

SOURCE DIFF:
{{diff}}

Respond again with a corrected unified diff. Context and removed lines must match
the current translation exactly and the hunk line numbers must be correct.
Output only the diff."""

# =============================================================================
# FRONT MATTER FIELDS
# =============================================================================

TRANSLATE_FRONTMATTER_SYSTEM = """You are a professional technical translator.
Translate document metadata fields into {{locale}} ({{localeTag}}).

Each field is given as:
[[field-name]]
value
[[/field-name]]

Return EVERY field in exactly the same format, keeping the field names and markers
unchanged and replacing only the values with their translation. Output nothing else.
{{customInstructions}}"""

TRANSLATE_FRONTMATTER_USER = """Translate the values of these fields into {{locale}}:{{frontMatterFields}}"""


BUILTIN_TEMPLATES: Dict[str, str] = {
    "translate-new-system": TRANSLATE_NEW_SYSTEM,
    "translate-new-user": TRANSLATE_NEW_USER,
    "translate-incremental-diff-system": TRANSLATE_INCREMENTAL_DIFF_SYSTEM,
    "translate-incremental-diff-user": TRANSLATE_INCREMENTAL_DIFF_USER,
    "translate-incremental-diff-retry": TRANSLATE_INCREMENTAL_DIFF_RETRY,
    "translate-frontmatter-system": TRANSLATE_FRONTMATTER_SYSTEM,
    "translate-frontmatter-user": TRANSLATE_FRONTMATTER_USER,
}


def interpolate(template: str, variables: Dict[str, str]) -> str:
    """Replace ``{{name}}`` for every name in `variables`; others stay verbatim."""
    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in variables and variables[name] is not None:
            return variables[name]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, template)


class PromptLoader:
    """
    Loads and renders prompt templates.

    Usage:
        loader = PromptLoader(prompt_dir=Path("prompts"))
        text = loader.render("translate-new-user", {"locale": "German", ...})
    """

    def __init__(self, prompt_dir: Optional[Path] = None):
        self.prompt_dir = Path(prompt_dir) if prompt_dir else None
        self._cache: Dict[str, str] = {}

    def load(self, name: str) -> str:
        """
        Raw template text.

        Raises:
            KeyError: if neither an override file nor a built-in template exists.
        """
        name = name[:-4] if name.endswith(".txt") else name
        if name in self._cache:
            return self._cache[name]

        text = None
        if self.prompt_dir is not None:
            override = self.prompt_dir / f"{name}.txt"
            if override.is_file():
                logger.debug(f"Using prompt override {override}")
                text = override.read_text(encoding="utf-8")
        if text is None:
            if name not in BUILTIN_TEMPLATES:
                raise KeyError(f"Unknown prompt template: {name}")
            text = BUILTIN_TEMPLATES[name]

        self._cache[name] = text
        return text

    def render(self, name: str, variables: Dict[str, str]) -> str:
        return interpolate(self.load(name), variables)
