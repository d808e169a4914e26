"""
Unified diff engine: parse LLM-produced diffs and apply them to translations.
"""

from .models import DiffLineType, DiffLine, DiffHunk, DiffResult
from .exceptions import (
    DiffParseError,
    DiffApplicationError,
    ContextMismatch,
    DiffValidationResult,
)
from .parser import UnifiedDiffParser, parse_unified_diff, split_lines
from .applicator import UnifiedDiffApplicator, apply_diff

__all__ = [
    # Model
    'DiffLineType',
    'DiffLine',
    'DiffHunk',
    'DiffResult',
    # Errors
    'DiffParseError',
    'DiffApplicationError',
    'ContextMismatch',
    'DiffValidationResult',
    # Parsing / applying
    'UnifiedDiffParser',
    'parse_unified_diff',
    'split_lines',
    'UnifiedDiffApplicator',
    'apply_diff',
]
