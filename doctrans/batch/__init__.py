"""
Batch execution of translation jobs.
"""

from .executor import BatchState, TranslationExecutor
from .progress import format_elapsed, format_progress_bar

__all__ = [
    'BatchState',
    'TranslationExecutor',
    'format_elapsed',
    'format_progress_bar',
]
