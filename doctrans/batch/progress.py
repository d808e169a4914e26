"""
Text progress indicators for per-job log lines.
"""

from config.constants import PROGRESS_BAR_WIDTH


def format_progress_bar(completed: int, total: int, width: int = PROGRESS_BAR_WIDTH) -> str:
    """
    Fixed width bar with percentage.

    >>> format_progress_bar(5, 20)
    '[=====               ]  25%'
    """
    if total <= 0:
        completed, total = 0, 1
    completed = max(0, min(completed, total))
    percentage = completed * 100 // total
    filled = completed * width // total
    return f"[{'=' * filled}{' ' * (width - filled)}] {percentage:3d}%"


def format_elapsed(elapsed_ms: int) -> str:
    """``12.3s`` below one minute, ``2m 5s`` above."""
    if elapsed_ms < 60_000:
        return f"{elapsed_ms / 1000:.1f}s"
    minutes, remainder = divmod(elapsed_ms, 60_000)
    return f"{minutes}m {remainder // 1000}s"
