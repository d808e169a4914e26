"""
Logging setup for doctrans.

Handlers live on the top-level package loggers ("doctrans", "ai_providers",
"config"); module loggers obtained with get_logger(__name__) propagate to them.
The console shows bare messages since they double as the CLI report.
The rotating file log is attached only by enable_file_logging(), so importing
a module never creates files.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Set, Union

from .constants import (
    LOG_LEVEL, LOG_FORMAT, LOG_CONSOLE_FORMAT, LOG_FILE_NAME,
    LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
)

DEFAULT_LOGGER_NAME = 'doctrans'

_configured_packages: Set[str] = set()
_file_handler: Optional[logging.handlers.RotatingFileHandler] = None


def _configure_package_logger(package: str) -> logging.Logger:
    """Attach the console handler (and the file handler, if enabled) once."""
    package_logger = logging.getLogger(package)
    if package in _configured_packages:
        return package_logger

    package_logger.setLevel(getattr(logging, LOG_LEVEL))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(LOG_CONSOLE_FORMAT))
    package_logger.addHandler(console)

    if _file_handler is not None:
        package_logger.addHandler(_file_handler)

    _configured_packages.add(package)
    return package_logger


def setup_logger(name: str = None) -> logging.Logger:
    """
    Get a logger whose top-level package logger is configured.

    Usage:
        from config.logging_config import get_logger
        logger = get_logger(__name__)
        logger.info("[NEW] guide.md")

    Args:
        name: Dotted logger name. If None, uses 'doctrans'.

    Returns:
        logging.Logger that propagates to its package logger.
    """
    name = name or DEFAULT_LOGGER_NAME
    _configure_package_logger(name.split('.')[0])
    return logging.getLogger(name)


def get_logger(name: str = None) -> logging.Logger:
    """Alias for setup_logger."""
    return setup_logger(name)


def enable_file_logging(log_dir: Union[str, Path]) -> Path:
    """
    Write DEBUG and above of every package logger to <log_dir>/doctrans.log.

    Calling it again with the same directory is a no-op; another directory
    replaces the previous file handler.

    Returns:
        Path of the log file.

    Raises:
        OSError: if the directory cannot be created.
    """
    global _file_handler

    log_file = (Path(log_dir).expanduser() / LOG_FILE_NAME).resolve()
    if _file_handler is not None:
        if Path(_file_handler.baseFilename) == log_file:
            return log_file
        disable_file_logging()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for package in _configured_packages:
        logging.getLogger(package).addHandler(handler)
    _file_handler = handler
    return log_file


def disable_file_logging() -> None:
    """Detach and close the file handler installed by enable_file_logging()."""
    global _file_handler

    if _file_handler is None:
        return
    for package in _configured_packages:
        logging.getLogger(package).removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None


def set_console_level(level: int) -> None:
    """Adjust console verbosity of every configured package logger."""
    for package in _configured_packages:
        for handler in logging.getLogger(package).handlers:
            # RotatingFileHandler subclasses StreamHandler; only touch the console
            if type(handler) is logging.StreamHandler:
                handler.setLevel(level)
