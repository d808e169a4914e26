"""
Configuration module for doctrans.
"""
from .constants import *
from .logging_config import (
    setup_logger, get_logger, set_console_level, enable_file_logging, disable_file_logging
)
from .settings import Settings, TargetConfig, settings

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    'set_console_level',
    'enable_file_logging',
    'disable_file_logging',
    # Settings
    'Settings',
    'TargetConfig',
    'settings',
    # Constants (all exported via *)
]
