"""
Utility Module for the Receipt OCR Extraction System.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - Small text and file helpers
"""

from .logger import setup_logger, get_logger
from .helpers import ensure_directory, get_file_extension, collapse_whitespace, utc_today

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'collapse_whitespace',
    'utc_today'
]
