"""
Helper Utilities Module.

Small generic helpers shared across the receipt extraction system.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - collapse_whitespace: Squash whitespace runs into single spaces
    - utc_today: Current calendar date in UTC
"""

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Union

_WHITESPACE_RE = re.compile(r'\s+')


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs")
        PosixPath('outputs')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the lowercase file extension, including the dot.

    Example:
        >>> get_file_extension("receipt.JPG")
        '.jpg'
        >>> get_file_extension("noextension")
        ''
    """
    return Path(filepath).suffix.lower()


def collapse_whitespace(text: str) -> str:
    """
    Replace every whitespace run with one space and trim the result.

    Example:
        >>> collapse_whitespace("  FRESH   GROCERY\\tMART ")
        'FRESH GROCERY MART'
    """
    return _WHITESPACE_RE.sub(' ', text).strip()


def utc_today() -> date:
    """Return the current calendar date in UTC."""
    return datetime.now(timezone.utc).date()
