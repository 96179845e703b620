"""
Helper Utilities Module.

This module provides common utility functions used throughout the
proforma extraction system. Functions here should be generic and
reusable across different modules.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_timestamp: Generate formatted timestamps
    - utc_now_iso: Current UTC time as ISO-8601 string
    - collapse_whitespace: Squeeze whitespace runs to one space
    - truncate: Shorten text for log previews
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/reports")
        PosixPath('outputs/reports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the file extension from a filepath.

    Returns the extension in lowercase, including the dot.
    Returns empty string if no extension exists.

    Example:
        >>> get_file_extension("invoice.PDF")
        ".pdf"
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """
    Generate a formatted timestamp string.

    Args:
        format_str: strftime format string.

    Returns:
        Formatted timestamp string.

    Example:
        >>> generate_timestamp()
        "20261019_143022"
    """
    return datetime.now().strftime(format_str)


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def collapse_whitespace(text: str) -> str:
    """
    Replace every run of whitespace with a single space and strip the ends.

    Example:
        >>> collapse_whitespace("  USD   12.50 ")
        "USD 12.50"
    """
    return re.sub(r'\s+', ' ', text).strip()


def truncate(text: str, limit: int = 200) -> str:
    """Shorten text to ``limit`` characters for log output."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
