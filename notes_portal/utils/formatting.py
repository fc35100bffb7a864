"""
==============================================================================
Formatting Utilities Module
==============================================================================

Human-readable labels for note cards.

These strings are what the view shows on each card; search matches against
them too, so a term like "kb" or "07/2025" finds cards the way the portal
page always did.

==============================================================================
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional


SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size: Optional[int]) -> str:
    """
    Format a byte count with a binary unit.

    Example:
        >>> format_file_size(8000)
        '7.81 KB'
        >>> format_file_size(0)
        '0 Bytes'
    """
    if not size or size <= 0:
        return "0 Bytes"

    exponent = min(int(math.log(size, 1024)), len(SIZE_UNITS) - 1)
    value = round(size / (1024 ** exponent), 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[exponent]}"


def format_date(dt: Optional[datetime]) -> str:
    """Format a date as dd/mm/yyyy; empty string when missing."""
    if dt is None:
        return ""
    return dt.strftime("%d/%m/%Y")


def display_stem(name: str, extension: str = ".html") -> str:
    """File name without its note extension."""
    if name.lower().endswith(extension):
        return name[: -len(extension)]
    return name
