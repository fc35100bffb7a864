"""
==============================================================================
Utilities Package
==============================================================================

Modules:
--------
- formatting: card labels (file size, date, display name)

==============================================================================
"""

from .formatting import display_stem, format_date, format_file_size

__all__ = [
    "display_stem",
    "format_date",
    "format_file_size",
]
