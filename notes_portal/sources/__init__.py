"""
==============================================================================
Sources Package - Note Listing Sources
==============================================================================

This package provides:
- StaticNoteTable: owner-maintained filename table
- RemoteListingClient: httpx client for the remote contents API
- SourceLoader: the fallback chain over all sources

==============================================================================
"""

from .static_table import StaticNoteTable
from .remote import RemoteListingClient
from .loader import LoadResult, SourceLoader

__all__ = [
    "StaticNoteTable",
    "RemoteListingClient",
    "LoadResult",
    "SourceLoader",
]
