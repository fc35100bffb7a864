"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas for the HTTP surface.

==============================================================================
"""

from .common import MessageResponse
from .catalog import (
    CategoriesResponse,
    ConnectivityUpdate,
    FilesResponse,
    NoteCard,
    RefreshResponse,
    SearchResponse,
    SnapshotResponse,
    VisibilityUpdate,
)

__all__ = [
    "MessageResponse",
    "CategoriesResponse",
    "ConnectivityUpdate",
    "FilesResponse",
    "NoteCard",
    "RefreshResponse",
    "SearchResponse",
    "SnapshotResponse",
    "VisibilityUpdate",
]
