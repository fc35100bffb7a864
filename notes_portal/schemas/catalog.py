"""
==============================================================================
Catalog Schemas Module
==============================================================================

Request and response schemas for the catalog endpoints.

==============================================================================
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from notes_portal.catalog.models import (
    CatalogSnapshot,
    CatalogStatus,
    CategoryTab,
    NoteFile,
    SearchResult,
)
from notes_portal.utils.formatting import display_stem, format_date, format_file_size


class VisibilityUpdate(BaseModel):
    """View visibility signal."""
    visible: bool


class ConnectivityUpdate(BaseModel):
    """Device connectivity signal."""
    online: bool


class NoteCard(BaseModel):
    """A note file with the labels its card displays."""

    file: NoteFile
    title: str
    size_label: str
    modified_label: str

    @classmethod
    def from_note(cls, note: NoteFile, extension: str = ".html") -> "NoteCard":
        """Create a card from a note file; ``extension`` is dropped from the title."""
        return cls(
            file=note,
            title=display_stem(note.name, extension),
            size_label=format_file_size(note.size),
            modified_label=format_date(note.last_modified),
        )


class SnapshotResponse(BaseModel):
    """Catalog snapshot response."""
    success: bool = Field(default=True)
    snapshot: CatalogSnapshot


class FilesResponse(BaseModel):
    """Cards of the active category."""
    success: bool = Field(default=True)
    category: str
    status: CatalogStatus
    total: int = Field(ge=0)
    cards: List[NoteCard]


class CategoriesResponse(BaseModel):
    """Tab strip response."""
    success: bool = Field(default=True)
    active_category: str
    tabs: List[CategoryTab]


class SearchResponse(BaseModel):
    """Search response."""
    success: bool = Field(default=True)
    result: SearchResult


class RefreshResponse(BaseModel):
    """Outcome of a reload request."""
    success: bool = Field(default=True)
    status: CatalogStatus
    total: int = Field(ge=0)
    last_update: Optional[int] = None
