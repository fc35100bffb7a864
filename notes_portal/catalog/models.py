"""
==============================================================================
Catalog Models Module
==============================================================================

Pydantic models for the notes catalog.

Models:
-------
- NoteSource / CatalogStatus: enumerations for origin and manager state
- FileDescriptor: raw file record as produced by a source
- NoteFile: descriptor enriched with category and numeric order
- CategoryDefinition: immutable category configuration entry
- Category: a category with its ordered member files
- RepoContext: resolved location of the canonical note listing
- CacheEntry: persisted catalog payload
- Catalog: flat file list plus its category partition
- CatalogSnapshot / SearchResult / CategoryTab: view-facing read models

==============================================================================
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_CATEGORY = "GERAL"
ALL_CATEGORIES = "all"
NO_NUMBER = 9999


class NoteSource(str, Enum):
    """Origin tag of a note file."""

    REMOTE = "remote"
    STATIC = "static"
    CACHED = "cached"


class CatalogStatus(str, Enum):
    """
    State of a CatalogManager.

    EMPTY is the explicit empty-state: loading finished but every source
    was exhausted without producing a file.
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class FileDescriptor(BaseModel):
    """
    Raw note file record before classification.

    Attributes:
        name: File name, unique within a catalog
        path: Repository-relative path (``notes/<name>``)
        size: Size in bytes, possibly estimated
        url: Address the view links to
        last_modified: Modification timestamp (estimated for static entries)
        source: Which source produced the record
        download_url: Raw download address reported by the remote API
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, description="File name")
    path: str = Field(..., description="Repository-relative path")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    url: str = Field(..., description="Link target")
    last_modified: datetime = Field(..., description="Modification timestamp")
    source: NoteSource = Field(..., description="Origin tag")
    download_url: Optional[str] = Field(default=None, description="Raw download URL")


class NoteFile(FileDescriptor):
    """Descriptor enriched with its category and numeric sort key."""

    category: str = Field(..., description="Category key")
    numeric_order: int = Field(default=NO_NUMBER, description="Numeric sort key")


class CategoryDefinition(BaseModel):
    """Immutable configuration entry describing one category."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Category code")
    display_name: str = Field(..., description="Human readable name")
    icon: str = Field(default="📋", description="Icon shown on the tab")
    color: str = Field(default="#95a5a6", description="Accent color")


class Category(BaseModel):
    """A category together with its ordered member files."""

    key: str
    display_name: str
    icon: str
    color: str
    files: List[NoteFile] = Field(default_factory=list)

    @classmethod
    def from_definition(cls, definition: CategoryDefinition) -> "Category":
        """Create an empty bucket for a category definition."""
        return cls(
            key=definition.key,
            display_name=definition.display_name,
            icon=definition.icon,
            color=definition.color,
        )


class RepoContext(BaseModel):
    """
    Resolved description of where the canonical note listing lives.

    Derived once per manager from the execution environment and never
    mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str = "main"
    is_local: bool
    use_remote_source: bool


class CacheEntry(BaseModel):
    """Persisted catalog payload; ``timestamp`` is epoch milliseconds."""

    files: List[NoteFile]
    timestamp: int = Field(..., ge=0)
    version: str


class Catalog(BaseModel):
    """
    Categorized, ordered set of note files.

    ``files`` is the flat "all" view; ``categories`` holds every configured
    category (empty ones included) so the partition is total.
    """

    files: List[NoteFile] = Field(default_factory=list)
    categories: Dict[str, Category] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.files


class CatalogSnapshot(BaseModel):
    """Read model handed to the view layer."""

    files: List[NoteFile]
    categories: Dict[str, Category]
    active_category: str
    status: CatalogStatus
    last_update: Optional[int] = None


class SearchResult(BaseModel):
    """Files of the active category matching a search term."""

    term: str
    category: str
    files: List[NoteFile]
    count: int = Field(..., ge=0)


class CategoryTab(BaseModel):
    """Summary of one category for the view's tab strip."""

    key: str
    display_name: str
    icon: str
    color: Optional[str] = None
    count: int = Field(..., ge=0)
    active: bool = False
