"""
==============================================================================
Catalog Package - Notes Catalog Engine
==============================================================================

Classification, ordering and assembly of the notes catalog.

Classes:
--------
- NumberExtractor: filename -> numeric sort key
- Categorizer: filename -> category key
- CategoryTable: immutable category configuration
- RepoContextResolver: execution environment -> RepoContext
- CatalogAssembler: descriptors -> Catalog
- CatalogManager: orchestrator (``notes_portal.catalog.catalog``)

==============================================================================
"""

from .models import (
    ALL_CATEGORIES,
    DEFAULT_CATEGORY,
    NO_NUMBER,
    CacheEntry,
    Catalog,
    CatalogSnapshot,
    CatalogStatus,
    Category,
    CategoryDefinition,
    CategoryTab,
    FileDescriptor,
    NoteFile,
    NoteSource,
    RepoContext,
    SearchResult,
)
from .categories import CategoryTable
from .categorizer import Categorizer, CategoryRule
from .numbering import NumberExtractor, NumberRule
from .context import RepoContextResolver
from .assembly import CatalogAssembler

__all__ = [
    "ALL_CATEGORIES",
    "DEFAULT_CATEGORY",
    "NO_NUMBER",
    "CacheEntry",
    "Catalog",
    "CatalogSnapshot",
    "CatalogStatus",
    "Category",
    "CategoryDefinition",
    "CategoryTab",
    "FileDescriptor",
    "NoteFile",
    "NoteSource",
    "RepoContext",
    "SearchResult",
    "CategoryTable",
    "Categorizer",
    "CategoryRule",
    "NumberExtractor",
    "NumberRule",
    "RepoContextResolver",
    "CatalogAssembler",
]
