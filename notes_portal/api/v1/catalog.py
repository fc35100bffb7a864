"""
==============================================================================
Catalog Endpoints
==============================================================================

Endpoints the portal page uses to browse, search and refresh the notes
catalog, and to report its visibility and connectivity.

==============================================================================
"""

from fastapi import APIRouter, Depends, Query

from notes_portal.catalog.catalog import CatalogManager
from notes_portal.core import exceptions
from notes_portal.core.dependencies import get_catalog_manager
from notes_portal.schemas import (
    CategoriesResponse,
    ConnectivityUpdate,
    FilesResponse,
    MessageResponse,
    NoteCard,
    RefreshResponse,
    SearchResponse,
    SnapshotResponse,
    VisibilityUpdate,
)


router = APIRouter(prefix="/catalog", tags=["Catalog"])


class CatalogController:
    """Controller for catalog operations."""

    def __init__(self, manager: CatalogManager):
        self._manager = manager

    def snapshot(self) -> SnapshotResponse:
        return SnapshotResponse(snapshot=self._manager.get_snapshot())

    def active_files(self) -> FilesResponse:
        """Cards of the active category."""
        files = self._manager.get_active_files()
        return FilesResponse(
            category=self._manager.active_category,
            status=self._manager.status,
            total=len(files),
            cards=[NoteCard.from_note(note, self._manager.extension) for note in files],
        )

    def categories(self) -> CategoriesResponse:
        return CategoriesResponse(
            active_category=self._manager.active_category,
            tabs=self._manager.category_tabs(),
        )

    def switch(self, key: str) -> CategoriesResponse:
        """Switch the active category or raise CATEGORY_NOT_FOUND."""
        if not self._manager.switch_category(key):
            raise exceptions.category_not_found(key)
        return self.categories()

    def search(self, term: str) -> SearchResponse:
        return SearchResponse(result=self._manager.search(term))

    async def refresh(self, force: bool) -> RefreshResponse:
        """Reload the catalog."""
        snapshot = await self._manager.refresh(force=force)
        return RefreshResponse(
            status=snapshot.status,
            total=len(snapshot.files),
            last_update=snapshot.last_update,
        )

    async def clear_cache(self) -> MessageResponse:
        await self._manager.clear_cache()
        return MessageResponse(message="Cache cleared")


@router.get("", response_model=SnapshotResponse)
async def get_snapshot(manager: CatalogManager = Depends(get_catalog_manager)):
    """Full catalog snapshot: files, categories, active category and status."""
    return CatalogController(manager).snapshot()


@router.get("/files", response_model=FilesResponse)
async def get_active_files(manager: CatalogManager = Depends(get_catalog_manager)):
    """Cards of the active category."""
    return CatalogController(manager).active_files()


@router.get("/categories", response_model=CategoriesResponse)
async def get_categories(manager: CatalogManager = Depends(get_catalog_manager)):
    """Tab strip: "all" first, then non-empty categories by size."""
    return CatalogController(manager).categories()


@router.put("/active-category/{key}", response_model=CategoriesResponse)
async def switch_category(key: str, manager: CatalogManager = Depends(get_catalog_manager)):
    """Change the active category."""
    return CatalogController(manager).switch(key)


@router.get("/search", response_model=SearchResponse)
async def search_notes(
    q: str = Query("", max_length=200),
    manager: CatalogManager = Depends(get_catalog_manager)
):
    """Search the active category by name and card text."""
    return CatalogController(manager).search(q)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_catalog(
    force: bool = Query(True),
    manager: CatalogManager = Depends(get_catalog_manager)
):
    """Reload the catalog; ``force=false`` honours the in-memory window."""
    return await CatalogController(manager).refresh(force)


@router.delete("/cache", response_model=MessageResponse)
async def clear_cache(manager: CatalogManager = Depends(get_catalog_manager)):
    """Remove the persisted catalog cache."""
    return await CatalogController(manager).clear_cache()


@router.put("/visibility", response_model=MessageResponse)
async def set_visibility(
    update: VisibilityUpdate,
    manager: CatalogManager = Depends(get_catalog_manager)
):
    """Pause or resume background refresh as the page is hidden or shown."""
    manager.set_visible(update.visible)
    state = "resumed" if manager.refresher.is_running else "paused"
    return MessageResponse(message=f"Auto refresh {state}")


@router.put("/connectivity", response_model=MessageResponse)
async def set_connectivity(
    update: ConnectivityUpdate,
    manager: CatalogManager = Depends(get_catalog_manager)
):
    """Pause background refresh while offline; reload when back online."""
    snapshot = await manager.set_online(update.online)
    if snapshot is not None:
        return MessageResponse(message=f"Reloaded {len(snapshot.files)} notes")
    state = "online" if update.online else "offline"
    return MessageResponse(message=f"Marked {state}")
