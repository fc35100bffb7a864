"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the catalog endpoints.

The application owns exactly one CatalogManager, stored on
``app.state.catalog_manager`` during the lifespan startup. Endpoints
receive it through ``get_catalog_manager`` instead of reaching for a
module-level global, so tests can build independent applications.

Usage Examples:
--------------
    @router.get("/catalog")
    async def snapshot(manager: CatalogManager = Depends(get_catalog_manager)):
        return manager.get_snapshot()

==============================================================================
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from notes_portal.catalog.catalog import CatalogManager
from notes_portal.core import exceptions


def get_catalog_manager(request: Request) -> CatalogManager:
    """
    Resolve the application's catalog manager.

    Raises:
        AppException: CATALOG_NOT_LOADED if startup did not create one
    """
    manager: Optional[CatalogManager] = getattr(
        request.app.state, "catalog_manager", None
    )
    if manager is None:
        raise exceptions.catalog_not_loaded()
    return manager
