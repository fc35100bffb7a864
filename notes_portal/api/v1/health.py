"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from notes_portal.catalog.catalog import CatalogManager
from notes_portal.catalog.models import CatalogStatus
from notes_portal.core.dependencies import get_catalog_manager


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, manager: CatalogManager):
        self._manager = manager

    def check_catalog(self) -> dict:
        """Check catalog status."""
        status = self._manager.status
        if status == CatalogStatus.READY:
            return {"status": "healthy", "notes": len(self._manager.catalog.files)}
        if status in (CatalogStatus.IDLE, CatalogStatus.LOADING):
            return {"status": "not_loaded", "notes": 0}
        return {"status": status.value, "notes": len(self._manager.catalog.files)}

    def get_health(self) -> dict:
        """Get full health status."""
        catalog_info = self.check_catalog()
        origin = self._manager.origin
        overall = "healthy" if catalog_info["status"] == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "catalog": catalog_info["status"],
            },
            "details": {
                "notes_loaded": catalog_info["notes"],
                "source": origin.value if origin else None,
            }
        }


@router.get("")
async def health_check(manager: CatalogManager = Depends(get_catalog_manager)):
    """
    Health check endpoint.

    Returns API and catalog status.
    """
    return HealthController(manager).get_health()


@router.get("/ready")
async def readiness_check(manager: CatalogManager = Depends(get_catalog_manager)):
    """Readiness check: the first load has finished."""
    return {"ready": manager.status not in (CatalogStatus.IDLE, CatalogStatus.LOADING)}


@router.get("/live")
async def liveness_check():
    """Liveness check for container orchestration."""
    return {"alive": True}


@router.get("/debug")
async def debug_info(manager: CatalogManager = Depends(get_catalog_manager)):
    """Catalog manager diagnostics."""
    return manager.debug_info()
