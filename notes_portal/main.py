"""
==============================================================================
Portal de Notas - Application Entry Point
==============================================================================

FastAPI application exposing the notes catalog to the portal page:
- REST endpoints for the catalog snapshot, tabs, search and refresh
- View signals (visibility, connectivity) driving the background refresh
- Static mount of the notes directory

Usage:
------
    # Development
    uvicorn notes_portal.main:app --reload

    # Production
    NOTES_SITE_URL=https://maria.github.io/estudos/ \
        uvicorn notes_portal.main:app --host 0.0.0.0 --port 8000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from notes_portal import __version__
from notes_portal.api.router import api_router
from notes_portal.catalog.catalog import CatalogManager
from notes_portal.config import Settings, get_settings
from notes_portal.core.exceptions import register_exception_handlers


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Catalog manager creation, first load and disposal
    - Middleware configuration
    - Router registration
    - Exception handler setup

    A prebuilt CatalogManager may be injected (tests); otherwise one is
    wired from settings at startup, where malformed configuration tables
    abort the startup.
    """

    def __init__(
        self,
        app_settings: Optional[Settings] = None,
        manager: Optional[CatalogManager] = None,
    ):
        """Initialize the application."""
        self._settings = app_settings or get_settings()
        self._manager = manager
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version=__version__,
            description="Catalog of self-contained HTML study notes",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router)
        self._mount_notes(app)
        self._register_root(app)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        await self._startup(app)
        yield
        await self._shutdown(app)

    async def _startup(self, app: FastAPI) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        if self._manager is None:
            self._manager = CatalogManager.from_settings(self._settings)
        app.state.catalog_manager = self._manager

        snapshot = await self._manager.load_files()
        logger.info(f"📚 Catalog {snapshot.status.value}: {len(snapshot.files)} notes")

        if self._settings.auto_refresh_enabled:
            self._manager.start_auto_refresh()

        logger.info("=" * 60)
        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")
        logger.info("=" * 60)

    async def _shutdown(self, app: FastAPI) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        if self._manager is not None:
            await self._manager.dispose()
        app.state.catalog_manager = None
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _mount_notes(self, app: FastAPI) -> None:
        """Serve the note files themselves when the directory exists."""
        notes_path = self._settings.notes_path
        if notes_path.is_dir():
            app.mount("/notes", StaticFiles(directory=str(notes_path)), name="notes")
        else:
            logger.warning(f"⚠️ Notes directory not found: {notes_path}")

    def _register_root(self, app: FastAPI) -> None:
        """Register root endpoint."""

        @app.get("/", include_in_schema=False)
        async def root():
            """Redirect to the catalog snapshot."""
            return RedirectResponse(url="/api/v1/catalog")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "notes_portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
