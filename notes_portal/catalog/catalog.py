"""
==============================================================================
Notes Catalog Module
==============================================================================

CatalogManager: orchestrates loading, classification, caching and the
query surface handed to the view layer.

State Machine:
-------------
    IDLE ──load──▶ LOADING ──▶ READY | EMPTY | ERROR
    READY/EMPTY ──forced refresh / timer──▶ LOADING
    ERROR ──retry──▶ LOADING

Features:
---------
- In-memory validity window: ``load_files(False)`` skips all I/O while the
  catalog is non-empty and younger than ``memory_ttl_ms``
- Single-flight loads: concurrent callers await the same in-flight task
- Errors never escape: the worst outcome is ERROR with the previous
  snapshot retained, or EMPTY when no source produced data
- Background refresh owned by the manager and released on ``dispose()``

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from notes_portal.config import Settings
from notes_portal.services.cache_store import CacheStore, now_ms
from notes_portal.services.refresh_service import RefreshTaskManager
from notes_portal.sources.loader import SourceLoader
from notes_portal.sources.remote import RemoteListingClient
from notes_portal.sources.static_table import StaticNoteTable
from notes_portal.utils.formatting import display_stem, format_date, format_file_size

from .assembly import CatalogAssembler
from .categories import CategoryTable
from .categorizer import Categorizer
from .context import RepoContextResolver
from .models import (
    ALL_CATEGORIES,
    Catalog,
    CatalogSnapshot,
    CatalogStatus,
    CategoryTab,
    NoteFile,
    NoteSource,
    RepoContext,
    SearchResult,
)
from .numbering import NumberExtractor


# Module logger
logger = logging.getLogger(__name__)


MEMORY_TTL_MS = 300_000


class CatalogManager:
    """
    Owner of the catalog state and its query surface.

    Each instance is independent: the caller creates it, wires it to its
    view and disposes it. Nothing is shared between instances.

    Attributes:
        context: Repository context resolved for this instance
        status: Current state machine status

    Example:
        >>> manager = CatalogManager.from_settings(get_settings())
        >>> await manager.load_files()
        >>> manager.switch_category("DC")
        True
        >>> manager.search("habeas").count
        2
        >>> await manager.dispose()
    """

    def __init__(
        self,
        context: RepoContext,
        loader: SourceLoader,
        assembler: CatalogAssembler,
        cache_store: CacheStore,
        table: CategoryTable,
        memory_ttl_ms: int = MEMORY_TTL_MS,
        clock: Callable[[], int] = now_ms,
        extension: str = ".html",
    ) -> None:
        """
        Initialize the manager in the IDLE state.

        Args:
            context: Resolved repository context (immutable)
            loader: Fallback chain over the note sources
            assembler: Pure descriptor -> Catalog transform
            cache_store: Persisted catalog store
            table: Category configuration
            memory_ttl_ms: In-memory validity window
            clock: Epoch-millisecond clock
            extension: Note extension, stripped for card text
        """
        self._context = context
        self._loader = loader
        self._assembler = assembler
        self._cache = cache_store
        self._table = table
        self._memory_ttl_ms = memory_ttl_ms
        self._clock = clock
        self._extension = extension

        self._catalog = assembler.assemble([])
        self._status = CatalogStatus.IDLE
        self._active_category = ALL_CATEGORIES
        self._last_update: Optional[int] = None
        self._origin: Optional[NoteSource] = None
        self._last_error: Optional[str] = None
        self._inflight: Optional[asyncio.Task] = None
        self._disposed = False
        self._refresher = RefreshTaskManager(
            self.load_files, interval_seconds=memory_ttl_ms / 1000
        )

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        context: Optional[RepoContext] = None,
    ) -> "CatalogManager":
        """
        Wire a manager from application settings.

        Configuration tables are loaded and validated here, so malformed
        tables fail at startup.

        Args:
            settings: Application settings
            context: Explicit context; resolved from ``settings.site_url``
                when omitted

        Raises:
            ConfigurationError: If a configuration table is malformed
        """
        table = (
            CategoryTable.from_file(settings.categories_path)
            if settings.categories_path
            else CategoryTable()
        )
        static_table = StaticNoteTable.from_file(
            settings.static_table_path, extension=settings.note_extension
        )
        cache_store = CacheStore(settings.cache_path, max_age_ms=settings.persisted_cache_ttl_ms)
        remote = RemoteListingClient(
            base_url=settings.remote_api_url,
            timeout=settings.fetch_timeout_seconds,
            extension=settings.note_extension,
            host_suffix=settings.static_host_suffix,
        )

        if context is None:
            resolver = RepoContextResolver(host_suffix=settings.static_host_suffix)
            context = resolver.resolve_url(settings.site_url)

        return cls(
            context=context,
            loader=SourceLoader(
                static_table,
                cache_store,
                remote,
                fetch_timeout=settings.fetch_timeout_seconds,
            ),
            assembler=CatalogAssembler(
                table, Categorizer(table), NumberExtractor(extension=settings.note_extension)
            ),
            cache_store=cache_store,
            table=table,
            memory_ttl_ms=settings.memory_cache_ttl_ms,
            extension=settings.note_extension,
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def context(self) -> RepoContext:
        return self._context

    @property
    def status(self) -> CatalogStatus:
        return self._status

    @property
    def active_category(self) -> str:
        return self._active_category

    @property
    def last_update(self) -> Optional[int]:
        return self._last_update

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def refresher(self) -> RefreshTaskManager:
        return self._refresher

    @property
    def origin(self) -> Optional[NoteSource]:
        """Source that produced the published catalog; None before a load."""
        return self._origin

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def disposed(self) -> bool:
        return self._disposed

    # =========================================================================
    # LOADING
    # =========================================================================

    def is_cache_valid(self) -> bool:
        """In-memory catalog is non-empty and inside its validity window."""
        if self._last_update is None or not self._catalog.files:
            return False
        return self._clock() - self._last_update < self._memory_ttl_ms

    async def load_files(self, force_refresh: bool = False) -> CatalogSnapshot:
        """
        Load the catalog, reusing the in-memory copy while it is valid.

        Concurrent calls share one in-flight load.

        Args:
            force_refresh: Ignore the in-memory validity window

        Returns:
            Snapshot after the load; never raises for load failures
        """
        if self._disposed:
            logger.debug("Manager disposed, skipping load")
            return self.get_snapshot()

        if not force_refresh and self.is_cache_valid():
            logger.debug("📦 Using in-memory catalog")
            return self.get_snapshot()

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._run_load())
        else:
            logger.debug("Joining in-flight catalog load")

        return await asyncio.shield(self._inflight)

    async def refresh(self, force: bool = True) -> CatalogSnapshot:
        """View-facing alias of ``load_files``."""
        return await self.load_files(force_refresh=force)

    async def _run_load(self) -> CatalogSnapshot:
        """One walk through the chain; publishes the result atomically."""
        self._status = CatalogStatus.LOADING
        logger.info(f"🔄 Loading catalog for {self._context.owner}/{self._context.repo}")

        try:
            result = await self._loader.load(self._context)
            catalog = self._assembler.assemble(result.files)
            if catalog.files and result.origin != NoteSource.CACHED:
                await asyncio.to_thread(self._cache.write, catalog.files)
        except Exception as e:
            self._status = CatalogStatus.ERROR
            self._last_error = str(e)
            logger.error(f"❌ Catalog load failed, keeping previous snapshot: {e}")
            return self.get_snapshot()

        self._catalog = catalog
        self._origin = result.origin
        self._last_update = self._clock()
        self._last_error = None
        self._status = CatalogStatus.READY if catalog.files else CatalogStatus.EMPTY

        logger.info(
            f"📁 Loaded {len(catalog.files)} files "
            f"({result.origin.value if result.origin else 'no source'})"
        )
        return self.get_snapshot()

    async def clear_cache(self) -> None:
        """Remove the persisted catalog entry."""
        await asyncio.to_thread(self._cache.clear)

    # =========================================================================
    # QUERY SURFACE
    # =========================================================================

    def switch_category(self, key: str) -> bool:
        """
        Change the active category.

        Args:
            key: A category key or ``"all"``

        Returns:
            True if switched; False (state unchanged) for unknown keys
        """
        if key != ALL_CATEGORIES and key not in self._table:
            logger.warning(f"Unknown category ignored: {key!r}")
            return False

        self._active_category = key
        logger.debug(f"🔄 Active category: {key}")
        return True

    def get_active_files(self) -> List[NoteFile]:
        """Files of the active category, in display order."""
        if self._active_category == ALL_CATEGORIES:
            return list(self._catalog.files)
        category = self._catalog.categories.get(self._active_category)
        return list(category.files) if category else []

    def card_text(self, note: NoteFile) -> str:
        """Lowercased text of a note's card."""
        parts = [
            display_stem(note.name, self._extension),
            f"Tamanho: {format_file_size(note.size)}",
        ]
        modified = format_date(note.last_modified)
        if modified:
            parts.append(f"Modificado: {modified}")
        return " ".join(parts).lower()

    def search(self, term: str, match_card_text: bool = True) -> SearchResult:
        """
        Case-insensitive substring search over the active category.

        Args:
            term: Search term; blank returns the whole active set
            match_card_text: Also match the card's size and date labels

        Returns:
            SearchResult with the matching files and their count
        """
        needle = (term or "").strip().lower()
        files = self.get_active_files()

        if needle:
            files = [
                note for note in files
                if needle in note.name.lower()
                or (match_card_text and needle in self.card_text(note))
            ]

        return SearchResult(
            term=needle,
            category=self._active_category,
            files=files,
            count=len(files),
        )

    def get_snapshot(self) -> CatalogSnapshot:
        """Current state for the view layer."""
        return CatalogSnapshot(
            files=list(self._catalog.files),
            categories=self._catalog.categories,
            active_category=self._active_category,
            status=self._status,
            last_update=self._last_update,
        )

    def category_tabs(self) -> List[CategoryTab]:
        """
        Tab strip summary.

        Returns:
            The "all" tab first, then non-empty categories by size
            (largest first, key as tie-break)
        """
        tabs = [
            CategoryTab(
                key=ALL_CATEGORIES,
                display_name="Todos",
                icon="📋",
                count=len(self._catalog.files),
                active=self._active_category == ALL_CATEGORIES,
            )
        ]

        populated = sorted(
            (c for c in self._catalog.categories.values() if c.files),
            key=lambda c: (-len(c.files), c.key),
        )
        for category in populated:
            tabs.append(
                CategoryTab(
                    key=category.key,
                    display_name=category.display_name,
                    icon=category.icon,
                    color=category.color,
                    count=len(category.files),
                    active=self._active_category == category.key,
                )
            )

        return tabs

    def debug_info(self) -> Dict[str, Any]:
        """Diagnostic summary of the manager state."""
        return {
            "files": len(self._catalog.files),
            "status": self._status.value,
            "origin": self._origin.value if self._origin else None,
            "repo": self._context.model_dump(),
            "last_update": self._last_update,
            "last_error": self._last_error,
            "cache_valid": self.is_cache_valid(),
            "auto_refresh": self._refresher.is_running,
            "online": self._refresher.online,
            "visible": self._refresher.visible,
        }

    # =========================================================================
    # BACKGROUND REFRESH & VIEW SIGNALS
    # =========================================================================

    def start_auto_refresh(self) -> None:
        """Start the periodic refresh (interval = in-memory TTL)."""
        if self._disposed:
            return
        self._refresher.start()

    def set_visible(self, visible: bool) -> None:
        """Pause the periodic refresh while the view is hidden."""
        if self._disposed:
            return
        self._refresher.set_visible(visible)

    async def set_online(self, online: bool) -> Optional[CatalogSnapshot]:
        """
        Pause the periodic refresh while offline.

        Coming back online forces a reload.

        Returns:
            Snapshot of the forced reload, or None
        """
        if self._disposed:
            return None

        was_online = self._refresher.online
        self._refresher.set_online(online)

        if online and not was_online:
            logger.info("🌐 Connection restored, reloading catalog")
            return await self.load_files(force_refresh=True)
        if not online:
            logger.info("📵 Connection lost")
        return None

    async def dispose(self) -> None:
        """
        Release the background task, any in-flight load and the HTTP client.

        Disposal is final: later loads and view signals do no I/O.
        """
        if self._disposed:
            return
        self._disposed = True
        await self._refresher.shutdown()

        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            try:
                await self._inflight
            except asyncio.CancelledError:
                pass

        await self._loader.close()
        logger.info("🧹 Catalog manager disposed")
