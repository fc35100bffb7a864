"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides category tables, note sources, cache stores, catalog managers
and an API client wired to an injected manager.

==============================================================================
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
from fastapi.testclient import TestClient

from notes_portal.catalog import (
    CatalogAssembler,
    Categorizer,
    CategoryTable,
    FileDescriptor,
    NoteSource,
    NumberExtractor,
    RepoContext,
    RepoContextResolver,
)
from notes_portal.catalog.catalog import CatalogManager
from notes_portal.config import Settings
from notes_portal.services.cache_store import CacheStore
from notes_portal.sources import RemoteListingClient, SourceLoader, StaticNoteTable


SAMPLE_NOTES = [
    "2025_06_25_DC_002 - Caracteristicas dos direitos fundamentais.html",
    "2025_06_25_DC_001 - Introducao a teoria geral.html",
    "2025_07_16_DP_004 - Dolo e culpa.html",
    "2025_07_08_DPP_001 - Inquerito policial.html",
    "2025_08_08_RLM_001 - Estruturas logicas.html",
    "exemplo-nota-interativa.html",
]

T0 = 1_750_000_000_000


# ============================================================================
# CLOCK
# ============================================================================

class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# CATALOG BUILDING BLOCKS
# ============================================================================

@pytest.fixture
def category_table() -> CategoryTable:
    return CategoryTable()


@pytest.fixture
def categorizer(category_table: CategoryTable) -> Categorizer:
    return Categorizer(category_table)


@pytest.fixture
def extractor() -> NumberExtractor:
    return NumberExtractor()


@pytest.fixture
def assembler(category_table, categorizer, extractor) -> CatalogAssembler:
    return CatalogAssembler(category_table, categorizer, extractor)


@pytest.fixture
def static_table() -> StaticNoteTable:
    return StaticNoteTable(SAMPLE_NOTES)


@pytest.fixture
def cache_store(tmp_path: Path, clock: FakeClock) -> CacheStore:
    return CacheStore(tmp_path / "cache" / "notes.json", clock=clock)


@pytest.fixture
def local_context() -> RepoContext:
    return RepoContextResolver().local_context()


@pytest.fixture
def remote_context() -> RepoContext:
    return RepoContextResolver().resolve("maria.github.io", "/estudos/", "https")


def make_descriptor(name: str, size: int = 1024, source: NoteSource = NoteSource.STATIC) -> FileDescriptor:
    """Descriptor with fixed metadata for assembly tests."""
    return FileDescriptor(
        name=name,
        path=f"notes/{name}",
        size=size,
        url=f"./notes/{name}",
        last_modified=datetime(2025, 7, 1, tzinfo=timezone.utc),
        source=source,
    )


class FakeRemote:
    """Stand-in for RemoteListingClient returning canned results."""

    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result or []
        self.error = error
        self.delay = delay
        self.calls = 0
        self.closed = False

    async def list_notes(self, context):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.result)

    async def close(self):
        self.closed = True


# ============================================================================
# MANAGER FIXTURES
# ============================================================================

ManagerFactory = Callable[..., CatalogManager]


@pytest.fixture
def make_manager(
    category_table: CategoryTable,
    assembler: CatalogAssembler,
    cache_store: CacheStore,
    static_table: StaticNoteTable,
    local_context: RepoContext,
    clock: FakeClock,
) -> ManagerFactory:
    """
    Factory for independent managers.

    Keyword overrides: ``context``, ``static``, ``remote``, ``loader``.
    Tests that start the background refresh stop it themselves.
    """
    def factory(
        context: Optional[RepoContext] = None,
        static: Optional[StaticNoteTable] = None,
        remote: Optional[RemoteListingClient] = None,
        loader=None,
    ) -> CatalogManager:
        manager = CatalogManager(
            context=context or local_context,
            loader=loader or SourceLoader(
                static if static is not None else static_table,
                cache_store,
                remote,
                fetch_timeout=1.0,
            ),
            assembler=assembler,
            cache_store=cache_store,
            table=category_table,
            clock=clock,
        )
        return manager

    return factory


@pytest.fixture
def manager(make_manager: ManagerFactory) -> CatalogManager:
    return make_manager()


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        notes_directory=str(tmp_path / "notes"),
        cache_file=str(tmp_path / "cache" / "notes.json"),
        auto_refresh_enabled=False,
    )


@pytest.fixture
def client(test_settings: Settings, manager: CatalogManager) -> Generator[TestClient, None, None]:
    """Test client whose lifespan loads the injected manager."""
    from notes_portal.main import Application

    application = Application(app_settings=test_settings, manager=manager)
    with TestClient(application.app) as test_client:
        yield test_client
