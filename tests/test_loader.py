"""
==============================================================================
Source Loader Tests
==============================================================================

Tests for the fallback chain: remote -> static table -> cache -> empty.

==============================================================================
"""

from datetime import datetime, timezone

import httpx
import pytest

from notes_portal.catalog import CatalogStatus, NoteSource
from notes_portal.core.exceptions import ConfigurationError, SourceError
from notes_portal.services.cache_store import PERSISTED_TTL_MS
from notes_portal.sources import RemoteListingClient, SourceLoader, StaticNoteTable
from notes_portal.sources.static_table import BASE_SIZE, SIZE_STEP

from conftest import SAMPLE_NOTES, FakeRemote, make_descriptor


class TestFallbackChain:
    """Tests for SourceLoader.load."""

    async def test_remote_success(self, static_table, cache_store, remote_context):
        """Test remote data is used when available."""
        remote = FakeRemote([make_descriptor("a_DC_001.html", source=NoteSource.REMOTE)])
        loader = SourceLoader(static_table, cache_store, remote)

        result = await loader.load(remote_context)

        assert result.origin == NoteSource.REMOTE
        assert [f.name for f in result.files] == ["a_DC_001.html"]

    async def test_remote_failure_uses_static(self, static_table, cache_store, remote_context):
        """Test a source error advances to the static table."""
        remote = FakeRemote(error=SourceError("HTTP 500", status=500))
        loader = SourceLoader(static_table, cache_store, remote)

        result = await loader.load(remote_context)

        assert result.origin == NoteSource.STATIC
        assert len(result.files) == len(SAMPLE_NOTES)
        assert result.errors == ["HTTP 500"]

    async def test_remote_not_found_stops_chain(self, static_table, cache_store, remote_context):
        """Test an empty remote folder is authoritative."""
        loader = SourceLoader(static_table, cache_store, FakeRemote([]))

        result = await loader.load(remote_context)

        assert result.origin == NoteSource.REMOTE
        assert result.files == []

    async def test_remote_timeout_uses_static(self, static_table, cache_store, remote_context):
        """Test the fetch deadline turns a hang into a fallback."""
        remote = FakeRemote([make_descriptor("late.html")], delay=1.0)
        loader = SourceLoader(static_table, cache_store, remote, fetch_timeout=0.05)

        result = await loader.load(remote_context)

        assert result.origin == NoteSource.STATIC
        assert "exceeded" in result.errors[0]

    async def test_local_context_skips_remote(self, static_table, cache_store, local_context):
        """Test local mode never touches the network."""
        remote = FakeRemote([make_descriptor("remote.html")])
        loader = SourceLoader(static_table, cache_store, remote)

        result = await loader.load(local_context)

        assert remote.calls == 0
        assert result.origin == NoteSource.STATIC

    async def test_empty_static_uses_fresh_cache(self, cache_store, assembler, local_context):
        """Test the persisted cache fills in when no list is available."""
        cache_store.write(assembler.assemble([make_descriptor("x_DC_001.html")]).files)
        loader = SourceLoader(StaticNoteTable([]), cache_store)

        result = await loader.load(local_context)

        assert result.origin == NoteSource.CACHED
        assert [f.source for f in result.files] == [NoteSource.CACHED]

    async def test_remote_failure_and_empty_static_use_fresh_cache(
        self, cache_store, assembler, remote_context
    ):
        """Test a failed remote with no static list restores the cache."""
        cache_store.write(assembler.assemble([make_descriptor("x_DC_001.html")]).files)
        remote = FakeRemote(error=SourceError("HTTP 500", status=500))
        loader = SourceLoader(StaticNoteTable([]), cache_store, remote)

        result = await loader.load(remote_context)

        assert remote.calls == 1
        assert result.origin == NoteSource.CACHED
        assert [f.name for f in result.files] == ["x_DC_001.html"]
        assert result.errors == ["HTTP 500"]

    async def test_remote_failure_and_stale_cache_end_empty(
        self, make_manager, cache_store, assembler, remote_context, clock
    ):
        """Test an expired cache behind a failed remote yields the empty state."""
        cache_store.write(assembler.assemble([make_descriptor("x_DC_001.html")]).files)
        clock.advance(PERSISTED_TTL_MS + 1)
        manager = make_manager(
            context=remote_context,
            static=StaticNoteTable([]),
            remote=FakeRemote(error=SourceError("HTTP 500", status=500)),
        )

        snapshot = await manager.load_files()

        assert snapshot.status == CatalogStatus.EMPTY
        assert snapshot.files == []
        assert not cache_store.path.exists()

    async def test_all_sources_absent(self, cache_store, local_context):
        """Test exhaustion yields an empty result without raising."""
        loader = SourceLoader(StaticNoteTable([]), cache_store)

        result = await loader.load(local_context)

        assert result.files == []
        assert result.origin is None

    async def test_remote_respx_failure_uses_static(self, static_table, cache_store, remote_context, respx_mock):
        """Test the real client's failure falls back to the static table."""
        respx_mock.get(host="api.github.com").mock(return_value=httpx.Response(502))
        remote = RemoteListingClient(timeout=1.0)
        loader = SourceLoader(static_table, cache_store, remote)

        try:
            result = await loader.load(remote_context)
        finally:
            await loader.close()

        assert result.origin == NoteSource.STATIC

    async def test_close_closes_remote(self, static_table, cache_store):
        """Test close releases the remote client."""
        remote = FakeRemote()
        await SourceLoader(static_table, cache_store, remote).close()
        assert remote.closed is True


class TestStaticNoteTable:
    """Tests for the static table's descriptors and validation."""

    def test_estimated_metadata(self, static_table: StaticNoteTable):
        """Test sizes, dates, paths and urls."""
        files = static_table.descriptors()

        assert [f.size for f in files[:3]] == [BASE_SIZE, BASE_SIZE + SIZE_STEP, BASE_SIZE + 2 * SIZE_STEP]
        first = files[0]
        assert first.path == f"notes/{SAMPLE_NOTES[0]}"
        assert first.url.startswith("./notes/2025_06_25_DC_002%20-%20")
        assert first.last_modified.date().isoformat() == "2025-06-25"
        assert first.source == NoteSource.STATIC

    def test_undated_name_uses_now(self, static_table: StaticNoteTable):
        """Test names without a date get the supplied time."""
        now = datetime(2030, 1, 2, tzinfo=timezone.utc)
        undated = [f for f in static_table.descriptors(now) if f.name == "exemplo-nota-interativa.html"]
        assert undated[0].last_modified == now

    @pytest.mark.parametrize("files", [
        ["nota.txt"],
        ["a.html", "a.html"],
        ["", "b.html"],
    ])
    def test_invalid_tables_rejected(self, files):
        """Test malformed tables fail at construction."""
        with pytest.raises(ConfigurationError):
            StaticNoteTable(files)

    def test_shipped_table_loads(self):
        """Test the packaged table is valid."""
        from notes_portal.config.settings import DEFAULT_STATIC_TABLE

        table = StaticNoteTable.from_file(DEFAULT_STATIC_TABLE)
        assert len(table) > 0

    def test_from_file_wrong_shape(self, tmp_path):
        """Test a file without a files list is rejected."""
        path = tmp_path / "table.json"
        path.write_text('["a.html"]', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            StaticNoteTable.from_file(path)
