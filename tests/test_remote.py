"""
==============================================================================
Remote Listing Client Tests
==============================================================================

Tests for the contents API client, with the HTTP transport mocked by respx.

==============================================================================
"""

import httpx
import pytest

from notes_portal.catalog import NoteSource, RepoContext
from notes_portal.core.exceptions import SourceError
from notes_portal.sources import RemoteListingClient


LISTING_PATH = "/repos/maria/estudos/contents/notes"


def listing_entry(name, entry_type="file", size=2048):
    return {
        "name": name,
        "path": f"notes/{name}",
        "size": size,
        "type": entry_type,
        "download_url": f"https://raw.example/{name}",
    }


@pytest.fixture
async def remote_client():
    client = RemoteListingClient(timeout=1.0)
    yield client
    await client.close()


@pytest.fixture
def listing_route(respx_mock):
    return respx_mock.get(host="api.github.com", path=LISTING_PATH)


class TestListNotes:
    """Tests for RemoteListingClient.list_notes."""

    async def test_filters_note_files(self, remote_client, remote_context: RepoContext, listing_route):
        """Test only files with the note extension are kept."""
        listing_route.mock(return_value=httpx.Response(200, json=[
            listing_entry("2025_06_25_DC_001 - a.html"),
            listing_entry("README.md"),
            listing_entry("assets", entry_type="dir"),
            listing_entry("UPPER.HTML"),
        ]))

        files = await remote_client.list_notes(remote_context)

        assert [f.name for f in files] == ["2025_06_25_DC_001 - a.html", "UPPER.HTML"]
        first = files[0]
        assert first.source == NoteSource.REMOTE
        assert first.size == 2048
        assert first.url == "https://maria.github.io/estudos/notes/2025_06_25_DC_001 - a.html"
        assert first.download_url == "https://raw.example/2025_06_25_DC_001 - a.html"

    async def test_request_shape(self, remote_client, remote_context: RepoContext, listing_route):
        """Test branch query and API headers."""
        listing_route.mock(return_value=httpx.Response(200, json=[]))

        await remote_client.list_notes(remote_context)

        request = listing_route.calls.last.request
        assert request.url.params["ref"] == "main"
        assert request.headers["Accept"] == "application/vnd.github.v3+json"

    async def test_not_found_is_empty(self, remote_client, remote_context: RepoContext, listing_route):
        """Test a missing folder is an empty listing, not an error."""
        listing_route.mock(return_value=httpx.Response(404, json={"message": "Not Found"}))
        assert await remote_client.list_notes(remote_context) == []

    async def test_server_error_raises(self, remote_client, remote_context: RepoContext, listing_route):
        """Test non-2xx statuses raise SourceError with the status."""
        listing_route.mock(return_value=httpx.Response(500))

        with pytest.raises(SourceError) as exc_info:
            await remote_client.list_notes(remote_context)

        assert exc_info.value.status == 500
        assert exc_info.value.code == "SOURCE_UNAVAILABLE"

    async def test_rate_limited_raises(self, remote_client, remote_context: RepoContext, listing_route):
        """Test a 403 rate limit is a source failure."""
        listing_route.mock(return_value=httpx.Response(403))
        with pytest.raises(SourceError):
            await remote_client.list_notes(remote_context)

    @pytest.mark.parametrize("exc", [httpx.ConnectTimeout, httpx.ConnectError])
    async def test_transport_failures_raise(self, remote_client, remote_context: RepoContext, listing_route, exc):
        """Test timeouts and connection errors raise SourceError."""
        listing_route.mock(side_effect=exc)
        with pytest.raises(SourceError):
            await remote_client.list_notes(remote_context)

    async def test_malformed_json_raises(self, remote_client, remote_context: RepoContext, listing_route):
        """Test a non-JSON body raises SourceError."""
        listing_route.mock(return_value=httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(SourceError):
            await remote_client.list_notes(remote_context)

    async def test_non_array_raises(self, remote_client, remote_context: RepoContext, listing_route):
        """Test a JSON object instead of an array raises SourceError."""
        listing_route.mock(return_value=httpx.Response(200, json={"name": "x.html"}))
        with pytest.raises(SourceError):
            await remote_client.list_notes(remote_context)

    async def test_bad_size_defaults_to_zero(self, remote_client, remote_context: RepoContext, listing_route):
        """Test missing or negative sizes become zero."""
        listing_route.mock(return_value=httpx.Response(200, json=[
            listing_entry("a.html", size=None),
            listing_entry("b.html", size=-5),
        ]))

        files = await remote_client.list_notes(remote_context)

        assert [f.size for f in files] == [0, 0]
