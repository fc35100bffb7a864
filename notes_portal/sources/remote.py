"""HTTP client for the remote contents listing API.

Lists the ``notes`` folder of the repository a RepoContext points at and
turns the response into file descriptors.

Response handling:
- 2xx with a JSON array: entries of type ``file`` with the note extension
- 404: the folder does not exist yet, reported as an empty list
- anything else (status, transport error, timeout, bad JSON): SourceError
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from notes_portal.catalog.models import FileDescriptor, NoteSource, RepoContext
from notes_portal.core.exceptions import SourceError


logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "Portal-Notas-HTML",
    "Cache-Control": "no-cache",
}


class RemoteListingClient:
    """Async client for ``GET /repos/<owner>/<repo>/contents/<folder>``.

    Example:
        >>> client = RemoteListingClient()
        >>> try:
        ...     files = await client.list_notes(context)
        ... finally:
        ...     await client.close()
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        timeout: float = 10.0,
        extension: str = ".html",
        folder: str = "notes",
        host_suffix: str = "github.io",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL
            timeout: Upper bound in seconds for one listing request
            extension: Only files with this extension are kept
            folder: Repository folder holding the notes
            host_suffix: Static hosting domain used to build note URLs
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.extension = extension
        self.folder = folder.strip("/")
        self.host_suffix = host_suffix
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=DEFAULT_HEADERS,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def listing_path(self, context: RepoContext) -> str:
        return f"/repos/{context.owner}/{context.repo}/contents/{self.folder}"

    def note_url(self, context: RepoContext, path: str) -> str:
        return f"https://{context.owner}.{self.host_suffix}/{context.repo}/{path}"

    async def list_notes(self, context: RepoContext) -> List[FileDescriptor]:
        """List the note files of the repository.

        Returns:
            Descriptors in API order; empty when the folder does not exist.

        Raises:
            SourceError: On any failure other than 404
        """
        path = self.listing_path(context)
        logger.info(f"🌐 Fetching remote listing: {path}")

        client = await self._get_client()
        try:
            response = await client.get(path, params={"ref": context.branch})
        except httpx.TimeoutException as e:
            raise SourceError(f"Remote listing timed out after {self.timeout}s: {e}")
        except httpx.HTTPError as e:
            raise SourceError(f"Remote listing request failed: {e}")

        if response.status_code == 404:
            logger.warning(f"📁 Notes folder not found at {path}, treating as empty")
            return []

        if not response.is_success:
            raise SourceError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SourceError(f"Remote listing is not valid JSON: {e}", status=response.status_code)

        if not isinstance(payload, list):
            raise SourceError("Remote listing is not a JSON array", status=response.status_code)

        files = self._to_descriptors(context, payload)
        logger.info(f"✅ Remote listing returned {len(files)} of {len(payload)} entries")
        return files

    def _to_descriptors(self, context: RepoContext, payload: List[Any]) -> List[FileDescriptor]:
        """Keep note files only; directories and other entries are dropped."""
        now = datetime.now(timezone.utc)
        files: List[FileDescriptor] = []

        for item in payload:
            if not isinstance(item, dict):
                continue
            name = item.get("name")
            if item.get("type") != "file" or not isinstance(name, str):
                continue
            if not name.lower().endswith(self.extension):
                continue

            path = item.get("path") or f"{self.folder}/{name}"
            size = item.get("size")
            try:
                files.append(
                    FileDescriptor(
                        name=name,
                        path=path,
                        size=size if isinstance(size, int) and size >= 0 else 0,
                        url=self.note_url(context, path),
                        download_url=item.get("download_url"),
                        # the contents API carries no modification time
                        last_modified=now,
                        source=NoteSource.REMOTE,
                    )
                )
            except ValidationError as e:
                logger.warning(f"Skipping malformed listing entry {name!r}: {e}")

        return files
