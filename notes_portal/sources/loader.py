"""
==============================================================================
Source Loader Module
==============================================================================

Fetches raw note descriptors through a strictly ordered fallback chain.

Fallback Chain:
--------------
1. Remote listing (only when the context uses the remote source)
   - 404 means "empty folder": an empty list is returned, chain stops
   - SourceError is logged and the chain advances
2. Static note table; always available
3. Persisted cache, only when the static table is empty
4. Empty list

``load`` never raises; the orchestrator decides what an empty result means.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from notes_portal.catalog.models import FileDescriptor, NoteSource, RepoContext
from notes_portal.core.exceptions import SourceError
from notes_portal.services.cache_store import CacheStore

from .remote import RemoteListingClient
from .static_table import StaticNoteTable


# Module logger
logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """
    Outcome of one walk through the fallback chain.

    Attributes:
        files: Descriptors from the first source that produced data
        origin: Which source produced them; None when nothing did
        errors: Messages of the sources that failed along the way
    """

    files: List[FileDescriptor] = field(default_factory=list)
    origin: Optional[NoteSource] = None
    errors: List[str] = field(default_factory=list)


class SourceLoader:
    """
    Walks the fallback chain for a RepoContext.

    Example:
        >>> loader = SourceLoader(static_table, cache_store, remote_client)
        >>> result = await loader.load(context)
        >>> result.origin
        <NoteSource.STATIC: 'static'>
    """

    def __init__(
        self,
        static_table: StaticNoteTable,
        cache_store: CacheStore,
        remote: Optional[RemoteListingClient] = None,
        fetch_timeout: float = 10.0,
    ) -> None:
        self._static = static_table
        self._cache = cache_store
        self._remote = remote
        self._fetch_timeout = fetch_timeout

    async def load(self, context: RepoContext) -> LoadResult:
        """
        Return descriptors from the first source that yields data.

        Args:
            context: Resolved repository context

        Returns:
            LoadResult; never raises
        """
        result = LoadResult()

        # 1. Remote listing
        if context.use_remote_source and self._remote is not None:
            try:
                files = await self._fetch_remote(context)
                result.files = files
                result.origin = NoteSource.REMOTE
                return result
            except SourceError as e:
                logger.warning(f"⚠️ Remote listing failed, using static table: {e.message}")
                result.errors.append(e.message)

        # 2. Static note table
        files = self._static.descriptors()
        if files:
            logger.info(f"🏠 Loaded {len(files)} files from static table")
            result.files = files
            result.origin = NoteSource.STATIC
            return result

        # 3. Persisted cache
        entry = await asyncio.to_thread(self._cache.read)
        if entry is not None and entry.files:
            logger.info(f"📦 Static table empty, restored {len(entry.files)} files from cache")
            result.files = [
                FileDescriptor(
                    **note.model_dump(exclude={"source", "category", "numeric_order"}),
                    source=NoteSource.CACHED,
                )
                for note in entry.files
            ]
            result.origin = NoteSource.CACHED
            return result

        # 4. Nothing available
        logger.warning("📭 No source produced any note files")
        return result

    async def _fetch_remote(self, context: RepoContext) -> List[FileDescriptor]:
        """Remote listing under a hard deadline; timeouts become SourceError."""
        try:
            return await asyncio.wait_for(
                self._remote.list_notes(context),
                timeout=self._fetch_timeout,
            )
        except asyncio.TimeoutError:
            raise SourceError(f"Remote listing exceeded {self._fetch_timeout}s")

    async def close(self) -> None:
        if self._remote is not None:
            await self._remote.close()
