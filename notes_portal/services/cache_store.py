"""
==============================================================================
Cache Store Module
==============================================================================

TTL-gated persistence of the last good catalog.

The store keeps a single JSON document on disk:

    {"files": [...], "timestamp": 1751328000000, "version": "1.0.0"}

Validity Rules:
--------------
- An entry older than ``max_age_ms`` is stale: removed and reported absent
- An unparsable or schema-invalid entry is corrupt: removed and reported
  absent
- Neither condition is raised to the caller

``write`` always overwrites the previous entry with a fresh timestamp.

==============================================================================
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from notes_portal.catalog.models import CacheEntry, NoteFile
from notes_portal.core.exceptions import CacheCorruptError, CacheStaleError


# Module logger
logger = logging.getLogger(__name__)


CACHE_VERSION = "1.0.0"
PERSISTED_TTL_MS = 3_600_000


def now_ms() -> int:
    """Current wall clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class CacheStore:
    """
    JSON file persistence for catalog snapshots.

    Attributes:
        path: Location of the cache document
        max_age_ms: Maximum entry age before it is treated as absent

    Example:
        >>> store = CacheStore(Path("storage/cache/notes-portal-cache.json"))
        >>> store.write(catalog.files)
        >>> entry = store.read()
        >>> len(entry.files)
        45
    """

    def __init__(
        self,
        path: Path,
        max_age_ms: int = PERSISTED_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.path = path
        self.max_age_ms = max_age_ms
        self._clock = clock

    # =========================================================================
    # READ
    # =========================================================================

    def read(self) -> Optional[CacheEntry]:
        """
        Read the persisted entry.

        Returns:
            CacheEntry when present and fresh, otherwise None
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            logger.warning(f"⚠️ Cache {self.path} is not valid UTF-8, discarding")
            self.clear()
            return None
        except OSError as e:
            logger.warning(f"⚠️ Could not read cache {self.path}: {e}")
            return None

        try:
            entry = self._decode(raw)
        except CacheCorruptError as e:
            logger.warning(f"⚠️ {e.message}, discarding")
            self.clear()
            return None
        except CacheStaleError as e:
            logger.info(f"🕒 {e.message}, discarding")
            self.clear()
            return None

        logger.debug(f"📦 Cache hit: {len(entry.files)} files")
        return entry

    def _decode(self, raw: str) -> CacheEntry:
        """
        Parse and age-check a cache document.

        Raises:
            CacheCorruptError: If the document cannot be parsed
            CacheStaleError: If the entry exceeded its maximum age
        """
        try:
            entry = CacheEntry.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            raise CacheCorruptError(f"invalid JSON ({e})")
        except ValidationError as e:
            raise CacheCorruptError(f"{e.error_count()} schema errors")

        age_ms = self._clock() - entry.timestamp
        if age_ms > self.max_age_ms:
            raise CacheStaleError(age_ms, self.max_age_ms)

        return entry

    # =========================================================================
    # WRITE / CLEAR
    # =========================================================================

    def write(self, files: List[NoteFile]) -> Optional[CacheEntry]:
        """
        Overwrite the persisted entry.

        Persistence is best-effort: OS errors are logged, not raised.

        Returns:
            The entry written, or None when writing failed
        """
        entry = CacheEntry(files=files, timestamp=self._clock(), version=CACHE_VERSION)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(entry.model_dump_json(), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"⚠️ Could not save cache {self.path}: {e}")
            return None

        logger.debug(f"💾 Cached {len(files)} files")
        return entry

    def clear(self) -> None:
        """Remove the persisted entry."""
        try:
            self.path.unlink(missing_ok=True)
            logger.info("🗑️ Cache cleared")
        except OSError as e:
            logger.warning(f"⚠️ Could not clear cache {self.path}: {e}")
