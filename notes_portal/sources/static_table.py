"""
==============================================================================
Static Note Table Module
==============================================================================

Owner-maintained list of known note filenames.

The table is the always-available second step of the fallback chain. It
is validated when loaded: a malformed table fails at startup instead of
during a load.

JSON Structure:
--------------
{
  "files": [
    "2025_06_25_DC_001 - Introducao a teoria geral.html",
    ...
  ]
}

Estimated Metadata:
------------------
- size: 8000 + index * 1000 bytes
- last_modified: the ``YYYY_MM_DD`` date in the name, else now
- path / url: ``notes/<name>`` and ``./notes/<url-encoded name>``

==============================================================================
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote

from notes_portal.catalog.models import FileDescriptor, NoteSource
from notes_portal.core.exceptions import ConfigurationError


# Module logger
logger = logging.getLogger(__name__)


DATE_IN_NAME = re.compile(r"(\d{4})_(\d{2})_(\d{2})")

BASE_SIZE = 8000
SIZE_STEP = 1000


def date_from_name(name: str, default: datetime) -> datetime:
    """Parse the first ``YYYY_MM_DD`` date of a filename."""
    match = DATE_IN_NAME.search(name)
    if not match:
        return default
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return default


class StaticNoteTable:
    """
    Validated, ordered tuple of note filenames.

    Example:
        >>> table = StaticNoteTable(["2025_07_16_DP_004 - Dolo.html"])
        >>> table.descriptors()[0].path
        'notes/2025_07_16_DP_004 - Dolo.html'
    """

    def __init__(
        self,
        filenames: Sequence[str],
        extension: str = ".html",
        notes_dir: str = "notes",
    ) -> None:
        self._extension = extension
        self._notes_dir = notes_dir.strip("/")
        self._filenames: Tuple[str, ...] = self._validate(filenames)

    @property
    def filenames(self) -> Tuple[str, ...]:
        return self._filenames

    def __len__(self) -> int:
        return len(self._filenames)

    def _validate(self, filenames: Sequence[str]) -> Tuple[str, ...]:
        seen = set()
        for name in filenames:
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError(f"Invalid note filename in static table: {name!r}")
            if not name.lower().endswith(self._extension):
                raise ConfigurationError(
                    f"Static table entry lacks the {self._extension} extension: {name!r}"
                )
            if name in seen:
                raise ConfigurationError(f"Duplicate static table entry: {name!r}")
            seen.add(name)
        return tuple(filenames)

    @classmethod
    def from_file(cls, path: Path, extension: str = ".html", notes_dir: str = "notes") -> "StaticNoteTable":
        """
        Load the table from JSON.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid
        """
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Static note table not found: {path}", str(path))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid static note table JSON: {e}", str(path))

        if not isinstance(data, dict) or not isinstance(data.get("files"), list):
            raise ConfigurationError(
                "Static note table must be an object with a 'files' list", str(path)
            )

        table = cls(data["files"], extension=extension, notes_dir=notes_dir)
        logger.info(f"✅ Loaded {len(table)} known notes from {path}")
        return table

    def descriptors(self, now: Optional[datetime] = None) -> List[FileDescriptor]:
        """Build descriptors with estimated size and date."""
        now = now or datetime.now(timezone.utc)
        return [
            FileDescriptor(
                name=name,
                path=f"{self._notes_dir}/{name}",
                size=BASE_SIZE + index * SIZE_STEP,
                url=f"./{self._notes_dir}/{quote(name, safe='')}",
                last_modified=date_from_name(name, now),
                source=NoteSource.STATIC,
            )
            for index, name in enumerate(self._filenames)
        ]
