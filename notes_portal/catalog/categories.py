"""
==============================================================================
Category Table Module
==============================================================================

Immutable configuration of the note categories ("cadernos").

Each category is keyed by the short code that appears in note filenames,
e.g. ``2025_06_25_DC_001 - ....html`` belongs to ``DC``. Files matching no
code fall into the implicit default category ``GERAL``.

JSON Structure (optional override file):
---------------------------------------
{
  "categories": [
    {"key": "DC", "display_name": "Direito Constitucional",
     "icon": "⚖️", "color": "#3498db"},
    ...
  ],
  "default": {"key": "GERAL", "display_name": "Geral"}
}

==============================================================================
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from pydantic import ValidationError

from notes_portal.core.exceptions import ConfigurationError

from .models import DEFAULT_CATEGORY, ALL_CATEGORIES, CategoryDefinition


# Module logger
logger = logging.getLogger(__name__)


DEFAULT_DEFINITIONS: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(key="DC", display_name="Direito Constitucional", icon="⚖️", color="#3498db"),
    CategoryDefinition(key="DA", display_name="Direito Administrativo", icon="🏛️", color="#9b59b6"),
    CategoryDefinition(key="RLM", display_name="Raciocínio Lógico", icon="🧠", color="#e74c3c"),
    CategoryDefinition(key="PT", display_name="Língua Portuguesa", icon="📚", color="#27ae60"),
    CategoryDefinition(key="MT", display_name="Matemática", icon="🔢", color="#f39c12"),
    CategoryDefinition(key="DPP", display_name="Processo Penal", icon="⚔️", color="#e67e22"),
    CategoryDefinition(key="DP", display_name="Direito Penal", icon="🛡️", color="#c0392b"),
    CategoryDefinition(key="INF", display_name="Informática", icon="💻", color="#2c3e50"),
)

DEFAULT_FALLBACK = CategoryDefinition(
    key=DEFAULT_CATEGORY, display_name="Geral", icon="📋", color="#95a5a6"
)


class CategoryTable:
    """
    Read-only category configuration.

    The table is validated once at construction; a malformed table raises
    ConfigurationError immediately so the process fails at startup rather
    than mid-load.

    Example:
        >>> table = CategoryTable()
        >>> table.codes
        ('DC', 'DA', 'RLM', 'PT', 'MT', 'DPP', 'DP', 'INF')
        >>> table.get("GERAL").display_name
        'Geral'
    """

    def __init__(
        self,
        definitions: Tuple[CategoryDefinition, ...] = DEFAULT_DEFINITIONS,
        default: CategoryDefinition = DEFAULT_FALLBACK,
    ) -> None:
        self._definitions = tuple(definitions)
        self._default = default
        self._validate()
        self._by_key: Dict[str, CategoryDefinition] = {
            d.key: d for d in (*self._definitions, self._default)
        }

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def codes(self) -> Tuple[str, ...]:
        """Category codes in declaration order, default excluded."""
        return tuple(d.key for d in self._definitions)

    @property
    def default(self) -> CategoryDefinition:
        return self._default

    @property
    def keys(self) -> Tuple[str, ...]:
        """Every category key, default last."""
        return (*self.codes, self._default.key)

    def get(self, key: str) -> Optional[CategoryDefinition]:
        return self._by_key.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[CategoryDefinition]:
        yield from self._definitions
        yield self._default

    def __len__(self) -> int:
        return len(self._by_key)

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def _validate(self) -> None:
        seen = set()
        for definition in (*self._definitions, self._default):
            key = definition.key
            if not key.isalnum() or key != key.upper():
                raise ConfigurationError(
                    f"Category key must be uppercase alphanumeric: {key!r}"
                )
            if key == ALL_CATEGORIES.upper():
                raise ConfigurationError(f"Category key {key!r} is reserved")
            if key in seen:
                raise ConfigurationError(f"Duplicate category key: {key!r}")
            seen.add(key)

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def from_file(cls, path: Path) -> "CategoryTable":
        """
        Load a category table from JSON.

        Args:
            path: JSON file following the module-level structure

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid
        """
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Category table not found: {path}", str(path))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid category table JSON: {e}", str(path))

        if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
            raise ConfigurationError(
                "Category table must be an object with a 'categories' list", str(path)
            )

        try:
            definitions = tuple(
                CategoryDefinition.model_validate(item) for item in data["categories"]
            )
            default = (
                CategoryDefinition.model_validate(data["default"])
                if "default" in data
                else DEFAULT_FALLBACK
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid category entry: {e}", str(path))

        table = cls(definitions, default)
        logger.info(f"✅ Loaded {len(definitions)} categories from {path}")
        return table
