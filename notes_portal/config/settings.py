"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the notes portal using Pydantic Settings.

The catalog engine reads every tunable value from here: where the notes
live, which static table to trust, where the persisted cache is written,
how the remote listing API is reached and how long cached data stays
valid.

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables (prefix ``NOTES_``)
2. .env file
3. Default values

Cache Windows:
-------------
- memory_cache_ttl_ms: in-memory window used by ``load_files(False)``
- persisted_cache_ttl_ms: maximum age of the persisted cache entry

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_STATIC_TABLE = PACKAGE_DIR / "data" / "known_notes.json"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        notes_directory: Directory holding the HTML note files
        static_table_file: JSON table of known note filenames
        categories_file: Optional JSON override of the category table
        cache_file: Persisted catalog cache location
        remote_api_url: Base URL of the remote contents API
        static_host_suffix: Domain suffix of the static hosting provider
        site_url: Fixed public URL used to resolve the repository context
        fetch_timeout_seconds: Upper bound for one remote listing fetch
        memory_cache_ttl_ms: In-memory catalog validity window
        persisted_cache_ttl_ms: Persisted cache maximum age
        auto_refresh_enabled: Start the background refresh task
        note_extension: Extension that marks a note file
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> settings.memory_cache_ttl_ms
        300000
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_prefix="NOTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Portal de Notas",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # NOTE SOURCES
    # =========================================================================
    notes_directory: str = Field(
        default="notes",
        description="Directory holding the HTML note files"
    )

    static_table_file: str = Field(
        default=str(DEFAULT_STATIC_TABLE),
        description="JSON table of known note filenames"
    )

    categories_file: Optional[str] = Field(
        default=None,
        description="Optional JSON file overriding the category table"
    )

    note_extension: str = Field(
        default=".html",
        description="Extension that marks a note file"
    )

    # =========================================================================
    # REMOTE LISTING API
    # =========================================================================
    remote_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the remote contents API"
    )

    static_host_suffix: str = Field(
        default="github.io",
        description="Domain suffix of the static hosting provider"
    )

    site_url: Optional[str] = Field(
        default=None,
        description="Public URL of the portal, used to resolve the repo context"
    )

    fetch_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Upper bound for a single remote listing fetch"
    )

    # =========================================================================
    # CACHE SETTINGS
    # =========================================================================
    cache_file: str = Field(
        default="storage/cache/notes-portal-cache.json",
        description="Persisted catalog cache location"
    )

    memory_cache_ttl_ms: int = Field(
        default=300_000,
        ge=1_000,
        description="In-memory catalog validity window (ms)"
    )

    persisted_cache_ttl_ms: int = Field(
        default=3_600_000,
        ge=1_000,
        description="Persisted cache maximum age (ms)"
    )

    auto_refresh_enabled: bool = Field(
        default=True,
        description="Run the background refresh task"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """Normalize the environment name, defaulting unknown values."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("note_extension")
    @classmethod
    def validate_note_extension(cls, value: str) -> str:
        """
        Normalize the note extension to a lowercase, dot-prefixed suffix.

        Raises:
            ValueError: If the extension is empty
        """
        normalized = value.strip().lower()
        if not normalized or normalized == ".":
            raise ValueError("note_extension cannot be empty")
        if not normalized.startswith("."):
            normalized = f".{normalized}"
        return normalized

    @field_validator("remote_api_url")
    @classmethod
    def validate_remote_api_url(cls, value: str) -> str:
        """Strip trailing slashes so paths can be appended safely."""
        return value.rstrip("/")

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def notes_path(self) -> Path:
        """Notes directory as a Path object."""
        return Path(self.notes_directory)

    @property
    def static_table_path(self) -> Path:
        """Static filename table as a Path object."""
        return Path(self.static_table_file)

    @property
    def categories_path(self) -> Optional[Path]:
        """Category table override, if configured."""
        return Path(self.categories_file) if self.categories_file else None

    @property
    def cache_path(self) -> Path:
        """Persisted cache file as a Path object."""
        return Path(self.cache_file)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def ensure_directories(self) -> None:
        """Create the persisted cache directory."""
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Uses lru_cache so only one Settings instance is created per process.
    Tests call ``get_settings.cache_clear()`` after patching the environment.

    Returns:
        Global Settings instance
    """
    settings = Settings()
    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
