"""
Application Exception Handling

Single AppException base for all portal errors, the catalog error taxonomy
built on it, and the FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides a consistent error response format across the API and a
    common base for the catalog engine's internal error taxonomy.

    Usage:
        raise AppException("Category not found", "CATEGORY_NOT_FOUND", 404)

    Error Codes:
        Catalog engine (never surfaced to the view):
            - SOURCE_UNAVAILABLE (502)
            - CACHE_CORRUPT (500)
            - CACHE_STALE (410)

        Startup:
            - CONFIGURATION_INVALID (500)

        API:
            - CATEGORY_NOT_FOUND (404)
            - CATALOG_NOT_LOADED (503)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "SOURCE_UNAVAILABLE")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


# ============================================
# CATALOG ERROR TAXONOMY
# ============================================

class SourceError(AppException):
    """Remote listing failed; the loader advances its fallback chain."""

    def __init__(self, message: str, status: Optional[int] = None):
        details = {"upstream_status": status} if status is not None else {}
        super().__init__(message, "SOURCE_UNAVAILABLE", 502, details)
        self.status = status


class CacheCorruptError(AppException):
    """Persisted cache entry could not be parsed; treated as a miss."""

    def __init__(self, reason: str):
        super().__init__(f"Persisted cache is unreadable: {reason}", "CACHE_CORRUPT", 500)


class CacheStaleError(AppException):
    """Persisted cache entry exceeded its maximum age; treated as a miss."""

    def __init__(self, age_ms: int, max_age_ms: int):
        super().__init__(
            f"Persisted cache is {age_ms} ms old (max {max_age_ms} ms)",
            "CACHE_STALE",
            410,
            {"age_ms": age_ms, "max_age_ms": max_age_ms}
        )


class ConfigurationError(AppException):
    """Malformed configuration table; raised at startup, never mid-operation."""

    def __init__(self, message: str, source: Optional[str] = None):
        details = {"source": source} if source else {}
        super().__init__(message, "CONFIGURATION_INVALID", 500, details)


# ============================================
# FASTAPI INTEGRATION
# ============================================

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def category_not_found(key: str) -> AppException:
    """Create unknown category exception."""
    return AppException(
        f"Category '{key}' does not exist",
        "CATEGORY_NOT_FOUND",
        404,
        {"category": key}
    )


def catalog_not_loaded() -> AppException:
    """Create catalog not loaded exception."""
    return AppException(
        "Notes catalog not loaded",
        "CATALOG_NOT_LOADED",
        503
    )
