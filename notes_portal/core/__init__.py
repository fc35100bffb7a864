"""
==============================================================================
Core Package
==============================================================================

Core infrastructure for the application.

Modules:
--------
- exceptions: AppException, the catalog error taxonomy and factories
- dependencies: FastAPI dependency injection functions

Usage:
------
    from notes_portal.core import exceptions
    raise exceptions.category_not_found("XYZ")

==============================================================================
"""

from .exceptions import (
    AppException,
    CacheCorruptError,
    CacheStaleError,
    ConfigurationError,
    SourceError,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "CacheCorruptError",
    "CacheStaleError",
    "ConfigurationError",
    "SourceError",
    "register_exception_handlers",
]
