"""
==============================================================================
Services Package
==============================================================================

This package provides:
- CacheStore: TTL-gated persistence of the last good catalog
- RefreshTaskManager: background catalog refresh task

"""

from .cache_store import CacheStore
from .refresh_service import RefreshTaskManager

__all__ = [
    "CacheStore",
    "RefreshTaskManager",
]
