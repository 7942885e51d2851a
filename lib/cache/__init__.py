"""
In-memory cache layer for the YAM dashboard.

Provides:
- CacheToken: explicit invalidation counter
- DataCache: version-stamped snapshot cache owned by the StateStore
"""

from .cache_manager import CacheStats, CacheToken, DataCache

__all__ = [
    "CacheStats",
    "CacheToken",
    "DataCache",
]
