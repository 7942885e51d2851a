"""
Version-stamped in-memory cache for dashboard snapshots.

Features:
- CacheToken: a monotonically increasing invalidation counter
- DataCache: snapshots keyed by name, each stamped with the token version
  current when it was stored; entries older than the token are stale
- Thread-safe operations with RLock
- Hit/miss statistics tracking

The store owns one DataCache and bumps its token on every write. Tests
construct their own and pass it in.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    size: int = 0
    version: int = 0

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": self.size,
            "version": self.version,
        }


class CacheToken:
    """Invalidation counter. Every call to bump() makes older snapshots stale."""

    def __init__(self, version: int = 0):
        self._version = version
        self._lock = threading.Lock()

    @property
    def version(self) -> int:
        return self._version

    def bump(self) -> int:
        with self._lock:
            self._version += 1
            return self._version


class DataCache:
    """Snapshots keyed by name, valid only while the token has not moved."""

    def __init__(self, token: CacheToken | None = None):
        self.token = token or CacheToken()
        self._entries: dict[str, tuple[Any, int]] = {}  # key -> (value, version)
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        """
        Return the cached value, or None when missing or stale.

        Stale entries are dropped on read.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            value, version = entry
            if version != self.token.version:
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return value

    def set(self, key: str, value: Any, version: int | None = None) -> None:
        with self._lock:
            self._entries[key] = (value, self.token.version if version is None else version)

    def get_or_load(self, key: str, loader) -> Any:
        """
        Return the cached value for *key*, calling *loader()* and caching on a miss.

        The snapshot is stamped with the version read before loading, so a
        write that lands while *loader* runs leaves it stale.
        """
        value = self.get(key)
        if value is None:
            version = self.token.version
            value = loader()
            self.set(key, value, version=version)
        return value

    def is_fresh(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry[1] == self.token.version

    def invalidate(self, reason: str | None = None) -> int:
        """Bump the token. Every snapshot stored so far becomes stale."""
        version = self.token.bump()
        logger.debug("cache invalidated (version=%d, reason=%s)", version, reason)
        return version

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                version=self.token.version,
            )
