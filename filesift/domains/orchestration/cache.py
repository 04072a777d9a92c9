"""
Search Result Cache - In-memory caching with TTL support.

Keeps recent result sets so revisiting a search:// view or paging
through it does not re-query the index.

Features:
- Lazy TTL expiration on read
- Deep copies in and out so callers never share entries
- Atomic append of later pages
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from filesift.domains.filtering.models import FileTypeFilter, PathRangeFilter
from filesift.domains.search.models import PathSet, ResultEntry

from .models import SearchCacheEntry

logger = logging.getLogger(__name__)

__all__ = ["ResultCache", "CACHE_KEY_PREFIX"]

CACHE_KEY_PREFIX = "search://"
DEFAULT_TTL_SECONDS = 30.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResultCache:
    """
    Thread-safe search result cache.

    Example:
        >>> cache = ResultCache(ttl_seconds=30)
        >>> key = ResultCache.make_key("report")
        >>> cache.update(key, items, offset=10, has_more=False, keyword="report")
        >>> cache.get(key).offset
        10
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize cache.

        Args:
            ttl_seconds: Age after which an entry is discarded
            clock: Source of the current time, injectable for tests
        """
        self._entries: dict[str, SearchCacheEntry] = {}
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._lock = threading.RLock()

    @staticmethod
    def make_key(keyword: str) -> str:
        """Cache key for a normalized keyword."""
        return CACHE_KEY_PREFIX + keyword

    def get(self, key: str) -> SearchCacheEntry | None:
        """Get a copy of a live entry."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            logger.debug("Cache hit: %s (%d items)", key, len(entry.items))
            return entry.model_copy(deep=True)

    def update(
        self,
        key: str,
        items: list[ResultEntry],
        offset: int,
        has_more: bool,
        keyword: str,
        scope_root: str | None = None,
        file_type: FileTypeFilter = FileTypeFilter.ALL,
        path_range: PathRangeFilter = PathRangeFilter.ALL_DRIVES,
    ) -> None:
        """Create or replace an entry."""
        entry = SearchCacheEntry(
            keyword=keyword,
            items=[item.model_copy(deep=True) for item in items],
            last_updated=self._clock(),
            file_type=file_type,
            path_range=path_range,
            scope_root=scope_root,
            offset=offset,
            has_more=has_more,
        )
        with self._lock:
            self._entries[key] = entry
        logger.debug("Cached %d items under %s", len(items), key)

    def append(
        self,
        key: str,
        items: list[ResultEntry],
        offset: int,
        has_more: bool,
    ) -> bool:
        """Merge a later page into an existing entry; no-op when absent."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                logger.debug("No cache entry to append to: %s", key)
                return False

            seen = PathSet(item.path for item in entry.items)
            for item in items:
                if seen.add(item.path):
                    entry.items.append(item.model_copy(deep=True))
            entry.offset = offset
            entry.has_more = has_more
            entry.last_updated = self._clock()
            return True

    def clear(self, key: str | None = None) -> None:
        """Clear one entry, or all entries."""
        with self._lock:
            if key is None:
                count = len(self._entries)
                self._entries.clear()
                logger.info("Cleared %d cache entries", count)
            else:
                self._entries.pop(key, None)

    def is_valid(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "size": len(self._entries),
                "ttl_seconds": self._ttl.total_seconds(),
                "total_items": sum(len(e.items) for e in self._entries.values()),
                "keys": list(self._entries),
            }

    def _live_entry(self, key: str) -> SearchCacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.last_updated > self._ttl:
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        return entry
