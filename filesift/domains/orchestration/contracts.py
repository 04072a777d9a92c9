"""
Orchestration Contracts - Interfaces for orchestration domain.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from filesift.domains.filtering.models import FileTypeFilter, PathRangeFilter
from filesift.domains.search.models import ResultEntry

from .models import SearchCacheEntry


@runtime_checkable
class SearchCache(Protocol):
    """Contract for the short-lived search result cache."""

    def get(self, key: str) -> SearchCacheEntry | None:
        """Get a live entry, or None when absent or expired."""
        ...

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
        ...

    def append(
        self,
        key: str,
        items: list[ResultEntry],
        offset: int,
        has_more: bool,
    ) -> bool:
        """
        Merge a page into an existing entry.

        Returns:
            False when there is no entry to append to
        """
        ...

    def clear(self, key: str | None = None) -> None:
        """Drop one entry, or all entries when key is None."""
        ...

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        ...
