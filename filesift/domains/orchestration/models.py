"""
Orchestration Models - Data types for orchestration domain.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from filesift.domains.filtering.models import FileTypeFilter, PathRangeFilter
from filesift.domains.search.models import ResultEntry


class SearchState(str, Enum):
    """Lifecycle of the current search generation."""

    IDLE = "idle"
    SEARCHING = "searching"
    COMPLETED = "completed"
    CANCELED = "canceled"
    FAILED = "failed"


class SearchCacheEntry(BaseModel):
    """Cached result set for one normalized keyword."""

    keyword: str
    items: list[ResultEntry] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    file_type: FileTypeFilter = FileTypeFilter.ALL
    path_range: PathRangeFilter = PathRangeFilter.ALL_DRIVES
    scope_root: str | None = None
    offset: int = 0
    has_more: bool = False
