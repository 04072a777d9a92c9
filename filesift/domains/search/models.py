"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from filesift.domains.filtering.models import (
    AudioDurationFilter,
    DateRangeFilter,
    FileTypeFilter,
    ImageDimensionFilter,
    PathRangeFilter,
    SizeRangeFilter,
)


class SearchMode(str, Enum):
    """Which executors a search runs."""

    FILE_NAME = "file_name"
    FOLDER = "folder"
    NOTES = "notes"
    ALL = "all"


class Taxonomy(str, Enum):
    """Display bucket of a result entry."""

    NOTES = "notes"
    FOLDER = "folder"
    FILE = "file"
    OTHER = "other"


class SearchOptions(BaseModel):
    """Filters and mode for one search request."""

    file_type: FileTypeFilter = FileTypeFilter.ALL
    path_range: PathRangeFilter = PathRangeFilter.ALL_DRIVES
    date_range: DateRangeFilter = DateRangeFilter.ALL
    size_range: SizeRangeFilter = SizeRangeFilter.ALL
    image_size: ImageDimensionFilter = ImageDimensionFilter.ALL
    duration: AudioDurationFilter = AudioDurationFilter.ALL
    mode: SearchMode = SearchMode.FILE_NAME
    search_names: bool = True
    search_folders: bool = False
    search_notes: bool = True

    # Custom date range
    date_from: datetime | None = None
    date_to: datetime | None = None

    # Custom size range (bytes)
    size_min: int | None = Field(default=None, ge=0)
    size_max: int | None = Field(default=None, ge=0)

    model_config = {"frozen": True}


class MediaInfo(BaseModel):
    """Pixel dimensions and play length reported by a media probe."""

    width: int | None = None
    height: int | None = None
    duration_ms: int | None = None


class ResultEntry(BaseModel):
    """Enriched file or folder hit."""

    path: str
    name: str
    is_directory: bool = False
    size_bytes: int = -1
    modified_at: datetime | None = None
    created_at: datetime | None = None
    type_label: str = ""
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    pixel_width: int | None = None
    pixel_height: int | None = None
    duration_ms: int | None = None
    taxonomy: Taxonomy | None = None
    from_name_match: bool = False
    from_notes_match: bool = False


class SearchResult(BaseModel):
    """One query or page worth of results."""

    items: list[ResultEntry] = Field(default_factory=list)
    keyword: str = ""
    offset: int = 0
    has_more: bool = False
    page_size: int = 0
    max_results: int = 0
    grouped_items: dict[Taxonomy, list[ResultEntry]] = Field(default_factory=dict)


class SearchResultPage(BaseModel):
    """A single raw page from the filename index."""

    paths: list[str] = Field(default_factory=list)
    offset: int = 0
    has_more: bool = False


class PathSet:
    """
    Insertion-ordered set of paths compared case-insensitively.

    The first spelling seen for a path is the one kept.
    """

    def __init__(self, paths: Iterable[str] | None = None) -> None:
        self._paths: dict[str, str] = {}
        if paths is not None:
            for path in paths:
                self.add(path)

    def add(self, path: str) -> bool:
        """Add a path; returns False when it was already present."""
        key = path.casefold()
        if key in self._paths:
            return False
        self._paths[key] = path
        return True

    def update(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.add(path)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and path.casefold() in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths.values()))

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"PathSet({list(self._paths.values())!r})"
