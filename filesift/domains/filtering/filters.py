"""
Filter Engine - Stateless predicates over candidate paths and result entries.

Path-level filters (type, scope) run on raw index hits; entry-level filters
(date, size, image dimensions, duration) run after metadata is materialized.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import PureWindowsPath
from typing import TYPE_CHECKING

from .models import (
    DIMENSION_TIERS,
    DURATION_TIERS,
    SIZE_TIERS,
    TYPE_EXTENSIONS,
    VIRTUAL_PREFIXES,
    AudioDurationFilter,
    DateRangeFilter,
    FileTypeFilter,
    ImageDimensionFilter,
    PathRangeFilter,
    SizeRangeFilter,
)

if TYPE_CHECKING:
    from filesift.domains.search.models import ResultEntry

logger = logging.getLogger(__name__)

__all__ = ["FilterEngine", "file_name", "file_extension", "is_virtual_path"]

_SEPARATORS = re.compile(r"[\\/]")
_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:")


def file_name(path: str) -> str:
    """Last path component, for both Windows and POSIX separators."""
    stripped = path.rstrip("\\/")
    if not stripped:
        return path
    return _SEPARATORS.split(stripped)[-1]


def file_extension(path: str) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    name = file_name(path)
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot:].lower()


def is_virtual_path(path: str | None) -> bool:
    """True for browser protocol paths (archives, searches, libraries, tags)."""
    if not path:
        return False
    normalized = path.strip().replace("\\", "/").lower()
    return normalized.startswith(VIRTUAL_PREFIXES) or normalized.startswith("zip:")


def _local_naive(value: datetime | None) -> datetime | None:
    """Aware datetimes become naive local time; naive ones pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _in_range(value: int, bounds: tuple[int | None, int | None]) -> bool:
    low, high = bounds
    if low is not None and value < low:
        return False
    if high is not None and value >= high:
        return False
    return True


class FilterEngine:
    """
    Pure, stateless search filters.

    Example:
        >>> engine = FilterEngine()
        >>> engine.apply_type_filter(["a.png", "b.txt"], FileTypeFilter.IMAGES)
        ['a.png']
    """

    def apply_type_filter(
        self,
        paths: Iterable[str] | None,
        file_type: FileTypeFilter,
    ) -> list[str]:
        """Keep paths whose extension (or directory-ness) matches the category."""
        if paths is None:
            return []

        if file_type == FileTypeFilter.ALL:
            return list(paths)

        if file_type == FileTypeFilter.FOLDERS:
            return [p for p in paths if os.path.isdir(p)]

        extensions = TYPE_EXTENSIONS[file_type]
        return [p for p in paths if file_extension(p) in extensions]

    def get_range_path(
        self,
        path_range: PathRangeFilter,
        current_path: str | None,
    ) -> str | None:
        """
        Resolve a path-scope filter to a root directory.

        Args:
            path_range: Scope selected by the user
            current_path: Folder currently shown in the browser

        Returns:
            Root directory to restrict the search to, or None for no restriction
        """
        if path_range == PathRangeFilter.ALL_DRIVES or not current_path:
            return None

        # Archive, library and search views have no filesystem root
        if is_virtual_path(current_path):
            return None

        if path_range == PathRangeFilter.CURRENT_FOLDER:
            return current_path

        try:
            return _drive_root(current_path)
        except (OSError, ValueError) as e:
            logger.debug("Could not resolve drive root for %s: %s", current_path, e)
            return None

    def apply_date_filter(
        self,
        entries: Iterable[ResultEntry] | None,
        date_range: DateRangeFilter,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        now: datetime | None = None,
    ) -> list[ResultEntry]:
        """Keep entries modified inside the window; undated entries pass."""
        if entries is None:
            return []
        if date_range == DateRangeFilter.ALL:
            return list(entries)

        now = _local_naive(now) or datetime.now()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        min_date: datetime | None = None
        max_date: datetime | None = None

        if date_range == DateRangeFilter.TODAY:
            min_date = today
            max_date = today + timedelta(days=1) - timedelta(seconds=1)
        elif date_range == DateRangeFilter.THIS_WEEK:
            # Weeks start on Sunday
            min_date = today - timedelta(days=(today.weekday() + 1) % 7)
            max_date = now
        elif date_range == DateRangeFilter.THIS_MONTH:
            min_date = today.replace(day=1)
            max_date = now
        elif date_range == DateRangeFilter.THIS_YEAR:
            min_date = today.replace(month=1, day=1)
            max_date = now
        elif date_range == DateRangeFilter.CUSTOM:
            min_date = _local_naive(date_from)
            max_date = _local_naive(date_to)

        def keep(entry: ResultEntry) -> bool:
            modified = _local_naive(entry.modified_at)
            if modified is None:
                return True
            if min_date is not None and modified < min_date:
                return False
            if max_date is not None and modified > max_date:
                return False
            return True

        return [e for e in entries if keep(e)]

    def apply_size_filter(
        self,
        entries: Iterable[ResultEntry] | None,
        size_range: SizeRangeFilter,
        size_min: int | None = None,
        size_max: int | None = None,
    ) -> list[ResultEntry]:
        """Keep files in the size tier; folders and unknown sizes pass."""
        if entries is None:
            return []
        if size_range == SizeRangeFilter.ALL:
            return list(entries)

        def keep(entry: ResultEntry) -> bool:
            if entry.is_directory or entry.size_bytes < 0:
                return True
            if size_range == SizeRangeFilter.CUSTOM:
                if size_min is not None and entry.size_bytes < size_min:
                    return False
                if size_max is not None and entry.size_bytes > size_max:
                    return False
                return True
            return _in_range(entry.size_bytes, SIZE_TIERS[size_range])

        return [e for e in entries if keep(e)]

    def apply_image_dimension_filter(
        self,
        entries: Iterable[ResultEntry] | None,
        image_size: ImageDimensionFilter,
    ) -> list[ResultEntry]:
        """Keep images whose longer edge falls in the tier."""
        if entries is None:
            return []
        if image_size == ImageDimensionFilter.ALL:
            return list(entries)

        bounds = DIMENSION_TIERS[image_size]

        def keep(entry: ResultEntry) -> bool:
            if entry.is_directory:
                return False
            longest = max(entry.pixel_width or 0, entry.pixel_height or 0)
            if longest <= 0:
                return False
            return _in_range(longest, bounds)

        return [e for e in entries if keep(e)]

    def apply_audio_duration_filter(
        self,
        entries: Iterable[ResultEntry] | None,
        duration: AudioDurationFilter,
    ) -> list[ResultEntry]:
        """Keep media whose duration falls in the tier."""
        if entries is None:
            return []
        if duration == AudioDurationFilter.ALL:
            return list(entries)

        bounds = DURATION_TIERS[duration]

        def keep(entry: ResultEntry) -> bool:
            if entry.is_directory or not entry.duration_ms:
                return False
            return _in_range(entry.duration_ms, bounds)

        return [e for e in entries if keep(e)]


def _drive_root(path: str) -> str | None:
    """Drive letter root, UNC share root, or POSIX mount point of a path."""
    if _WINDOWS_DRIVE.match(path):
        return path[0].upper() + ":\\"

    if path.startswith("\\\\"):
        return PureWindowsPath(path).anchor or None

    if path.startswith("/"):
        current = os.path.abspath(path)
        while not os.path.ismount(current):
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return current

    return None
