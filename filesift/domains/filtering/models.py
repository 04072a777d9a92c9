"""
Filtering Models - Filter enums and tier boundaries.
"""

from __future__ import annotations

from enum import Enum

KB = 1024
MB = 1024 * KB
MINUTE_MS = 60 * 1000


class FileTypeFilter(str, Enum):
    """File type categories."""

    ALL = "all"
    IMAGES = "images"
    VIDEOS = "videos"
    AUDIO = "audio"
    DOCUMENTS = "documents"
    FOLDERS = "folders"


class PathRangeFilter(str, Enum):
    """Where a search is allowed to look."""

    ALL_DRIVES = "all_drives"
    CURRENT_DRIVE = "current_drive"
    CURRENT_FOLDER = "current_folder"  # Current folder and its subfolders


class DateRangeFilter(str, Enum):
    """Modified-date windows."""

    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    THIS_YEAR = "this_year"
    CUSTOM = "custom"


class SizeRangeFilter(str, Enum):
    """File size tiers."""

    ALL = "all"
    TINY = "tiny"  # < 100KB
    SMALL = "small"  # 100KB - 1MB
    MEDIUM = "medium"  # 1MB - 10MB
    LARGE = "large"  # 10MB - 100MB
    HUGE = "huge"  # >= 100MB
    CUSTOM = "custom"


class ImageDimensionFilter(str, Enum):
    """Image size tiers, by the longer edge."""

    ALL = "all"
    SMALL = "small"  # < 800px
    MEDIUM = "medium"  # 800px - 1920px
    LARGE = "large"  # 1920px - 3840px
    HUGE = "huge"  # >= 3840px


class AudioDurationFilter(str, Enum):
    """Audio/video duration tiers."""

    ALL = "all"
    SHORT = "short"  # < 1 min
    MEDIUM = "medium"  # 1 - 5 min
    LONG = "long"  # 5 - 20 min
    VERY_LONG = "very_long"  # >= 20 min


# Half-open [low, high) ranges; None means unbounded on that side.
SIZE_TIERS: dict[SizeRangeFilter, tuple[int | None, int | None]] = {
    SizeRangeFilter.TINY: (None, 100 * KB),
    SizeRangeFilter.SMALL: (100 * KB, MB),
    SizeRangeFilter.MEDIUM: (MB, 10 * MB),
    SizeRangeFilter.LARGE: (10 * MB, 100 * MB),
    SizeRangeFilter.HUGE: (100 * MB, None),
}

DIMENSION_TIERS: dict[ImageDimensionFilter, tuple[int | None, int | None]] = {
    ImageDimensionFilter.SMALL: (None, 800),
    ImageDimensionFilter.MEDIUM: (800, 1920),
    ImageDimensionFilter.LARGE: (1920, 3840),
    ImageDimensionFilter.HUGE: (3840, None),
}

DURATION_TIERS: dict[AudioDurationFilter, tuple[int | None, int | None]] = {
    AudioDurationFilter.SHORT: (None, MINUTE_MS),
    AudioDurationFilter.MEDIUM: (MINUTE_MS, 5 * MINUTE_MS),
    AudioDurationFilter.LONG: (5 * MINUTE_MS, 20 * MINUTE_MS),
    AudioDurationFilter.VERY_LONG: (20 * MINUTE_MS, None),
}

IMAGE_EXTENSIONS = frozenset(
    {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}
)
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".mkv", ".avi", ".wmv", ".flv", ".webm"})
AUDIO_EXTENSIONS = frozenset({".mp3", ".wav", ".flac", ".aac", ".ogg", ".wma", ".m4a"})
DOCUMENT_EXTENSIONS = frozenset(
    {".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt"}
)

TYPE_EXTENSIONS: dict[FileTypeFilter, frozenset[str]] = {
    FileTypeFilter.IMAGES: IMAGE_EXTENSIONS,
    FileTypeFilter.VIDEOS: VIDEO_EXTENSIONS,
    FileTypeFilter.AUDIO: AUDIO_EXTENSIONS,
    FileTypeFilter.DOCUMENTS: DOCUMENT_EXTENSIONS,
}

VIRTUAL_PREFIXES = ("zip://", "search://", "content://", "lib://", "tag://")
