"""
Filtering Domain - Type, scope, date, size, dimension and duration filters.
"""

from .filters import FilterEngine, file_extension, file_name, is_virtual_path
from .models import (
    AudioDurationFilter,
    DateRangeFilter,
    FileTypeFilter,
    ImageDimensionFilter,
    PathRangeFilter,
    SizeRangeFilter,
)

__all__ = [
    "FilterEngine",
    "file_name",
    "file_extension",
    "is_virtual_path",
    "FileTypeFilter",
    "PathRangeFilter",
    "DateRangeFilter",
    "SizeRangeFilter",
    "ImageDimensionFilter",
    "AudioDurationFilter",
]
