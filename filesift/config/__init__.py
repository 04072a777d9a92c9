"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    AnnotationLookupError,
    EngineUnavailableError,
    ErrorCode,
    FileSiftError,
    SearchCancelledError,
    SearchError,
    StorageError,
)
from .log import setup_logging
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "setup_logging",
    # Errors
    "ErrorCode",
    "FileSiftError",
    "SearchError",
    "EngineUnavailableError",
    "SearchCancelledError",
    "AnnotationLookupError",
    "StorageError",
]
