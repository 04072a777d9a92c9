"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from filesift.config.errors import ErrorCode, FileSiftError

    raise FileSiftError(ErrorCode.SEARCH_INDEX_UNAVAILABLE, "Everything is not running")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Search errors
    SEARCH_INVALID_QUERY = "SEARCH_INVALID_QUERY"
    SEARCH_INDEX_UNAVAILABLE = "SEARCH_INDEX_UNAVAILABLE"
    SEARCH_CANCELLED = "SEARCH_CANCELLED"
    SEARCH_FAILED = "SEARCH_FAILED"

    # Annotation store errors
    ANNOTATION_LOOKUP_FAILED = "ANNOTATION_LOOKUP_FAILED"

    # Storage errors
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


class FileSiftError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Domain-specific exceptions for cleaner imports
class SearchError(FileSiftError):
    """Unexpected failure while composing a search."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_FAILED, message, details)


class EngineUnavailableError(FileSiftError):
    """The external filename index is not running or could not be started."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_INDEX_UNAVAILABLE, message, details)


class SearchCancelledError(FileSiftError):
    """A search generation was superseded or cancelled by its caller."""

    def __init__(
        self,
        message: str = "Search cancelled",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(ErrorCode.SEARCH_CANCELLED, message, details)


class AnnotationLookupError(FileSiftError):
    """Annotation store lookup errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.ANNOTATION_LOOKUP_FAILED, message, details)


class StorageError(FileSiftError):
    """Storage/database errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.STORAGE_READ_FAILED,
    ) -> None:
        super().__init__(code, message, details)
