"""SQLite annotation store adapter."""

from .annotations import AnnotationRepository

__all__ = ["AnnotationRepository"]
