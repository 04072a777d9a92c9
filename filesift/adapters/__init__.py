"""
Adapters - External service integrations.

All external calls are wrapped here to isolate domains from third-party changes.
"""

from .everything import EverythingClient
from .media import probe_media
from .sqlite import AnnotationRepository

__all__ = [
    "EverythingClient",
    "AnnotationRepository",
    "probe_media",
]
