"""Media metadata adapter (Pillow)."""

from .probe import probe_media

__all__ = ["probe_media"]
