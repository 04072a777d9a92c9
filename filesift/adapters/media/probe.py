"""
Media Probe - Pixel dimensions for image files.

Only the image header is read; pixel data is never decoded.
"""

from __future__ import annotations

import logging

from PIL import Image

from filesift.domains.filtering.filters import file_extension
from filesift.domains.filtering.models import IMAGE_EXTENSIONS
from filesift.domains.search.models import MediaInfo

logger = logging.getLogger(__name__)

__all__ = ["probe_media"]


def probe_media(path: str) -> MediaInfo | None:
    """
    Read width and height of an image.

    Args:
        path: File to inspect

    Returns:
        MediaInfo, or None for non-images and unreadable files
    """
    if file_extension(path) not in IMAGE_EXTENSIONS:
        return None

    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug("Could not read image size of %s: %s", path, e)
        return None

    return MediaInfo(width=width, height=height)
