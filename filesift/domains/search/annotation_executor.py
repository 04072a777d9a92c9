"""
Annotation Search Executor - Matches a keyword against user notes.
"""

from __future__ import annotations

import logging

from .contracts import AnnotationLookup
from .models import PathSet

logger = logging.getLogger(__name__)

__all__ = ["AnnotationSearchExecutor"]


class AnnotationSearchExecutor:
    """Runs the injected notes lookup and merges its hits."""

    def execute(
        self,
        keyword: str,
        annotation_lookup: AnnotationLookup,
        result_paths: PathSet,
    ) -> PathSet:
        """
        Look up notes matches for a keyword.

        A failing lookup is logged and counts as zero matches.
        """
        matched = PathSet()
        try:
            hits = annotation_lookup(keyword) or []
        except Exception as e:
            logger.warning("Annotation lookup failed for '%s': %s", keyword, e)
            return matched

        for path in hits:
            if not path:
                continue
            matched.add(path)
            result_paths.add(path)

        logger.debug("Annotation search '%s': %d matches", keyword, len(matched))
        return matched
