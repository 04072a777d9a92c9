"""
Result Builder - Turns raw index paths into enriched result entries.

Features:
- Drops stale paths that vanished since the index was queried
- Size and timestamps from the filesystem, cached folder sizes for directories
- Tag names, notes snippet and media dimensions from optional accessors
- Heuristic relevance ordering
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from datetime import datetime

from filesift.domains.filtering.filters import file_extension, file_name

from .contracts import (
    FolderSizeAccessor,
    MediaProbe,
    NotesAccessor,
    TagIdsAccessor,
    TagNameAccessor,
)
from .models import ResultEntry

logger = logging.getLogger(__name__)

__all__ = ["ResultBuilder", "notes_snippet"]

SNIPPET_MAX_CHARS = 100

# Relevance weights
EXACT_NAME_SCORE = 100
NAME_CONTAINS_SCORE = 80
PATH_CONTAINS_SCORE = 70


def notes_snippet(notes: str | None) -> str:
    """First non-empty line of a note, truncated for display."""
    if not notes:
        return ""
    for line in notes.splitlines():
        line = line.strip()
        if line:
            if len(line) > SNIPPET_MAX_CHARS:
                return line[:SNIPPET_MAX_CHARS] + "..."
            return line
    return ""


class ResultBuilder:
    """
    Materializes ResultEntry objects for a batch of paths.

    Every accessor is optional. A missing or failing accessor leaves its
    field empty and never fails the batch.

    Example:
        >>> builder = ResultBuilder(get_file_notes=store.get_notes)
        >>> entries = builder.build_items_from_paths(["C:/docs/report.pdf"])
    """

    def __init__(
        self,
        get_file_tag_ids: TagIdsAccessor | None = None,
        get_tag_name: TagNameAccessor | None = None,
        get_file_notes: NotesAccessor | None = None,
        get_folder_size: FolderSizeAccessor | None = None,
        probe_media: MediaProbe | None = None,
    ) -> None:
        self._get_file_tag_ids = get_file_tag_ids
        self._get_tag_name = get_tag_name
        self._get_file_notes = get_file_notes
        self._get_folder_size = get_folder_size
        self._probe_media = probe_media

    def build_items_from_paths(self, paths: Iterable[str]) -> list[ResultEntry]:
        """
        Build entries in input order.

        Args:
            paths: Candidate paths, usually straight from the index

        Returns:
            One entry per path that still exists
        """
        entries: list[ResultEntry] = []
        for path in paths:
            entry = self._build_entry(path)
            if entry is not None:
                entries.append(entry)
        return entries

    def sort_by_relevance(self, paths: Iterable[str], keyword: str) -> list[str]:
        """Order paths by name/path match strength, keeping index order on ties."""
        needle = keyword.strip().lower()
        items = list(paths)
        if not needle:
            return items

        def score(path: str) -> int:
            name = file_name(path).lower()
            value = 0
            if name == needle:
                value += EXACT_NAME_SCORE
            elif needle in name:
                value += NAME_CONTAINS_SCORE
            if needle in path.lower():
                value += PATH_CONTAINS_SCORE
            return value

        return sorted(items, key=score, reverse=True)

    def _build_entry(self, path: str) -> ResultEntry | None:
        try:
            stat = os.stat(path)
        except OSError:
            logger.debug("Dropping stale path: %s", path)
            return None

        is_directory = os.path.isdir(path)
        entry = ResultEntry(
            path=path,
            name=file_name(path),
            is_directory=is_directory,
            type_label="Folder" if is_directory else file_extension(path),
            modified_at=datetime.fromtimestamp(stat.st_mtime),
            created_at=datetime.fromtimestamp(
                getattr(stat, "st_birthtime", stat.st_ctime)
            ),
        )

        if is_directory:
            entry.size_bytes = self._folder_size(path)
        else:
            entry.size_bytes = stat.st_size

        entry.tags = self._tag_names(path)
        entry.notes = self._notes(path)

        if not is_directory and self._probe_media is not None:
            try:
                media = self._probe_media(path)
            except Exception as e:
                logger.debug("Media probe failed for %s: %s", path, e)
                media = None
            if media is not None:
                entry.pixel_width = media.width
                entry.pixel_height = media.height
                entry.duration_ms = media.duration_ms

        return entry

    def _folder_size(self, path: str) -> int:
        if self._get_folder_size is None:
            return -1
        try:
            size = self._get_folder_size(path)
        except Exception as e:
            logger.debug("Folder size lookup failed for %s: %s", path, e)
            return -1
        return size if size is not None else -1

    def _tag_names(self, path: str) -> list[str]:
        if self._get_file_tag_ids is None or self._get_tag_name is None:
            return []
        try:
            names = [self._get_tag_name(tag_id) for tag_id in self._get_file_tag_ids(path)]
        except Exception as e:
            logger.debug("Tag lookup failed for %s: %s", path, e)
            return []
        return [name for name in names if name]

    def _notes(self, path: str) -> str:
        if self._get_file_notes is None:
            return ""
        try:
            return notes_snippet(self._get_file_notes(path))
        except Exception as e:
            logger.debug("Notes lookup failed for %s: %s", path, e)
            return ""
