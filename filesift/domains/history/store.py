"""
Search History - Most-recent-first list of past searches, persisted as JSON.

A broken or unwritable history file never breaks searching: load failures
start an empty history and save failures are only logged.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from .models import HistoryItem, HistoryType

logger = logging.getLogger(__name__)

__all__ = ["SearchHistory"]

DEFAULT_MAX_COUNT = 20


class SearchHistory:
    """
    Bounded search history.

    Example:
        >>> history = SearchHistory(Path("data/search_history.json"))
        >>> history.add("report", HistoryType.SEARCH)
        >>> [item.content for item in history.get_recent()]
        ['report']
    """

    def __init__(self, path: Path, max_count: int = DEFAULT_MAX_COUNT) -> None:
        self._path = Path(path)
        self._max_count = max_count
        self._lock = threading.Lock()
        self._items: list[HistoryItem] = self._load()

    def add(self, content: str, history_type: HistoryType = HistoryType.SEARCH) -> None:
        """Record an entry; an existing case-insensitive duplicate moves to the top."""
        if not content or not content.strip():
            return

        item = HistoryItem(type=history_type, content=content.strip())
        folded = item.content.casefold()

        with self._lock:
            self._items = [
                existing
                for existing in self._items
                if not (existing.type == history_type and existing.content.casefold() == folded)
            ]
            self._items.insert(0, item)
            del self._items[self._max_count :]
            self._save()

    def get_recent(self) -> list[HistoryItem]:
        """Copy of the history, newest first."""
        with self._lock:
            return [item.model_copy() for item in self._items]

    def clear(self) -> None:
        with self._lock:
            self._items = []
            self._save()

    def _load(self) -> list[HistoryItem]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return [HistoryItem.model_validate(entry) for entry in raw]
        except Exception as e:
            logger.warning("Could not load search history from %s: %s", self._path, e)
            return []

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = [item.model_dump(mode="json") for item in self._items]
            self._path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save search history to %s: %s", self._path, e)
