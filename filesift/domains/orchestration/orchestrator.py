"""
Search Orchestrator - Coordinates one user search end to end.

Pipeline:
1. Retire the previous search generation
2. Make sure the filename index is up
3. Filename pages and notes matches into one de-duplicated set
4. Type filter, relevance sort, enrichment
5. Date, size, dimension and duration filters
6. Classify, cap the file bucket, group, cache

Only the newest generation may update the orchestrator state; a superseded
search finishes quietly with an empty result.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import assert_never

from filesift.config.errors import (
    EngineUnavailableError,
    FileSiftError,
    SearchCancelledError,
    SearchError,
)
from filesift.domains.filtering.filters import FilterEngine
from filesift.domains.search.annotation_executor import AnnotationSearchExecutor
from filesift.domains.search.builder import ResultBuilder
from filesift.domains.search.contracts import (
    AnnotationLookup,
    IndexProvider,
    Notifier,
    ProgressCallback,
)
from filesift.domains.search.grouper import build_grouped_results, classify_entries
from filesift.domains.search.index_executor import IndexSearchExecutor
from filesift.domains.search.models import (
    PathSet,
    ResultEntry,
    SearchMode,
    SearchOptions,
    SearchResult,
    Taxonomy,
)

from .cache import ResultCache
from .cancellation import CancellationToken
from .models import SearchState
from .pagination import PaginationCoordinator

logger = logging.getLogger(__name__)

__all__ = ["SearchOrchestrator", "normalize_keyword"]

DEFAULT_MAX_DISPLAY_FILES = 100

_KEYWORD_PREFIXES = ("搜索:", "search://")


def normalize_keyword(text: str | None) -> str:
    """Strip tab-title and search:// prefixes, repeatedly, with whitespace."""
    if not text:
        return ""
    normalized = text.strip()
    while True:
        for prefix in _KEYWORD_PREFIXES:
            if normalized.startswith(prefix):
                normalized = normalized[len(prefix) :].strip()
                break
        else:
            return normalized


def _log_notifier(error: FileSiftError) -> None:
    logger.warning("Search notification: %s", error.message)


class SearchOrchestrator:
    """
    Entry point for keyword searches.

    Example:
        >>> orchestrator = SearchOrchestrator(index=EverythingClient(...))
        >>> result = await orchestrator.perform_search("report", SearchOptions(), None)
        >>> [e.name for e in result.grouped_items[Taxonomy.FILE]]
    """

    def __init__(
        self,
        index: IndexProvider,
        builder: ResultBuilder | None = None,
        cache: ResultCache | None = None,
        filter_engine: FilterEngine | None = None,
        notifier: Notifier | None = None,
        page_size: int = 1000,
        max_results: int = 5000,
        max_display_files: int = DEFAULT_MAX_DISPLAY_FILES,
        page_delay: float = 0.0,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            index: Filename index engine
            builder: Entry materialization with metadata accessors
            cache: Result cache shared with the pagination coordinator
            filter_engine: Search filters
            notifier: Receives user-facing errors; logs them by default
            page_size: Results per index query
            max_results: Cap on paths fetched per search
            max_display_files: Cap on FILE entries in the first view
            page_delay: Pause between index pages, in seconds
        """
        self._index = index
        self._builder = builder or ResultBuilder()
        self._cache = cache or ResultCache()
        self._filter_engine = filter_engine or FilterEngine()
        self._notify = notifier or _log_notifier
        self._max_display_files = max_display_files

        self._index_executor = IndexSearchExecutor(
            index,
            self._filter_engine,
            self._builder,
            page_size=page_size,
            max_results=max_results,
            page_delay=page_delay,
        )
        self._annotation_executor = AnnotationSearchExecutor()
        self._pagination = PaginationCoordinator(
            index,
            self._index_executor,
            self._builder,
            self._cache,
            self._filter_engine,
        )

        self._lock = threading.Lock()
        self._current_token: CancellationToken | None = None
        self._state = SearchState.IDLE

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def cancel(self) -> None:
        """Cancel the running search, if any."""
        with self._lock:
            if self._current_token is not None:
                self._current_token.cancel()

    async def perform_search(
        self,
        keyword: str,
        options: SearchOptions,
        current_path: str | None = None,
        search_names: bool = True,
        search_notes: bool = False,
        annotation_lookup: AnnotationLookup | None = None,
        progress_callback: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SearchResult:
        """
        Run a full search and return the capped, grouped first view.

        Args:
            keyword: Raw user input; search:// and tab-title prefixes are stripped
            options: Filters and mode
            current_path: Folder the user is browsing
            search_names: Query the filename index (FILE_NAME mode only)
            search_notes: Query notes (FILE_NAME mode only)
            annotation_lookup: keyword -> paths with matching notes
            progress_callback: Receives each filename page as it arrives
            cancel_token: Caller's token; cancelling it cancels this search

        Returns:
            SearchResult with has_more=False and grouped_items populated
        """
        keyword = normalize_keyword(keyword)
        if not keyword:
            return self._empty(keyword)

        token = self._start_generation(cancel_token)

        try:
            if not await self._ensure_index():
                self._notify(
                    EngineUnavailableError(
                        "Everything search engine is not running", {"keyword": keyword}
                    )
                )
                self._finish(token, SearchState.FAILED)
                return self._empty(keyword)

            result = await self._run(
                keyword,
                options,
                current_path,
                search_names,
                search_notes,
                annotation_lookup,
                progress_callback,
                token,
            )
            self._finish(token, SearchState.COMPLETED)
            return result

        except SearchCancelledError:
            logger.debug("Search '%s' cancelled", keyword)
            self._finish(token, SearchState.CANCELED)
            return self._empty(keyword)

        except EngineUnavailableError as e:
            if token.is_cancelled:
                self._finish(token, SearchState.CANCELED)
            else:
                self._notify(e)
                self._finish(token, SearchState.FAILED)
            return self._empty(keyword)

        except Exception as e:
            logger.exception("Search failed for '%s'", keyword)
            self._notify(SearchError(f"Search failed: {e}", {"keyword": keyword}))
            self._finish(token, SearchState.FAILED)
            raise

    async def load_more(
        self,
        keyword: str,
        offset: int,
        options: SearchOptions,
        current_path: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SearchResult:
        """Fetch the next raw page of a search."""
        return await self._pagination.load_more(
            normalize_keyword(keyword), offset, options, current_path, cancel_token
        )

    async def refresh_search(
        self,
        keyword: str,
        options: SearchOptions,
        current_path: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SearchResult:
        """Cancel the running search and re-fetch the first page."""
        self.cancel()
        return await self._pagination.refresh(
            normalize_keyword(keyword), options, current_path, cancel_token
        )

    # --- Pipeline ---

    async def _run(
        self,
        keyword: str,
        options: SearchOptions,
        current_path: str | None,
        search_names: bool,
        search_notes: bool,
        annotation_lookup: AnnotationLookup | None,
        progress_callback: ProgressCallback | None,
        token: CancellationToken,
    ) -> SearchResult:
        run_names, run_notes = _participation(options.mode, search_names, search_notes)
        run_notes = run_notes and annotation_lookup is not None

        result_paths = PathSet()
        name_paths = PathSet()
        notes_paths = PathSet()

        if run_names:
            name_paths = await self._index_executor.execute(
                keyword,
                options,
                current_path,
                result_paths,
                progress_callback,
                token,
            )
            token.raise_if_cancelled()

        if run_notes:
            notes_paths = await asyncio.to_thread(
                self._annotation_executor.execute, keyword, annotation_lookup, result_paths
            )
            token.raise_if_cancelled()

        paths = self._filter_engine.apply_type_filter(list(result_paths), options.file_type)
        paths = self._builder.sort_by_relevance(paths, keyword)
        entries = await asyncio.to_thread(self._builder.build_items_from_paths, paths)
        token.raise_if_cancelled()

        entries = self._apply_entry_filters(entries, options)
        entries = self._cap(entries, notes_paths, name_paths)
        grouped = build_grouped_results(entries, notes_paths, name_paths)

        self._write_cache(keyword, entries, options, current_path)
        logger.info(
            "Search '%s': %d results (%d name, %d notes)",
            keyword,
            len(entries),
            len(name_paths),
            len(notes_paths),
        )

        return SearchResult(
            items=entries,
            keyword=keyword,
            offset=len(entries),
            has_more=False,
            page_size=self._index_executor.page_size,
            max_results=self._index_executor.max_results,
            grouped_items=grouped,
        )

    def _apply_entry_filters(
        self, entries: list[ResultEntry], options: SearchOptions
    ) -> list[ResultEntry]:
        engine = self._filter_engine
        entries = engine.apply_date_filter(
            entries, options.date_range, options.date_from, options.date_to
        )
        entries = engine.apply_size_filter(
            entries, options.size_range, options.size_min, options.size_max
        )
        entries = engine.apply_image_dimension_filter(entries, options.image_size)
        return engine.apply_audio_duration_filter(entries, options.duration)

    def _cap(
        self,
        entries: list[ResultEntry],
        notes_paths: PathSet,
        name_paths: PathSet,
    ) -> list[ResultEntry]:
        """Keep every notes and folder hit, but only the first N files."""
        classify_entries(entries, notes_paths, name_paths)
        notes = [e for e in entries if e.taxonomy == Taxonomy.NOTES]
        folders = [e for e in entries if e.taxonomy == Taxonomy.FOLDER]
        files = [e for e in entries if e.taxonomy == Taxonomy.FILE]
        if len(files) > self._max_display_files:
            logger.debug(
                "Capping file results from %d to %d", len(files), self._max_display_files
            )
        return notes + folders + files[: self._max_display_files]

    def _write_cache(
        self,
        keyword: str,
        entries: list[ResultEntry],
        options: SearchOptions,
        current_path: str | None,
    ) -> None:
        try:
            self._cache.update(
                ResultCache.make_key(keyword),
                entries,
                offset=len(entries),
                has_more=False,
                keyword=keyword,
                scope_root=self._filter_engine.get_range_path(options.path_range, current_path),
                file_type=options.file_type,
                path_range=options.path_range,
            )
        except Exception as e:
            logger.warning("Failed to cache results for '%s': %s", keyword, e)

    # --- Generations ---

    def _start_generation(self, caller_token: CancellationToken | None) -> CancellationToken:
        token = CancellationToken(parent=caller_token)
        with self._lock:
            if self._current_token is not None:
                self._current_token.cancel()
            self._current_token = token
            self._state = SearchState.SEARCHING
        return token

    def _finish(self, token: CancellationToken, state: SearchState) -> None:
        with self._lock:
            if token is self._current_token:
                self._state = state
                self._current_token = None

    async def _ensure_index(self) -> bool:
        try:
            if not await self._index.initialize():
                return False
            return await self._index.is_running()
        except Exception as e:
            logger.warning("Index engine check failed: %s", e)
            return False

    def _empty(self, keyword: str) -> SearchResult:
        return SearchResult(
            keyword=keyword,
            page_size=self._index_executor.page_size,
            max_results=self._index_executor.max_results,
        )


def _participation(
    mode: SearchMode, search_names: bool, search_notes: bool
) -> tuple[bool, bool]:
    """Which executors run for a mode: (names, notes)."""
    match mode:
        case SearchMode.FOLDER:
            names, notes = True, False
        case SearchMode.NOTES:
            names, notes = False, True
        case SearchMode.ALL:
            names, notes = True, True
        case SearchMode.FILE_NAME:
            names, notes = search_names, search_notes
        case _:
            assert_never(mode)

    if not names and not notes:
        names = True
    return names, notes
