"""
Index Search Executor - Paged filename search against the external index.

Features:
- Scope restriction and type filtering per page
- Case-insensitive de-duplication into a shared result set
- A progress callback for the first page and for every later page with new paths
- Cooperative cancellation between pages and per record
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from filesift.domains.filtering.filters import FilterEngine

from .builder import ResultBuilder
from .contracts import IndexProvider, ProgressCallback
from .models import PathSet, SearchOptions, SearchResult, SearchResultPage

if TYPE_CHECKING:
    from filesift.domains.orchestration.cancellation import CancellationToken

logger = logging.getLogger(__name__)

__all__ = ["IndexSearchExecutor"]

DEFAULT_PAGE_SIZE = 1000
DEFAULT_MAX_RESULTS = 5000


def _cancelled(token: CancellationToken | None) -> bool:
    return token is not None and token.is_cancelled


class IndexSearchExecutor:
    """
    Runs a keyword through the filename index page by page.

    Example:
        >>> executor = IndexSearchExecutor(client, FilterEngine(), ResultBuilder())
        >>> matched = await executor.execute("report", SearchOptions(), None, PathSet())
    """

    def __init__(
        self,
        index: IndexProvider,
        filter_engine: FilterEngine | None = None,
        builder: ResultBuilder | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_results: int = DEFAULT_MAX_RESULTS,
        page_delay: float = 0.0,
    ) -> None:
        """
        Initialize executor.

        Args:
            index: Filename index engine
            filter_engine: Scope and type filters
            builder: Used to materialize progress callback entries
            page_size: Results requested per index query
            max_results: Hard cap on paths fetched for one search
            page_delay: Seconds to pause between pages
        """
        self._index = index
        self._filter_engine = filter_engine or FilterEngine()
        self._builder = builder or ResultBuilder()
        self._page_size = page_size
        self._max_results = max_results
        self._page_delay = page_delay

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def max_results(self) -> int:
        return self._max_results

    async def execute(
        self,
        keyword: str,
        options: SearchOptions,
        current_path: str | None,
        result_paths: PathSet,
        progress_callback: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> PathSet:
        """
        Fetch every page for a keyword.

        Args:
            keyword: Normalized search keyword
            options: Search filters
            current_path: Folder the user is browsing, for scope resolution
            result_paths: Shared de-duplication set for the whole search
            progress_callback: Receives each page's new entries
            cancel_token: Stops the page loop when cancelled

        Returns:
            Every path this executor matched, including ones already in
            result_paths
        """
        matched = PathSet()
        scope_root = self._filter_engine.get_range_path(options.path_range, current_path)
        offset = 0
        first_page = True

        while offset < self._max_results:
            if _cancelled(cancel_token):
                break

            if not first_page and self._page_delay > 0:
                await asyncio.sleep(self._page_delay)
                if _cancelled(cancel_token):
                    break

            limit = min(self._page_size, self._max_results - offset)
            page = await self._index.query(
                keyword, scope_root=scope_root, offset=offset, limit=limit
            )
            if _cancelled(cancel_token):
                break
            if not page:
                break

            new_paths: list[str] = []
            for path in self._filter_engine.apply_type_filter(page, options.file_type):
                if _cancelled(cancel_token):
                    return matched
                matched.add(path)
                if result_paths.add(path):
                    new_paths.append(path)

            offset += len(page)
            has_more = len(page) == self._page_size and offset < self._max_results
            logger.debug(
                "Index page for '%s': %d hits, %d new (offset=%d)",
                keyword,
                len(page),
                len(new_paths),
                offset,
            )

            if (
                (first_page or new_paths)
                and progress_callback is not None
                and not _cancelled(cancel_token)
            ):
                await self._emit(progress_callback, keyword, new_paths, offset, has_more)

            if len(page) < limit:
                break
            first_page = False

        return matched

    async def execute_page(
        self,
        keyword: str,
        offset: int,
        options: SearchOptions,
        current_path: str | None,
    ) -> SearchResultPage:
        """Fetch a single page starting at offset."""
        scope_root = self._filter_engine.get_range_path(options.path_range, current_path)
        page = await self._index.query(
            keyword, scope_root=scope_root, offset=offset, limit=self._page_size
        )
        if not page:
            return SearchResultPage(paths=[], offset=offset, has_more=False)

        next_offset = offset + len(page)
        return SearchResultPage(
            paths=self._filter_engine.apply_type_filter(page, options.file_type),
            offset=next_offset,
            has_more=len(page) == self._page_size and next_offset < self._max_results,
        )

    async def _emit(
        self,
        callback: ProgressCallback,
        keyword: str,
        paths: list[str],
        offset: int,
        has_more: bool,
    ) -> None:
        items = await asyncio.to_thread(self._builder.build_items_from_paths, paths)
        result = SearchResult(
            items=items,
            keyword=keyword,
            offset=offset,
            has_more=has_more,
            page_size=self._page_size,
            max_results=self._max_results,
        )
        try:
            callback(result)
        except Exception:
            logger.exception("Progress callback failed for '%s'", keyword)
