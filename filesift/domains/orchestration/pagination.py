"""
Pagination Coordinator - Load-more and refresh for an existing search.

Later pages come straight from the filename index and are appended to the
cached result set. Failures never propagate: the caller just gets an empty
page.
"""

from __future__ import annotations

import asyncio
import logging

from filesift.config.errors import SearchCancelledError
from filesift.domains.filtering.filters import FilterEngine
from filesift.domains.search.builder import ResultBuilder
from filesift.domains.search.contracts import IndexProvider
from filesift.domains.search.grouper import build_grouped_results
from filesift.domains.search.index_executor import IndexSearchExecutor
from filesift.domains.search.models import (
    PathSet,
    SearchOptions,
    SearchResult,
    SearchResultPage,
)

from .cache import ResultCache
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

__all__ = ["PaginationCoordinator"]


class PaginationCoordinator:
    """
    Fetches single index pages on demand.

    Example:
        >>> coordinator = PaginationCoordinator(client, executor, builder, cache)
        >>> page = await coordinator.load_more("report", 1000, SearchOptions(), None)
    """

    def __init__(
        self,
        index: IndexProvider,
        executor: IndexSearchExecutor,
        builder: ResultBuilder,
        cache: ResultCache,
        filter_engine: FilterEngine | None = None,
    ) -> None:
        self._index = index
        self._executor = executor
        self._builder = builder
        self._cache = cache
        self._filter_engine = filter_engine or FilterEngine()

    async def load_more(
        self,
        keyword: str,
        offset: int,
        options: SearchOptions,
        current_path: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SearchResult:
        """
        Fetch the page starting at offset and append it to the cache.

        Args:
            keyword: Normalized keyword of the search being paged
            offset: Index position to continue from
            options: Filters of the original search
            current_path: Folder used for scope resolution
            cancel_token: Discards the page when cancelled

        Returns:
            The new page's entries; empty on any failure
        """
        try:
            page = await self._fetch_page(keyword, offset, options, current_path, cancel_token)
            if page is None:
                return self._empty(keyword, offset)

            result = await self._build(keyword, page)
            # Filtered-out pages still move the cached cursor
            if page.offset > offset:
                self._cache.append(
                    ResultCache.make_key(keyword), result.items, page.offset, page.has_more
                )
            return result
        except SearchCancelledError:
            return self._empty(keyword, offset)
        except Exception:
            logger.exception("Load more failed for '%s' at offset %d", keyword, offset)
            return self._empty(keyword, offset)

    async def refresh(
        self,
        keyword: str,
        options: SearchOptions,
        current_path: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SearchResult:
        """Re-run the first page and overwrite the cache entry."""
        try:
            page = await self._fetch_page(keyword, 0, options, current_path, cancel_token)
            if page is None:
                return self._empty(keyword, 0)

            result = await self._build(keyword, page)
            self._cache.update(
                ResultCache.make_key(keyword),
                result.items,
                offset=page.offset,
                has_more=page.has_more,
                keyword=keyword,
                scope_root=self._filter_engine.get_range_path(options.path_range, current_path),
                file_type=options.file_type,
                path_range=options.path_range,
            )
            return result
        except SearchCancelledError:
            return self._empty(keyword, 0)
        except Exception:
            logger.exception("Refresh failed for '%s'", keyword)
            return self._empty(keyword, 0)

    async def _fetch_page(
        self,
        keyword: str,
        offset: int,
        options: SearchOptions,
        current_path: str | None,
        cancel_token: CancellationToken | None,
    ) -> SearchResultPage | None:
        if not await self._index.is_running():
            logger.warning("Index engine not running; cannot page '%s'", keyword)
            return None

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        page = await self._executor.execute_page(keyword, offset, options, current_path)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return page

    async def _build(self, keyword: str, page: SearchResultPage) -> SearchResult:
        items = await asyncio.to_thread(self._builder.build_items_from_paths, page.paths)
        grouped = build_grouped_results(items, PathSet(), PathSet(page.paths))
        return SearchResult(
            items=items,
            keyword=keyword,
            offset=page.offset,
            has_more=page.has_more,
            page_size=self._executor.page_size,
            max_results=self._executor.max_results,
            grouped_items=grouped,
        )

    def _empty(self, keyword: str, offset: int) -> SearchResult:
        return SearchResult(
            keyword=keyword,
            offset=offset,
            has_more=False,
            page_size=self._executor.page_size,
            max_results=self._executor.max_results,
        )
