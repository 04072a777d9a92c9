"""
Tests for load-more and refresh paging.
"""

from __future__ import annotations

import threading
from unittest.mock import AsyncMock

import pytest

from filesift.domains.filtering.models import FileTypeFilter
from filesift.domains.search.builder import ResultBuilder
from filesift.domains.search.index_executor import IndexSearchExecutor
from filesift.domains.search.models import PathSet, ResultEntry, SearchOptions

from .cache import ResultCache
from .cancellation import CancellationToken
from .pagination import PaginationCoordinator


@pytest.fixture
def files(tmp_path) -> list[str]:
    paths = []
    for i in range(15):
        file = tmp_path / f"report_{i:02d}.txt"
        file.write_text("x")
        paths.append(str(file))
    return paths


def _coordinator(index, cache: ResultCache) -> PaginationCoordinator:
    builder = ResultBuilder()
    executor = IndexSearchExecutor(index, builder=builder, page_size=10, max_results=100)
    return PaginationCoordinator(index, executor, builder, cache)


async def test_load_more_appends_to_cache(make_index, files) -> None:
    """Test a later page lands in the existing cache entry."""
    cache = ResultCache()
    key = ResultCache.make_key("report")
    first = ResultBuilder().build_items_from_paths(files[:10])
    cache.update(key, first, offset=10, has_more=True, keyword="report")
    coordinator = _coordinator(make_index(files), cache)

    result = await coordinator.load_more("report", 10, SearchOptions())

    assert [e.path for e in result.items] == files[10:]
    assert result.offset == 15
    assert result.has_more is False
    entry = cache.get(key)
    assert entry is not None
    assert len(entry.items) == 15
    assert entry.offset == 15


async def test_load_more_never_creates_cache_entry(make_index, files) -> None:
    cache = ResultCache()
    coordinator = _coordinator(make_index(files), cache)

    result = await coordinator.load_more("report", 10, SearchOptions())

    assert len(result.items) == 5
    assert cache.get(ResultCache.make_key("report")) is None


async def test_load_more_past_end(make_index, files) -> None:
    """Test paging beyond the last result is an empty, final page."""
    coordinator = _coordinator(make_index(files), ResultCache())

    result = await coordinator.load_more("report", 500, SearchOptions())

    assert result.items == []
    assert result.has_more is False
    assert result.keyword == "report"


async def test_load_more_requires_running_index(make_index, files) -> None:
    index = make_index(files, running=False)
    coordinator = _coordinator(index, ResultCache())

    result = await coordinator.load_more("report", 0, SearchOptions())

    assert result.items == []
    assert result.keyword == "report"
    assert index.queries == []


async def test_load_more_degrades_on_error(files) -> None:
    index = AsyncMock()
    index.is_running.return_value = True
    index.query.side_effect = RuntimeError("connection reset")
    coordinator = _coordinator(index, ResultCache())

    result = await coordinator.load_more("report", 10, SearchOptions())

    assert result.items == []
    assert result.has_more is False


async def test_load_more_cancelled(make_index, files) -> None:
    token = CancellationToken()
    token.cancel()
    coordinator = _coordinator(make_index(files), ResultCache())

    result = await coordinator.load_more("report", 0, SearchOptions(), cancel_token=token)

    assert result.items == []


async def test_refresh_overwrites_cache(make_index, files) -> None:
    cache = ResultCache()
    key = ResultCache.make_key("report")
    stale = [ResultEntry(path="/old/report.txt", name="report.txt")]
    cache.update(key, stale, offset=1, has_more=False, keyword="report")
    coordinator = _coordinator(make_index(files), cache)

    result = await coordinator.refresh("report", SearchOptions())

    assert len(result.items) == 10
    assert result.has_more is True
    entry = cache.get(key)
    assert entry is not None
    assert [e.path for e in entry.items] == files[:10]
    assert entry.offset == 10


async def test_load_more_filtered_page_advances_cache_cursor(make_index, files) -> None:
    """Test a page emptied by the type filter still moves the cached offset."""
    cache = ResultCache()
    key = ResultCache.make_key("report")
    first = ResultBuilder().build_items_from_paths(files[:10])
    cache.update(key, first, offset=10, has_more=True, keyword="report")
    coordinator = _coordinator(make_index(files), cache)

    result = await coordinator.load_more(
        "report", 10, SearchOptions(file_type=FileTypeFilter.IMAGES)
    )

    assert result.items == []
    assert result.offset == 15
    entry = cache.get(key)
    assert entry is not None
    assert len(entry.items) == 10
    assert entry.offset == 15
    assert entry.has_more is False


async def test_load_more_past_end_leaves_cache_cursor(make_index, files) -> None:
    cache = ResultCache()
    key = ResultCache.make_key("report")
    cache.update(key, [], offset=10, has_more=True, keyword="report")
    coordinator = _coordinator(make_index(files), cache)

    await coordinator.load_more("report", 500, SearchOptions())

    entry = cache.get(key)
    assert entry is not None
    assert entry.offset == 10
    assert entry.has_more is True


class _ThreadRecordingBuilder(ResultBuilder):
    def __init__(self) -> None:
        super().__init__()
        self.threads: list[threading.Thread] = []

    def build_items_from_paths(self, paths):
        self.threads.append(threading.current_thread())
        return super().build_items_from_paths(paths)


async def test_page_building_runs_off_the_event_loop(make_index, files) -> None:
    """Test entry building for progress and load-more pages uses worker threads."""
    builder = _ThreadRecordingBuilder()
    index = make_index(files)
    executor = IndexSearchExecutor(index, builder=builder, page_size=10, max_results=100)
    coordinator = PaginationCoordinator(index, executor, builder, ResultCache())

    await executor.execute("report", SearchOptions(), None, PathSet(), lambda page: None)
    await coordinator.load_more("report", 10, SearchOptions())

    assert len(builder.threads) == 3
    assert threading.main_thread() not in builder.threads
