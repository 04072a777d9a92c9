"""
Tests for the search orchestrator.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from filesift.config.errors import EngineUnavailableError, SearchError
from filesift.domains.filtering.models import FileTypeFilter
from filesift.domains.search.models import SearchMode, SearchOptions, SearchResult, Taxonomy

from .cache import ResultCache
from .cancellation import CancellationToken
from .models import SearchState
from .orchestrator import SearchOrchestrator, normalize_keyword

# --- normalize_keyword ---


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("report", "report"),
        ("  report  ", "report"),
        ("search://report", "report"),
        ("搜索: report", "report"),
        ("搜索: search://  搜索:report ", "report"),
        ("search://", ""),
        ("", ""),
        (None, ""),
        ("Search://report", "Search://report"),
    ],
)
def test_normalize_keyword(raw, expected) -> None:
    assert normalize_keyword(raw) == expected


# --- perform_search ---


async def test_end_to_end_grouping(make_index, report_tree) -> None:
    """Test names and notes merge into NOTES, FOLDER and FILE buckets."""
    index = make_index(
        [
            report_tree["report_pdf"],
            report_tree["report_docx"],
            report_tree["reports_dir"],
            "/gone/report_old.txt",
        ]
    )
    lookup = MagicMock(return_value=[report_tree["notes_only"], report_tree["report_pdf"]])
    cache = ResultCache()
    orchestrator = SearchOrchestrator(index, cache=cache)

    result = await orchestrator.perform_search(
        "search://report",
        SearchOptions(mode=SearchMode.ALL),
        annotation_lookup=lookup,
    )

    assert result.keyword == "report"
    assert result.has_more is False
    assert result.offset == 4
    assert list(result.grouped_items) == [Taxonomy.NOTES, Taxonomy.FOLDER, Taxonomy.FILE]
    assert [e.path for e in result.grouped_items[Taxonomy.NOTES]] == [
        report_tree["report_pdf"],
        report_tree["notes_only"],
    ]
    assert [e.path for e in result.grouped_items[Taxonomy.FOLDER]] == [
        report_tree["reports_dir"]
    ]
    assert [e.path for e in result.grouped_items[Taxonomy.FILE]] == [
        report_tree["report_docx"]
    ]
    assert [e.path for e in result.items] == [
        report_tree["report_pdf"],
        report_tree["notes_only"],
        report_tree["reports_dir"],
        report_tree["report_docx"],
    ]
    lookup.assert_called_once_with("report")
    assert orchestrator.state == SearchState.COMPLETED

    cached = cache.get("search://report")
    assert cached is not None
    assert len(cached.items) == 4
    assert cached.has_more is False


async def test_file_bucket_is_capped(make_index, tmp_path) -> None:
    """Test notes and folders are kept in full while files are capped."""
    files = []
    for i in range(500):
        file = tmp_path / f"report_{i:03d}.txt"
        file.write_text("x")
        files.append(str(file))
    folders = []
    for i in range(3):
        folder = tmp_path / f"report_dir_{i}"
        folder.mkdir()
        folders.append(str(folder))
    notes = []
    for i in range(2):
        note = tmp_path / f"minutes_{i}.md"
        note.write_text("x")
        notes.append(str(note))

    orchestrator = SearchOrchestrator(make_index(files + folders))
    result = await orchestrator.perform_search(
        "report",
        SearchOptions(mode=SearchMode.ALL),
        annotation_lookup=lambda keyword: notes,
    )

    assert len(result.grouped_items[Taxonomy.NOTES]) == 2
    assert len(result.grouped_items[Taxonomy.FOLDER]) == 3
    assert len(result.grouped_items[Taxonomy.FILE]) == 100
    assert len(result.items) == 105
    assert result.offset == 105
    assert result.has_more is False


async def test_max_display_files_is_configurable(make_index, tmp_path) -> None:
    files = []
    for i in range(20):
        file = tmp_path / f"report_{i:02d}.txt"
        file.write_text("x")
        files.append(str(file))

    orchestrator = SearchOrchestrator(make_index(files), max_display_files=5)
    result = await orchestrator.perform_search("report", SearchOptions())

    assert len(result.items) == 5


async def test_type_filter_applies_to_merged_results(make_index, report_tree) -> None:
    index = make_index([report_tree["report_pdf"], report_tree["report_docx"]])
    orchestrator = SearchOrchestrator(index)

    result = await orchestrator.perform_search(
        "report", SearchOptions(file_type=FileTypeFilter.FOLDERS)
    )

    assert result.items == []


async def test_empty_keyword_is_noop(make_index) -> None:
    index = make_index(["/d/report.txt"])
    orchestrator = SearchOrchestrator(index)

    result = await orchestrator.perform_search("  search://  ", SearchOptions())

    assert result.items == []
    assert index.queries == []
    assert orchestrator.state == SearchState.IDLE


async def test_engine_unavailable_notifies(make_index) -> None:
    """Test a down index yields one notification and no degraded search."""
    index = make_index(["/d/report.txt"], running=False)
    notifier = MagicMock()
    orchestrator = SearchOrchestrator(index, notifier=notifier)

    result = await orchestrator.perform_search("report", SearchOptions())

    assert result.items == []
    assert result.keyword == "report"
    assert index.queries == []
    notifier.assert_called_once()
    assert isinstance(notifier.call_args.args[0], EngineUnavailableError)
    assert orchestrator.state == SearchState.FAILED


async def test_engine_lost_mid_search_notifies() -> None:
    index = AsyncMock()
    index.initialize.return_value = True
    index.is_running.return_value = True
    index.query.side_effect = EngineUnavailableError("connection refused")
    notifier = MagicMock()
    orchestrator = SearchOrchestrator(index, notifier=notifier)

    result = await orchestrator.perform_search("report", SearchOptions())

    assert result.items == []
    assert isinstance(notifier.call_args.args[0], EngineUnavailableError)


async def test_unexpected_error_is_notified_and_raised() -> None:
    index = AsyncMock()
    index.initialize.return_value = True
    index.is_running.return_value = True
    index.query.side_effect = RuntimeError("boom")
    notifier = MagicMock()
    orchestrator = SearchOrchestrator(index, notifier=notifier)

    with pytest.raises(RuntimeError):
        await orchestrator.perform_search("report", SearchOptions())

    notifier.assert_called_once()
    assert isinstance(notifier.call_args.args[0], SearchError)
    assert orchestrator.state == SearchState.FAILED


async def test_notes_mode_skips_index(make_index, report_tree) -> None:
    index = make_index([report_tree["report_pdf"]])
    lookup = MagicMock(return_value=[report_tree["notes_only"]])
    orchestrator = SearchOrchestrator(index)

    result = await orchestrator.perform_search(
        "budget", SearchOptions(mode=SearchMode.NOTES), annotation_lookup=lookup
    )

    assert index.queries == []
    assert [e.path for e in result.items] == [report_tree["notes_only"]]
    assert result.items[0].taxonomy == Taxonomy.NOTES


async def test_file_name_mode_uses_caller_flags(make_index, report_tree) -> None:
    """Test FILE_NAME mode only searches notes when asked to."""
    index = make_index([report_tree["report_pdf"]])
    lookup = MagicMock(return_value=[report_tree["notes_only"]])
    orchestrator = SearchOrchestrator(index)

    default = await orchestrator.perform_search(
        "report", SearchOptions(), annotation_lookup=lookup
    )
    lookup.assert_not_called()
    assert [e.path for e in default.items] == [report_tree["report_pdf"]]

    with_notes = await orchestrator.perform_search(
        "report", SearchOptions(), search_notes=True, annotation_lookup=lookup
    )
    lookup.assert_called_once_with("report")
    assert len(with_notes.items) == 2


async def test_no_executor_selected_falls_back_to_names(make_index, report_tree) -> None:
    index = make_index([report_tree["report_pdf"]])
    orchestrator = SearchOrchestrator(index)

    result = await orchestrator.perform_search(
        "report", SearchOptions(), search_names=False, search_notes=False
    )

    assert len(index.queries) == 1
    assert len(result.items) == 1


async def test_caller_token_cancels(make_index, report_tree) -> None:
    index = make_index([report_tree["report_pdf"]])
    orchestrator = SearchOrchestrator(index)
    token = CancellationToken()
    token.cancel()

    result = await orchestrator.perform_search("report", SearchOptions(), cancel_token=token)

    assert result.items == []
    assert result.keyword == "report"
    assert orchestrator.state == SearchState.CANCELED


async def test_new_search_cancels_previous(make_index, tmp_path) -> None:
    """Test search B supersedes search A, which goes quiet and returns empty."""
    paths = []
    for i in range(30):
        file = tmp_path / f"report_{i:02d}.txt"
        file.write_text("x")
        paths.append(str(file))

    orchestrator = SearchOrchestrator(make_index(paths), page_size=10, page_delay=0.05)
    first_page = asyncio.Event()
    pages_a: list[SearchResult] = []

    def on_page_a(result: SearchResult) -> None:
        pages_a.append(result)
        first_page.set()

    task_a = asyncio.create_task(
        orchestrator.perform_search("report", SearchOptions(), progress_callback=on_page_a)
    )
    await first_page.wait()

    result_b = await orchestrator.perform_search("report", SearchOptions())
    result_a = await task_a

    assert len(pages_a) == 1
    assert result_a.items == []
    assert result_a.keyword == "report"
    assert len(result_b.items) == 30
    assert orchestrator.state == SearchState.COMPLETED


async def test_load_more_normalizes_keyword(make_index, tmp_path) -> None:
    paths = []
    for i in range(12):
        file = tmp_path / f"report_{i:02d}.txt"
        file.write_text("x")
        paths.append(str(file))
    index = make_index(paths)
    orchestrator = SearchOrchestrator(index, page_size=10)

    result = await orchestrator.load_more("search://report", 10, SearchOptions())

    assert result.keyword == "report"
    assert [e.path for e in result.items] == paths[10:]
    assert index.queries[-1]["keyword"] == "report"


async def test_refresh_search_rewrites_cache(make_index, report_tree) -> None:
    index = make_index([report_tree["report_pdf"]])
    orchestrator = SearchOrchestrator(index)

    result = await orchestrator.refresh_search("搜索: report", SearchOptions())

    assert [e.path for e in result.items] == [report_tree["report_pdf"]]
    assert orchestrator.cache.get("search://report") is not None
