"""
Search Routes - Keyword search, paging, cache and history endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from filesift.adapters.everything import EverythingClient
from filesift.adapters.sqlite import AnnotationRepository
from filesift.config.errors import EngineUnavailableError
from filesift.domains.history import HistoryItem, HistoryType, SearchHistory
from filesift.domains.orchestration import ResultCache, SearchOrchestrator, normalize_keyword
from filesift.domains.search import SearchOptions, SearchResult
from filesift.interfaces.api.deps import (
    get_annotation_repository,
    get_history,
    get_index_client,
    get_orchestrator,
)
from filesift.interfaces.wiring import notes_lookup

router = APIRouter()


class SearchRequest(BaseModel):
    """Search request body."""

    keyword: str = Field(..., min_length=1, description="Search keyword")
    options: SearchOptions = Field(default_factory=SearchOptions)
    current_path: str | None = Field(default=None, description="Folder being browsed")


class PageRequest(BaseModel):
    """Load-more request body."""

    keyword: str = Field(..., min_length=1)
    offset: int = Field(..., ge=0)
    options: SearchOptions = Field(default_factory=SearchOptions)
    current_path: str | None = None


class RefreshRequest(BaseModel):
    """Refresh request body."""

    keyword: str = Field(..., min_length=1)
    options: SearchOptions = Field(default_factory=SearchOptions)
    current_path: str | None = None


@router.post("", response_model=SearchResult)
async def search(
    request: SearchRequest,
    index: EverythingClient = Depends(get_index_client),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
    annotations: AnnotationRepository = Depends(get_annotation_repository),
    history: SearchHistory = Depends(get_history),
) -> SearchResult:
    """
    Search file names and notes.

    - **keyword**: Search text; `search://` prefixes are stripped
    - **options**: Type, scope, date, size, dimension and duration filters
    - **current_path**: Folder used for current-drive / current-folder scopes
    - **options.search_names / search_notes**: Executors used in FILE_NAME mode
    """
    if not await index.initialize():
        raise EngineUnavailableError(
            "Everything search engine is not running", {"keyword": request.keyword}
        )

    result = await orchestrator.perform_search(
        request.keyword,
        request.options,
        request.current_path,
        search_names=request.options.search_names,
        search_notes=request.options.search_notes,
        annotation_lookup=notes_lookup(annotations),
    )
    if result.keyword:
        history.add(result.keyword, HistoryType.SEARCH)
    return result


@router.post("/more", response_model=SearchResult)
async def load_more(
    request: PageRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> SearchResult:
    """Fetch the next raw page of a search."""
    return await orchestrator.load_more(
        request.keyword, request.offset, request.options, request.current_path
    )


@router.post("/refresh", response_model=SearchResult)
async def refresh(
    request: RefreshRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> SearchResult:
    """Re-fetch the first page and replace the cached results."""
    return await orchestrator.refresh_search(
        request.keyword, request.options, request.current_path
    )


@router.delete("/cache")
async def clear_cache(
    keyword: str | None = None,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> dict[str, str]:
    """Drop cached results for one keyword, or all of them."""
    if keyword:
        key = ResultCache.make_key(normalize_keyword(keyword))
        orchestrator.cache.clear(key)
        return {"cleared": key}
    orchestrator.cache.clear()
    return {"cleared": "all"}


@router.get("/history", response_model=list[HistoryItem])
async def get_search_history(
    history: SearchHistory = Depends(get_history),
) -> list[HistoryItem]:
    """Recent searches, newest first."""
    return history.get_recent()
