"""
Wiring - Builds the search services from settings.

Shared by the CLI and the API so both run the same composition.
"""

from __future__ import annotations

import logging

from filesift.adapters.everything import EverythingClient
from filesift.adapters.media import probe_media
from filesift.adapters.sqlite import AnnotationRepository
from filesift.config import AnnotationLookupError, Settings, StorageError
from filesift.domains.history import SearchHistory
from filesift.domains.orchestration import ResultCache, SearchOrchestrator
from filesift.domains.search import AnnotationLookup, ResultBuilder

logger = logging.getLogger(__name__)

__all__ = [
    "build_index_client",
    "build_annotation_repository",
    "build_orchestrator",
    "build_history",
    "notes_lookup",
]


def build_index_client(settings: Settings) -> EverythingClient:
    return EverythingClient(
        base_url=settings.everything_url,
        timeout=settings.everything_timeout,
        executable=settings.everything_executable,
        init_timeout=settings.engine_init_timeout,
        poll_interval=settings.engine_poll_interval,
    )


def build_annotation_repository(settings: Settings) -> AnnotationRepository:
    """Annotation store with its schema in place."""
    repo = AnnotationRepository(settings.db_path)
    repo.initialize()
    return repo


def build_orchestrator(
    settings: Settings,
    index: EverythingClient,
    annotations: AnnotationRepository | None = None,
) -> SearchOrchestrator:
    """
    Search orchestrator with metadata enrichment from the annotation store.

    Args:
        settings: Application settings
        index: Filename index client
        annotations: Notes, tags and folder sizes; enrichment is skipped when None
    """
    if annotations is not None:
        builder = ResultBuilder(
            get_file_tag_ids=annotations.get_file_tag_ids,
            get_tag_name=annotations.get_tag_name,
            get_file_notes=annotations.get_notes,
            get_folder_size=annotations.get_folder_size,
            probe_media=probe_media,
        )
    else:
        builder = ResultBuilder(probe_media=probe_media)

    return SearchOrchestrator(
        index,
        builder=builder,
        cache=ResultCache(ttl_seconds=settings.cache_ttl_seconds),
        page_size=settings.search_page_size,
        max_results=settings.search_max_results,
        max_display_files=settings.search_max_display_files,
        page_delay=settings.search_page_delay,
    )


def build_history(settings: Settings) -> SearchHistory:
    return SearchHistory(settings.history_path, max_count=settings.history_max_count)


def notes_lookup(annotations: AnnotationRepository) -> AnnotationLookup:
    """Notes search callable for SearchOrchestrator.perform_search."""

    def lookup(keyword: str) -> list[str]:
        try:
            return annotations.search(keyword)
        except StorageError as e:
            raise AnnotationLookupError(e.message, {"keyword": keyword}) from e

    return lookup
