"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the index client, stores and orchestrator.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from filesift.adapters.everything import EverythingClient
from filesift.adapters.sqlite import AnnotationRepository
from filesift.config import get_settings
from filesift.domains.history import SearchHistory
from filesift.domains.orchestration import SearchOrchestrator
from filesift.interfaces import wiring

logger = logging.getLogger(__name__)


@lru_cache
def get_index_client() -> EverythingClient:
    """Get Everything client singleton."""
    return wiring.build_index_client(get_settings())


@lru_cache
def get_annotation_repository() -> AnnotationRepository:
    """Get annotation repository singleton."""
    return wiring.build_annotation_repository(get_settings())


@lru_cache
def get_orchestrator() -> SearchOrchestrator:
    """Get search orchestrator singleton."""
    return wiring.build_orchestrator(
        get_settings(), get_index_client(), get_annotation_repository()
    )


@lru_cache
def get_history() -> SearchHistory:
    """Get search history singleton."""
    return wiring.build_history(get_settings())


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    get_annotation_repository()
    if not await get_index_client().initialize():
        logger.warning("Everything is not available yet; searches will return 503")


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    await get_index_client().close()
