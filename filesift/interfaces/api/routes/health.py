"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends

from filesift import __version__
from filesift.adapters.everything import EverythingClient
from filesift.interfaces.api.deps import get_index_client

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "filesift"}


@router.get("/health/index")
async def index_health(
    index: EverythingClient = Depends(get_index_client),
) -> dict[str, Any]:
    """Whether the Everything index answers queries."""
    return {"running": await index.is_running(), "url": index.base_url}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "FileSift API",
        "version": __version__,
        "description": "Filename and notes search over an Everything index",
        "docs": "/docs",
    }
