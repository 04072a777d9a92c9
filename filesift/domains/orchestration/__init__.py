"""
Orchestration Domain - Search lifecycle, pagination and result caching.

This domain handles:
- Search generations and cooperative cancellation
- Mode dispatch across filename and notes executors
- Load-more and refresh paging
- Short-lived result caching
"""

from .cache import ResultCache
from .cancellation import CancellationToken
from .contracts import SearchCache
from .models import SearchCacheEntry, SearchState
from .orchestrator import SearchOrchestrator, normalize_keyword
from .pagination import PaginationCoordinator

__all__ = [
    # Contracts
    "SearchCache",
    # Models
    "SearchCacheEntry",
    "SearchState",
    # Implementations
    "CancellationToken",
    "ResultCache",
    "PaginationCoordinator",
    "SearchOrchestrator",
    "normalize_keyword",
]
