"""
Search Domain - Filename and notes search over an external index.

This domain handles:
- Paged filename index queries with de-duplication
- Notes (annotation) matches
- Result enrichment and relevance ordering
- Grouping into notes, folder and file buckets
"""

from .annotation_executor import AnnotationSearchExecutor
from .builder import ResultBuilder, notes_snippet
from .contracts import (
    AnnotationLookup,
    AnnotationStore,
    IndexProvider,
    Notifier,
    ProgressCallback,
)
from .grouper import (
    build_grouped_from_cached_results,
    build_grouped_results,
    classify_entries,
)
from .index_executor import IndexSearchExecutor
from .models import (
    MediaInfo,
    PathSet,
    ResultEntry,
    SearchMode,
    SearchOptions,
    SearchResult,
    SearchResultPage,
    Taxonomy,
)

__all__ = [
    # Contracts
    "IndexProvider",
    "AnnotationStore",
    "AnnotationLookup",
    "ProgressCallback",
    "Notifier",
    # Models
    "SearchMode",
    "SearchOptions",
    "SearchResult",
    "SearchResultPage",
    "ResultEntry",
    "MediaInfo",
    "Taxonomy",
    "PathSet",
    # Implementations
    "ResultBuilder",
    "IndexSearchExecutor",
    "AnnotationSearchExecutor",
    "notes_snippet",
    "classify_entries",
    "build_grouped_results",
    "build_grouped_from_cached_results",
]
