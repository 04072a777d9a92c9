"""
Search Contracts - Interfaces the search core consumes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import MediaInfo, SearchResult

if TYPE_CHECKING:
    from filesift.config.errors import FileSiftError

# keyword -> paths whose annotation matches
AnnotationLookup = Callable[[str], list[str]]

ProgressCallback = Callable[[SearchResult], None]

Notifier = Callable[["FileSiftError"], None]

# Optional metadata accessors used by ResultBuilder
TagIdsAccessor = Callable[[str], list[int]]
TagNameAccessor = Callable[[int], "str | None"]
NotesAccessor = Callable[[str], str]
FolderSizeAccessor = Callable[[str], "int | None"]
MediaProbe = Callable[[str], "MediaInfo | None"]


@runtime_checkable
class IndexProvider(Protocol):
    """Contract for the external filename index engine."""

    async def initialize(self) -> bool:
        """Start or attach to the engine; False when it cannot be made ready."""
        ...

    async def is_running(self) -> bool:
        """True when the engine is up and its index is loaded."""
        ...

    async def query(
        self,
        keyword: str,
        scope_root: str | None = None,
        offset: int = 0,
        limit: int = 1000,
        match_case: bool = False,
        match_whole_word: bool = False,
    ) -> list[str]:
        """
        Return one page of matching full paths, in index order.

        Args:
            keyword: Search text; each token is prefix-matched
            scope_root: Restrict matches to this directory tree
            offset: Index of the first result to return
            limit: Maximum number of results to return
        """
        ...


@runtime_checkable
class AnnotationStore(Protocol):
    """Contract for the per-file notes and tags store."""

    def search(self, text: str) -> list[str]:
        """Paths whose notes match the text."""
        ...

    def get_notes(self, path: str) -> str:
        """Full notes text for a path, '' when none."""
        ...

    def get_file_tag_ids(self, path: str) -> list[int]:
        """Tag ids attached to a path."""
        ...

    def get_tag_name(self, tag_id: int) -> str | None:
        """Display name of a tag."""
        ...

    def get_folder_size(self, path: str) -> int | None:
        """Cached recursive size of a folder, if known."""
        ...
