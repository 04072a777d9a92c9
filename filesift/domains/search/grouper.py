"""
Result Grouper - Assigns display buckets to result entries.

A notes match wins over a name match. Directories are never bucketed as
files: a notes match on a folder stays FOLDER but keeps its notes provenance.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import PathSet, ResultEntry, Taxonomy

__all__ = [
    "GROUP_ORDER",
    "classify_entries",
    "build_grouped_results",
    "build_grouped_from_cached_results",
]

GROUP_ORDER = (Taxonomy.NOTES, Taxonomy.FOLDER, Taxonomy.FILE)


def classify_entries(
    entries: Iterable[ResultEntry],
    notes_paths: PathSet,
    name_paths: PathSet,
) -> None:
    """Tag taxonomy and provenance on each entry in place."""
    for entry in entries:
        entry.from_notes_match = entry.path in notes_paths
        entry.from_name_match = entry.path in name_paths

        if entry.from_notes_match:
            entry.taxonomy = Taxonomy.FOLDER if entry.is_directory else Taxonomy.NOTES
        elif entry.is_directory:
            entry.taxonomy = Taxonomy.FOLDER
        else:
            entry.taxonomy = Taxonomy.FILE


def _bucket(entries: Iterable[ResultEntry]) -> dict[Taxonomy, list[ResultEntry]]:
    buckets: dict[Taxonomy, list[ResultEntry]] = {t: [] for t in GROUP_ORDER}
    for entry in entries:
        if entry.taxonomy in buckets:
            buckets[entry.taxonomy].append(entry)
    return {t: items for t, items in buckets.items() if items}


def build_grouped_results(
    entries: list[ResultEntry],
    notes_paths: PathSet,
    name_paths: PathSet,
) -> dict[Taxonomy, list[ResultEntry]]:
    """Classify entries, then bucket them as NOTES, FOLDER, FILE."""
    classify_entries(entries, notes_paths, name_paths)
    return _bucket(entries)


def build_grouped_from_cached_results(
    entries: list[ResultEntry],
) -> dict[Taxonomy, list[ResultEntry]] | None:
    """Regroup entries that already carry a taxonomy; None when none do."""
    if not any(entry.taxonomy is not None for entry in entries):
        return None
    return _bucket(entries)
