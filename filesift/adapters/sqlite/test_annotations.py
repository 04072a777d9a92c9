"""Tests for Annotation Repository."""

import sqlite3
from pathlib import Path

import pytest

from filesift.config.errors import StorageError

from .annotations import AnnotationRepository


@pytest.fixture
def repo(tmp_path: Path) -> AnnotationRepository:
    """Create a test repository with temporary database."""
    repo = AnnotationRepository(tmp_path / "test.db")
    repo.initialize()
    return repo


def test_initialize_creates_tables(repo: AnnotationRepository):
    """Test that initialize creates all required tables."""
    with sqlite3.connect(repo.db_path) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}

    assert {"FileNotes", "Tags", "FileTags", "FolderSizes"} <= tables
    if repo.fts_enabled:
        assert "FileNotesFts" in tables


def test_initialize_is_idempotent(repo: AnnotationRepository):
    repo.set_notes("/d/a.txt", "kept")
    repo.initialize()
    assert repo.get_notes("/d/a.txt") == "kept"


def test_set_and_get_notes(repo: AnnotationRepository):
    """Test notes round trip, overwrite and path case-insensitivity."""
    repo.set_notes(r"C:\Docs\budget.xlsx", "first")
    repo.set_notes(r"c:\docs\BUDGET.xlsx", "Q3 report figures")

    assert repo.get_notes(r"C:\Docs\budget.xlsx") == "Q3 report figures"
    assert repo.get_notes("/missing") == ""


def test_blank_notes_delete(repo: AnnotationRepository):
    repo.set_notes("/d/a.txt", "something")
    repo.set_notes("/d/a.txt", "   ")
    assert repo.get_notes("/d/a.txt") == ""


def test_search_prefix_match(repo: AnnotationRepository):
    """Test notes search matches word prefixes."""
    repo.set_notes("/d/budget.xlsx", "Quarterly reporting figures")
    repo.set_notes("/d/plan.docx", "holiday plan")

    assert repo.search("report") == ["/d/budget.xlsx"]
    assert repo.search("  ") == []


def test_search_follows_updates_and_deletes(repo: AnnotationRepository):
    repo.set_notes("/d/a.txt", "alpha")
    repo.set_notes("/d/a.txt", "beta")
    assert repo.search("alpha") == []
    assert repo.search("beta") == ["/d/a.txt"]

    repo.delete_notes("/d/a.txt")
    assert repo.search("beta") == []


def test_search_falls_back_to_substring(repo: AnnotationRepository):
    """Test text inside a word is still found through the LIKE fallback."""
    repo.set_notes("/d/cn.txt", "年度报告草稿")
    repo.set_notes("/d/mid.txt", "misreported totals")

    assert repo.search("报告") == ["/d/cn.txt"]
    assert repo.search("reported") == ["/d/mid.txt"]


def test_search_with_fts_syntax_characters(repo: AnnotationRepository):
    repo.set_notes("/d/q.txt", 'says "hello" (twice)')
    assert repo.search('"hello"') == ["/d/q.txt"]


def test_tags(repo: AnnotationRepository):
    work = repo.add_tag("work")
    urgent = repo.add_tag("urgent")
    assert repo.add_tag("WORK") == work

    repo.tag_file("/d/a.txt", urgent)
    repo.tag_file("/d/a.txt", work)
    repo.tag_file("/d/a.txt", work)

    assert repo.get_file_tag_ids("/d/a.txt") == sorted([work, urgent])
    assert repo.get_tag_name(work) == "work"
    assert repo.get_tag_name(9999) is None


def test_folder_sizes(repo: AnnotationRepository):
    assert repo.get_folder_size("/d") is None
    repo.set_folder_size("/d", 1024)
    repo.set_folder_size("/d", 2048)
    assert repo.get_folder_size("/d") == 2048


def test_read_failure_raises_storage_error(tmp_path: Path):
    """Test reads against an uninitialized database raise StorageError."""
    repo = AnnotationRepository(tmp_path / "empty.db")
    with pytest.raises(StorageError):
        repo.get_notes("/d/a.txt")
