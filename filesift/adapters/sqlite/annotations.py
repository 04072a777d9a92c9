"""
Annotation Repository - Per-file notes, tags and cached folder sizes.

Features:
- Notes storage with FTS5 prefix search
- LIKE fallback when FTS5 is unavailable or finds nothing
- Tags and file/tag links
- Cached recursive folder sizes
- One short-lived connection per call, safe to use from worker threads
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from pathlib import Path

from filesift.config.errors import ErrorCode, StorageError

logger = logging.getLogger(__name__)

__all__ = ["AnnotationRepository"]

SCHEMA = """
-- Notes keyed by full path
CREATE TABLE IF NOT EXISTS FileNotes (
    FilePath TEXT PRIMARY KEY COLLATE NOCASE,
    Notes TEXT NOT NULL DEFAULT '',
    UpdatedAt TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Tags
CREATE TABLE IF NOT EXISTS Tags (
    Id INTEGER PRIMARY KEY AUTOINCREMENT,
    Name TEXT NOT NULL UNIQUE COLLATE NOCASE
);

CREATE TABLE IF NOT EXISTS FileTags (
    FilePath TEXT NOT NULL COLLATE NOCASE,
    TagId INTEGER NOT NULL REFERENCES Tags(Id) ON DELETE CASCADE,
    PRIMARY KEY (FilePath, TagId)
);

-- Folder sizes computed elsewhere
CREATE TABLE IF NOT EXISTS FolderSizes (
    FolderPath TEXT PRIMARY KEY COLLATE NOCASE,
    SizeBytes INTEGER NOT NULL,
    UpdatedAt TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_filetags_tag ON FileTags(TagId);
"""

FTS_SCHEMA = """
CREATE VIRTUAL TABLE IF NOT EXISTS FileNotesFts USING fts5(
    Notes,
    content='FileNotes',
    content_rowid='rowid'
);

-- Triggers to keep FTS in sync
CREATE TRIGGER IF NOT EXISTS FileNotes_ai AFTER INSERT ON FileNotes BEGIN
    INSERT INTO FileNotesFts(rowid, Notes) VALUES (new.rowid, new.Notes);
END;

CREATE TRIGGER IF NOT EXISTS FileNotes_ad AFTER DELETE ON FileNotes BEGIN
    INSERT INTO FileNotesFts(FileNotesFts, rowid, Notes) VALUES ('delete', old.rowid, old.Notes);
END;

CREATE TRIGGER IF NOT EXISTS FileNotes_au AFTER UPDATE ON FileNotes BEGIN
    INSERT INTO FileNotesFts(FileNotesFts, rowid, Notes) VALUES ('delete', old.rowid, old.Notes);
    INSERT INTO FileNotesFts(rowid, Notes) VALUES (new.rowid, new.Notes);
END;
"""


def _fts_query(text: str) -> str:
    """Every token as a quoted prefix term, all required."""
    terms = ['"' + token.replace('"', '""') + '"*' for token in text.split()]
    return " ".join(terms)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class AnnotationRepository:
    """
    SQLite store for file annotations.

    Example:
        >>> repo = AnnotationRepository("data/filesift.db")
        >>> repo.initialize()
        >>> repo.set_notes(r"C:\\docs\\budget.xlsx", "Q3 report figures")
        >>> repo.search("report")
        ['C:\\\\docs\\\\budget.xlsx']
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.fts_enabled = False

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(str(self.db_path))) as conn:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            with conn:
                yield conn

    def initialize(self) -> None:
        """Initialize database schema."""
        with self._connect() as conn:
            conn.executescript(SCHEMA)
            try:
                conn.executescript(FTS_SCHEMA)
                self.fts_enabled = True
            except sqlite3.OperationalError as e:
                logger.warning("FTS5 unavailable, notes search uses LIKE: %s", e)
                self.fts_enabled = False

        logger.info("Annotation database initialized: %s", self.db_path)

    # --- Notes ---

    def get_notes(self, path: str) -> str:
        """Full notes text for a path, '' when none."""
        row = self._fetch_one("SELECT Notes FROM FileNotes WHERE FilePath = ?", (path,))
        return row["Notes"] if row else ""

    def set_notes(self, path: str, notes: str) -> None:
        """Create, replace or (for blank text) delete the notes of a path."""
        if not notes.strip():
            self.delete_notes(path)
            return
        self._write(
            """
            INSERT INTO FileNotes (FilePath, Notes, UpdatedAt)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(FilePath) DO UPDATE SET
                Notes = excluded.Notes,
                UpdatedAt = CURRENT_TIMESTAMP
            """,
            (path, notes),
        )

    def delete_notes(self, path: str) -> None:
        self._write("DELETE FROM FileNotes WHERE FilePath = ?", (path,))

    def search(self, text: str) -> list[str]:
        """
        Paths whose notes match the text.

        Args:
            text: Search text; each token is prefix-matched under FTS5

        Returns:
            Matching paths, best FTS rank first
        """
        text = text.strip()
        if not text:
            return []

        if self.fts_enabled:
            try:
                rows = self._fetch_all(
                    """
                    SELECT n.FilePath
                    FROM FileNotesFts
                    JOIN FileNotes n ON n.rowid = FileNotesFts.rowid
                    WHERE FileNotesFts MATCH ?
                    ORDER BY rank
                    """,
                    (_fts_query(text),),
                )
                if rows:
                    return [row["FilePath"] for row in rows]
            except StorageError as e:
                logger.debug("FTS notes search failed, falling back to LIKE: %s", e)

        rows = self._fetch_all(
            "SELECT FilePath FROM FileNotes WHERE Notes LIKE ? ESCAPE '\\' ORDER BY UpdatedAt DESC",
            (_like_pattern(text),),
        )
        return [row["FilePath"] for row in rows]

    # --- Tags ---

    def add_tag(self, name: str) -> int:
        """Create a tag if missing and return its id."""
        self._write("INSERT OR IGNORE INTO Tags (Name) VALUES (?)", (name,))
        row = self._fetch_one("SELECT Id FROM Tags WHERE Name = ?", (name,))
        return int(row["Id"])

    def tag_file(self, path: str, tag_id: int) -> None:
        self._write(
            "INSERT OR IGNORE INTO FileTags (FilePath, TagId) VALUES (?, ?)", (path, tag_id)
        )

    def get_file_tag_ids(self, path: str) -> list[int]:
        rows = self._fetch_all(
            "SELECT TagId FROM FileTags WHERE FilePath = ? ORDER BY TagId", (path,)
        )
        return [int(row["TagId"]) for row in rows]

    def get_tag_name(self, tag_id: int) -> str | None:
        row = self._fetch_one("SELECT Name FROM Tags WHERE Id = ?", (tag_id,))
        return row["Name"] if row else None

    # --- Folder sizes ---

    def get_folder_size(self, path: str) -> int | None:
        row = self._fetch_one("SELECT SizeBytes FROM FolderSizes WHERE FolderPath = ?", (path,))
        return int(row["SizeBytes"]) if row else None

    def set_folder_size(self, path: str, size_bytes: int) -> None:
        self._write(
            """
            INSERT INTO FolderSizes (FolderPath, SizeBytes, UpdatedAt)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(FolderPath) DO UPDATE SET
                SizeBytes = excluded.SizeBytes,
                UpdatedAt = CURRENT_TIMESTAMP
            """,
            (path, size_bytes),
        )

    # --- Helpers ---

    def _fetch_one(self, sql: str, params: tuple) -> sqlite3.Row | None:
        try:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Annotation read failed: {e}") from e

    def _fetch_all(self, sql: str, params: tuple) -> list[sqlite3.Row]:
        try:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Annotation read failed: {e}") from e

    def _write(self, sql: str, params: tuple) -> None:
        try:
            with self._connect() as conn:
                conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(
                f"Annotation write failed: {e}", code=ErrorCode.STORAGE_WRITE_FAILED
            ) from e
