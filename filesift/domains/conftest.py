"""
Shared fixtures for domain tests.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest


class FakeIndexProvider:
    """In-memory filename index that serves a fixed path list in pages."""

    def __init__(
        self,
        paths: list[str] | None = None,
        running: bool = True,
        delay: float = 0.0,
    ) -> None:
        self.paths = list(paths or [])
        self.running = running
        self.delay = delay
        self.queries: list[dict] = []

    async def initialize(self) -> bool:
        return self.running

    async def is_running(self) -> bool:
        return self.running

    async def query(
        self,
        keyword: str,
        scope_root: str | None = None,
        offset: int = 0,
        limit: int = 1000,
        match_case: bool = False,
        match_whole_word: bool = False,
    ) -> list[str]:
        self.queries.append(
            {"keyword": keyword, "scope_root": scope_root, "offset": offset, "limit": limit}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        needle = keyword.lower()
        hits = [
            p
            for p in self.paths
            if needle in p.lower()
            and (scope_root is None or p.lower().startswith(scope_root.lower()))
        ]
        return hits[offset : offset + limit]


@pytest.fixture
def fake_index() -> FakeIndexProvider:
    """Empty running index; tests fill in paths."""
    return FakeIndexProvider()


@pytest.fixture
def make_index() -> type[FakeIndexProvider]:
    """Factory for indexes with custom paths, delay or running state."""
    return FakeIndexProvider


@pytest.fixture
def report_tree(tmp_path: Path) -> dict[str, str]:
    """
    Small filesystem tree for the 'report' scenario.

    Returns a mapping of short names to absolute paths.
    """
    docs = tmp_path / "docs"
    docs.mkdir()
    report_pdf = docs / "report.pdf"
    report_pdf.write_bytes(b"%PDF" + b"0" * 200)
    report_docx = docs / "report_2024.docx"
    report_docx.write_bytes(b"0" * 50)
    reports_dir = tmp_path / "reports"
    reports_dir.mkdir()
    notes_only = tmp_path / "budget.xlsx"
    notes_only.write_bytes(b"0" * 10)

    return {
        "report_pdf": str(report_pdf),
        "report_docx": str(report_docx),
        "reports_dir": str(reports_dir),
        "notes_only": str(notes_only),
    }
