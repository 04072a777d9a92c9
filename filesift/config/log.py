"""
Logging configuration for FileSift.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["setup_logging"]


def setup_logging(level: str = "INFO") -> None:
    """Route standard library logging through rich on stderr."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=False,
                rich_tracebacks=True,
            )
        ],
        force=True,
    )

    # Per-request lines from httpx are noise at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
