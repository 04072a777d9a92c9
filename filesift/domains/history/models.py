"""
History Models - Data types for search history.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class HistoryType(str, Enum):
    """What kind of input a history item records."""

    LOCAL_PATH = "local_path"
    SEARCH = "search"
    FULL_TEXT_SEARCH = "full_text_search"


class HistoryItem(BaseModel):
    """One remembered address-bar or search entry."""

    type: HistoryType
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
