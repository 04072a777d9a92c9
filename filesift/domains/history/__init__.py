"""
History Domain - Recently used searches and paths.
"""

from .models import HistoryItem, HistoryType
from .store import SearchHistory

__all__ = ["HistoryItem", "HistoryType", "SearchHistory"]
