"""
Tests for cancellation tokens.
"""

from __future__ import annotations

import pytest

from filesift.config.errors import ErrorCode, SearchCancelledError

from .cancellation import CancellationToken


def test_token_starts_live() -> None:
    token = CancellationToken()
    assert token.is_cancelled is False
    token.raise_if_cancelled()


def test_cancel_raises() -> None:
    token = CancellationToken()
    token.cancel()

    with pytest.raises(SearchCancelledError) as exc_info:
        token.raise_if_cancelled()
    assert exc_info.value.code == ErrorCode.SEARCH_CANCELLED


def test_parent_cancel_propagates_to_child() -> None:
    """Test a linked token follows its parent but not the reverse."""
    parent = CancellationToken()
    child = CancellationToken(parent=parent)

    child_only = CancellationToken(parent=CancellationToken())
    child_only.cancel()
    assert child_only.is_cancelled is True

    parent.cancel()
    assert child.is_cancelled is True

    other_parent = CancellationToken()
    other_child = CancellationToken(parent=other_parent)
    other_child.cancel()
    assert other_parent.is_cancelled is False
