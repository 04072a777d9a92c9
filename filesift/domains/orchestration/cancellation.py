"""
Cancellation - Cooperative, thread-safe cancellation tokens.
"""

from __future__ import annotations

import threading

from filesift.config.errors import SearchCancelledError

__all__ = ["CancellationToken"]


class CancellationToken:
    """
    Cooperative cancellation flag, optionally linked to a parent.

    A linked token reports cancelled when either it or its parent is.

    Example:
        >>> caller = CancellationToken()
        >>> token = CancellationToken(parent=caller)
        >>> caller.cancel()
        >>> token.is_cancelled
        True
    """

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._event = threading.Event()
        self._parent = parent

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.is_cancelled

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise SearchCancelledError once cancelled."""
        if self.is_cancelled:
            raise SearchCancelledError()
