"""Cooperative cancellation token shared between the GUI thread and a lookup worker."""

import threading

from pyqt_livequery.core.exceptions import LookupCancelled


class CancellationToken:
    """
    One-shot cancellation signal for a single lookup.

    The coordinator cancels from the GUI thread; the backend polls or waits on
    it from the worker thread. Cancelling is idempotent.

    Usage:
        token = CancellationToken()

        def lookup(query, token):
            if token.wait(0.15):          # True if cancelled during the wait
                raise LookupCancelled(query)
            token.raise_if_cancelled()
            ...
    """

    def __init__(self):
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """Block up to timeout seconds; return True if cancelled meanwhile."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self, detail: str = "") -> None:
        if self._event.is_set():
            raise LookupCancelled(detail or "lookup cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"
