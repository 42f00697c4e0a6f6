"""Reusable trailing debounce timer."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class DebounceTimer:
    """
    Trailing debounce timer driven by the Qt event loop.

    Restarts on each trigger. Handler fires once, after delay_ms of inactivity.

    Usage:
        self._debounce = DebounceTimer(delay_ms=300, handler=self._dispatch)

        def on_text_changed(self, text):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_pending(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def trigger(self):
        """Restart the timer."""
        if self._timer is None:
            self._timer = QTimer()
            self._timer.setSingleShot(True)
            self._timer.timeout.connect(self._handler)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending trigger."""
        if self._timer is not None:
            self._timer.stop()

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()

    def release(self):
        """Stop and drop the underlying QTimer. trigger() recreates it."""
        if self._timer is not None:
            self._timer.stop()
            self._timer.timeout.disconnect()
            self._timer.deleteLater()
            self._timer = None
