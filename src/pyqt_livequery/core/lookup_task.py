"""Background lookup worker with cancellation token and lifecycle management."""

import logging
from typing import Callable, List, Optional, Set, TYPE_CHECKING

from PyQt6.QtCore import QThread, pyqtSignal

from pyqt_livequery.core.cancellation import CancellationToken
from pyqt_livequery.core.exceptions import LookupCancelled

if TYPE_CHECKING:
    from pyqt_livequery.protocols.lookup_backend import LookupBackend

logger = logging.getLogger(__name__)

# --- Module-level constants ---
CLEANUP_WAIT_MS = 200     # Wait time per task during coordinator disposal


class LookupTask(QThread):
    """
    Runs one backend lookup off the GUI thread.

    Both signals carry the request id they were started with, so the receiver
    can drop outcomes that belong to a superseded request. Receivers should be
    slots of a QObject living in the GUI thread; the emission is then queued
    back onto the event loop.

    Error handling:
        def on_failed(request_id: int, e: Exception):
            if isinstance(e, LookupCancelled): ...   # Absorb
            logger.error("Lookup failed", exc_info=e)
    """

    succeeded = pyqtSignal(int, object)   # (request_id, list of items)
    failed = pyqtSignal(int, object)      # (request_id, Exception)

    # Running tasks stay referenced here until their thread finishes
    _live: Set["LookupTask"] = set()

    def __init__(
        self,
        request_id: int,
        backend: "LookupBackend",
        query_text: str,
        token: CancellationToken,
        starters: bool = False,
        parent=None
    ):
        super().__init__(parent)
        self.request_id = request_id
        self.backend = backend
        self.query_text = query_text
        self.token = token
        self.starters = starters
        self.finished.connect(self._on_thread_finished)

    def start(self, *args, **kwargs):
        LookupTask._live.add(self)
        super().start(*args, **kwargs)

    def run(self):
        """Execute the lookup, reporting every outcome including cancellation."""
        try:
            if self.starters:
                items = self.backend.starters(self.token)
            else:
                items = self.backend.lookup(self.query_text, self.token)
        except Exception as e:
            self.failed.emit(self.request_id, e)
            return

        if self.token.is_cancelled:
            self.failed.emit(self.request_id, LookupCancelled(self.query_text))
        else:
            self.succeeded.emit(self.request_id, list(items))

    def cancel(self):
        """Signal the token. The backend decides how fast it stops."""
        self.token.cancel()

    def _on_thread_finished(self):
        LookupTask._live.discard(self)


class LookupTaskManager:
    """
    Owns the lookup workers of one coordinator.

    Handles:
    - Cancelling the previous lookup before starting a new one
    - Keeping superseded workers alive until they exit
    - Cleanup on coordinator disposal

    Usage in coordinator:
        self._tasks = LookupTaskManager()

        def _dispatch(self, request_id, text, token):
            self._tasks.run(
                request_id=request_id,
                backend=self._selector.get_current(),
                query_text=text,
                token=token,
                on_success=self._on_lookup_succeeded,
                on_error=self._on_lookup_failed,
            )

        def dispose(self):
            self._tasks.cleanup()
    """

    def __init__(self):
        self._current_task: Optional[LookupTask] = None
        self._tasks: List[LookupTask] = []

    @property
    def running_count(self) -> int:
        self._prune()
        return len(self._tasks)

    def run(
        self,
        request_id: int,
        backend: "LookupBackend",
        query_text: str,
        token: CancellationToken,
        on_success: Callable[[int, object], None],
        on_error: Callable[[int, object], None],
        starters: bool = False,
    ) -> LookupTask:
        """
        Start a lookup, cancelling any previous one.

        Args:
            request_id: Generation number the outcome is tagged with
            backend: Backend resolved for this dispatch (never re-resolved)
            query_text: Text passed to the backend
            token: Token for this lookup
            on_success: Slot receiving (request_id, items)
            on_error: Slot receiving (request_id, exception)
            starters: Call backend.starters() instead of backend.lookup()

        Returns:
            The started LookupTask
        """
        self.cancel_current()

        task = LookupTask(request_id, backend, query_text, token, starters=starters)
        task.succeeded.connect(on_success)
        task.failed.connect(on_error)

        self._prune()
        self._tasks.append(task)
        self._current_task = task
        task.start()
        what = "starters" if starters else repr(query_text)
        logger.debug(f"Started lookup {request_id} on {backend.name!r} for {what}")
        return task

    def cancel_current(self):
        """Cancel the current task without waiting for it."""
        if self._current_task is not None:
            self._current_task.cancel()
            self._current_task = None

    def cleanup(self, wait_ms: int = CLEANUP_WAIT_MS):
        """Cancel every task and wait briefly for each to exit."""
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            if task.isRunning() and not task.wait(wait_ms):
                logger.debug(f"Lookup {task.request_id} still running after cleanup wait")
        self._current_task = None
        self._prune()

    def _prune(self):
        self._tasks = [task for task in self._tasks if not task.isFinished()]
