"""
Debounced, cancellable query coordinator.

Turns a stream of text edits into at most one active backend lookup and
guarantees observers only ever see results for the latest accepted text.

Three guards compose:
- DebounceTimer collapses bursts of edits into one dispatch.
- A CancellationToken per dispatch lets the backend stop early.
- A generation number per dispatch decides, on the GUI thread, whether an
  outcome may be applied. This check is unconditional: a backend that
  ignores its token still cannot install a stale result.

All state lives on the GUI thread. Lookups run on LookupTask workers and
report back through queued signals.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from pyqt_livequery.core.cancellation import CancellationToken
from pyqt_livequery.core.debounce_timer import DebounceTimer
from pyqt_livequery.core.exceptions import ErrorKind, LookupCancelled, QueryLookupError
from pyqt_livequery.core.lookup_task import LookupTaskManager
from pyqt_livequery.core.performance_monitor import PerformanceMonitor, get_monitor
from pyqt_livequery.core.query_state import (
    IDLE,
    CoordinatorSnapshot,
    CoordinatorState,
    Debouncing,
    Failed,
    Idle,
    Loading,
    Query,
    ResultSet,
    Settled,
    TooShort,
)
from pyqt_livequery.protocols.query_config import QueryConfig
from pyqt_livequery.services.backend_selector import BackendSelector
from pyqt_livequery.services.selection_cursor import SelectionCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Dispatch:
    """Bookkeeping for one in-flight lookup."""
    backend_name: str
    started: Optional[float] = None


class QueryCoordinator(QObject):
    """
    Drives lookups from rapidly changing input.

    Usage:
        selector = BackendSelector(create_search_backend())
        coordinator = QueryCoordinator(selector, search_config(), name="chat-search")
        coordinator.snapshot_changed.connect(view.render)

        line_edit.textChanged.connect(coordinator.on_input)
        ...
        coordinator.dispose()  # From closeEvent

    Signals:
        state_changed(CoordinatorState): every state transition
        snapshot_changed(CoordinatorSnapshot): state transitions, cursor moves
            and starter suggestions arriving or going away
    """

    state_changed = pyqtSignal(object)
    snapshot_changed = pyqtSignal(object)

    def __init__(self,
                 selector: BackendSelector,
                 config: Optional[QueryConfig] = None,
                 cursor: Optional[SelectionCursor] = None,
                 name: str = "query",
                 parent=None):
        super().__init__(parent)
        self._selector: Optional[BackendSelector] = selector
        self._config = config or QueryConfig()
        self._cursor = cursor or SelectionCursor(self._config.default_cursor_index)
        self._name = name

        self._state: CoordinatorState = IDLE
        self._text = ""
        self._generation = 0
        self._token: Optional[CancellationToken] = None
        self._disposed = False

        self._debounce = DebounceTimer(self._config.debounce_delay_ms, self._on_debounce_elapsed)
        self._tasks = LookupTaskManager()

        # Starter suggestions: own request counter and worker, shown only while Idle
        self._starters: Tuple[Any, ...] = ()
        self._starter_generation = 0
        self._starter_token: Optional[CancellationToken] = None
        self._starter_tasks = LookupTaskManager()

        self._monitor: Optional[PerformanceMonitor] = None
        if self._config.enable_performance_monitoring:
            self._monitor = get_monitor(f"{name} lookup")
        self._dispatches: Dict[int, _Dispatch] = {}

        self._cursor.add_listener(self._on_cursor_moved)

    # ---------- Properties ----------
    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def config(self) -> QueryConfig:
        return self._config

    @property
    def cursor(self) -> SelectionCursor:
        return self._cursor

    @property
    def name(self) -> str:
        return self._name

    @property
    def selected_item(self) -> Optional[Any]:
        return self._cursor.current()

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def is_debouncing(self) -> bool:
        return self._debounce.is_pending

    @property
    def starters(self) -> Tuple[Any, ...]:
        return self._starters

    def snapshot(self) -> CoordinatorSnapshot:
        return CoordinatorSnapshot(
            state=self._state,
            selected_index=self._cursor.index,
            selected_item=self._cursor.current(),
            starters=self._starters,
        )

    # ---------- Public API ----------
    @pyqtSlot(str)
    def on_input(self, text: str) -> None:
        """Accept one edit of the input text. Safe to call on every keystroke."""
        if self._disposed:
            logger.debug(f"[{self._name}] on_input after dispose ignored")
            return

        trimmed = text.strip()
        if not trimmed:
            self._stop_pending_work()
            self._text = ""
            self._set_state(IDLE)
            if self._config.show_starters and not self._starters and self._starter_token is None:
                self.request_starters()
            return

        if len(trimmed) < self._config.min_chars:
            self._stop_pending_work()
            self._text = text
            self._set_state(TooShort(text, self._config.min_chars))
            return

        self._text = text
        self._set_state(Debouncing(text))
        self._debounce.trigger()

    def clear(self) -> None:
        """Drop pending and in-flight work and return to Idle, synchronously."""
        if self._disposed:
            return
        self._stop_pending_work()
        self._drop_starters()
        self._text = ""
        self._set_state(IDLE)

    def request_starters(self) -> bool:
        """
        Fetch starter suggestions from the current backend while Idle.

        They are shown until the coordinator leaves Idle or is cleared.
        Returns False if the coordinator is not Idle.
        """
        if self._disposed or not isinstance(self._state, Idle):
            return False
        if self._starter_token is not None:
            self._starter_token.cancel()
        self._starter_generation += 1
        self._starter_token = CancellationToken()
        self._starter_tasks.run(
            request_id=self._starter_generation,
            backend=self._selector.get_current(),
            query_text="",
            token=self._starter_token,
            on_success=self._on_starters_loaded,
            on_error=self._on_starters_failed,
            starters=True,
        )
        return True

    def retry(self) -> bool:
        """Re-run the failed query immediately. Returns False if not Failed."""
        if self._disposed or not isinstance(self._state, Failed):
            return False
        self._text = self._state.query.text
        self._set_state(Debouncing(self._text))
        self._debounce.force()
        return True

    def flush(self) -> bool:
        """Dispatch a pending debounce now. Returns False if nothing was pending."""
        if self._disposed or not isinstance(self._state, Debouncing):
            return False
        self._debounce.force()
        return True

    def dispose(self) -> None:
        """Release the timer, workers and backend handle. Idempotent."""
        if self._disposed:
            return
        self.clear()
        self._disposed = True
        self._debounce.release()
        self._tasks.cleanup()
        self._starter_tasks.cleanup()
        self._cursor.remove_listener(self._on_cursor_moved)
        self._selector = None
        self._dispatches.clear()
        still_running = self._tasks.running_count + self._starter_tasks.running_count
        logger.debug(
            f"[{self._name}] disposed at generation {self._generation}, "
            f"{still_running} lookups still running"
        )

    # ---------- Dispatch ----------
    def _on_debounce_elapsed(self) -> None:
        if self._disposed or not isinstance(self._state, Debouncing):
            return

        self._cancel_inflight()
        self._generation += 1
        request_id = self._generation
        query = Query(self._text, request_id)
        token = CancellationToken()
        self._token = token

        backend = self._selector.get_current()
        self._set_state(Loading(query))
        started = self._monitor.start() if self._monitor is not None else None
        self._dispatches[request_id] = _Dispatch(backend.name, started)

        self._tasks.run(
            request_id=request_id,
            backend=backend,
            query_text=query.text,
            token=token,
            on_success=self._on_lookup_succeeded,
            on_error=self._on_lookup_failed,
        )

    # ---------- Settlement ----------
    @pyqtSlot(int, object)
    def _on_lookup_succeeded(self, request_id: int, items: List[Any]) -> None:
        accepted = self._accept_outcome(request_id, "results")
        if accepted is None:
            return
        query, dispatch = accepted

        result_set = ResultSet(
            items=tuple(items[:self._config.max_results]),
            for_query=query,
            received_at_generation=request_id,
        )
        self._log_completion(
            f"[{self._name}] Request {request_id} completed for {query.text!r} "
            f"using {dispatch.backend_name}: {len(result_set)} of {len(items)} items"
        )
        self._set_state(Settled(result_set))

    @pyqtSlot(int, object)
    def _on_lookup_failed(self, request_id: int, error: Exception) -> None:
        if isinstance(error, LookupCancelled):
            self._dispatches.pop(request_id, None)
            logger.debug(f"[{self._name}] Request {request_id} was cancelled")
            return

        accepted = self._accept_outcome(request_id, "error")
        if accepted is None:
            return
        query, dispatch = accepted

        if isinstance(error, QueryLookupError):
            kind = error.kind
            logger.warning(
                f"[{self._name}] Request {request_id} failed for {query.text!r} "
                f"using {dispatch.backend_name}: {error}"
            )
        else:
            kind = ErrorKind.UPSTREAM
            logger.error(
                f"[{self._name}] Request {request_id} raised unexpectedly for {query.text!r} "
                f"using {dispatch.backend_name}",
                exc_info=error,
            )
        self._set_state(Failed(query, kind, str(error) or kind.user_message))

    def _accept_outcome(self, request_id: int, what: str) -> Optional[Tuple[Query, _Dispatch]]:
        """Return the query the outcome answers and its dispatch, or None to discard it."""
        dispatch = self._dispatches.pop(request_id, None)

        if self._disposed:
            logger.debug(f"[{self._name}] Request {request_id} settled after dispose, ignoring {what}")
            return None
        if request_id != self._generation:
            logger.debug(f"[{self._name}] Request {request_id} is stale (current {self._generation}), ignoring {what}")
            return None
        if self._token is None or self._token.is_cancelled or dispatch is None:
            logger.debug(f"[{self._name}] Request {request_id} was cancelled, ignoring {what}")
            return None
        if not isinstance(self._state, Loading) or self._state.query.generation != request_id:
            logger.debug(f"[{self._name}] Request {request_id} superseded by new input, ignoring {what}")
            return None

        if dispatch.started is not None and self._monitor is not None:
            self._monitor.stop(dispatch.started)
        self._token = None
        return self._state.query, dispatch

    @pyqtSlot(int, object)
    def _on_starters_loaded(self, request_id: int, items: List[Any]) -> None:
        if (self._disposed or request_id != self._starter_generation
                or self._starter_token is None or self._starter_token.is_cancelled
                or not isinstance(self._state, Idle)):
            logger.debug(f"[{self._name}] Starter request {request_id} is stale, ignoring")
            return

        self._starter_token = None
        self._starters = tuple(items[:self._config.max_results])
        self._cursor.reset(self._starters)
        logger.debug(f"[{self._name}] {len(self._starters)} starter suggestions")
        self.snapshot_changed.emit(self.snapshot())

    @pyqtSlot(int, object)
    def _on_starters_failed(self, request_id: int, error: Exception) -> None:
        if request_id == self._starter_generation:
            self._starter_token = None
        if isinstance(error, LookupCancelled) or self._disposed:
            return
        # Starters are optional; the box stays empty
        logger.warning(f"[{self._name}] Starter request {request_id} failed: {error}")

    # ---------- Internals ----------
    def _stop_pending_work(self) -> None:
        self._debounce.cancel()
        self._cancel_inflight()

    def _cancel_inflight(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        self._tasks.cancel_current()

    def _drop_starters(self) -> None:
        if self._starter_token is not None:
            self._starter_token.cancel()
            self._starter_token = None
        self._starter_tasks.cancel_current()
        if not self._starters:
            return
        self._starters = ()
        self._cursor.reset(())
        if isinstance(self._state, Idle):
            self.snapshot_changed.emit(self.snapshot())

    def _set_state(self, state: CoordinatorState) -> None:
        if state == self._state:
            return
        previous = self._state
        self._state = state

        if isinstance(previous, Idle):
            self._drop_starters()
        if isinstance(state, Settled):
            self._cursor.reset(state.items)
        elif isinstance(previous, Settled):
            self._cursor.reset(())

        logger.debug(f"[{self._name}] {previous.phase.value} -> {state.phase.value}")
        self.state_changed.emit(state)
        self.snapshot_changed.emit(self.snapshot())

    def _on_cursor_moved(self, index: int) -> None:
        self.snapshot_changed.emit(self.snapshot())

    def _log_completion(self, message: str) -> None:
        if self._config.enable_logging:
            logger.info(message)
        else:
            logger.debug(message)
