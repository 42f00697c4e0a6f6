"""
Core PyQt6 primitives.

Debounce timer, cancellation token, lookup worker thread and the immutable
state types of the query pipeline. No domain-specific logic.
"""

from .exceptions import (
    ErrorKind,
    QueryLookupError,
    LookupCancelled,
    UpstreamError,
    LookupTimeoutError,
    ConfigError,
)
from .cancellation import CancellationToken
from .debounce_timer import DebounceTimer
from .lookup_task import LookupTask, LookupTaskManager
from .query_state import (
    QueryPhase,
    Query,
    ResultSet,
    Idle,
    TooShort,
    Debouncing,
    Loading,
    Settled,
    Failed,
    CoordinatorState,
    CoordinatorSnapshot,
    IDLE,
)
from .highlight import HighlightSegment, split_highlight, highlight_html
from .performance_monitor import PerformanceMonitor, get_monitor, timer

__all__ = [
    "ErrorKind",
    "QueryLookupError",
    "LookupCancelled",
    "UpstreamError",
    "LookupTimeoutError",
    "ConfigError",
    "CancellationToken",
    "DebounceTimer",
    "LookupTask",
    "LookupTaskManager",
    "QueryPhase",
    "Query",
    "ResultSet",
    "Idle",
    "TooShort",
    "Debouncing",
    "Loading",
    "Settled",
    "Failed",
    "CoordinatorState",
    "CoordinatorSnapshot",
    "IDLE",
    "HighlightSegment",
    "split_highlight",
    "highlight_html",
    "PerformanceMonitor",
    "get_monitor",
    "timer",
]
