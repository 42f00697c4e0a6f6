"""
Immutable value types for the query pipeline.

CoordinatorState is a tagged union of small frozen dataclasses. Each variant
carries a ``phase`` so renderers can switch on it without isinstance chains:

    Idle ──on_input──▶ Debouncing ──timer──▶ Loading ──▶ Settled | Failed
      ▲                    │
      └──── TooShort ◀─────┘  (below min_chars, no timer)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from pyqt_livequery.core.exceptions import ErrorKind


class QueryPhase(Enum):
    IDLE = "idle"
    TOO_SHORT = "too_short"
    DEBOUNCING = "debouncing"
    LOADING = "loading"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass(frozen=True)
class Query:
    """A lookup the coordinator decided to run."""
    text: str
    generation: int


@dataclass(frozen=True, eq=False)
class ResultSet:
    """
    Results installed for one query.

    Compared by identity: two result sets with equal items are still
    different result sets when they come from different generations.
    """
    items: Tuple[Any, ...]
    for_query: Query
    received_at_generation: int

    @property
    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Idle:
    phase: QueryPhase = field(default=QueryPhase.IDLE, init=False)


@dataclass(frozen=True)
class TooShort:
    text: str
    min_chars: int
    phase: QueryPhase = field(default=QueryPhase.TOO_SHORT, init=False)


@dataclass(frozen=True)
class Debouncing:
    text: str
    phase: QueryPhase = field(default=QueryPhase.DEBOUNCING, init=False)


@dataclass(frozen=True)
class Loading:
    query: Query
    phase: QueryPhase = field(default=QueryPhase.LOADING, init=False)


@dataclass(frozen=True)
class Settled:
    result_set: ResultSet
    phase: QueryPhase = field(default=QueryPhase.SETTLED, init=False)

    @property
    def items(self) -> Tuple[Any, ...]:
        return self.result_set.items

    @property
    def query(self) -> Query:
        return self.result_set.for_query


@dataclass(frozen=True)
class Failed:
    query: Query
    kind: ErrorKind
    message: str = ""
    phase: QueryPhase = field(default=QueryPhase.FAILED, init=False)


CoordinatorState = Union[Idle, TooShort, Debouncing, Loading, Settled, Failed]

IDLE = Idle()


@dataclass(frozen=True)
class CoordinatorSnapshot:
    """What the render layer receives on every change.

    ``items`` are the rows to show: the settled results, or the starter
    suggestions while the coordinator is idle.
    """
    state: CoordinatorState
    selected_index: int = -1
    selected_item: Optional[Any] = None
    starters: Tuple[Any, ...] = ()

    @property
    def items(self) -> Tuple[Any, ...]:
        if isinstance(self.state, Settled):
            return self.state.items
        if isinstance(self.state, Idle):
            return self.starters
        return ()
