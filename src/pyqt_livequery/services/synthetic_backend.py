"""
In-memory lookup backend with artificial latency.

Filters a static record table the same way on every platform, so tests and
offline development see exactly the behavior a remote backend would give,
minus the network. Matching policy is pluggable: autosuggest-style UIs use
strict prefix matching, search-style UIs use tiered substring relevance.
"""

import logging
import random
import threading
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from pyqt_livequery.core.cancellation import CancellationToken
from pyqt_livequery.core.exceptions import LookupCancelled
from pyqt_livequery.core.performance_monitor import timer
from pyqt_livequery.protocols.lookup_backend import LookupBackend
from pyqt_livequery.protocols.result_item import ResultItem

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]
# Returns a score for a matching record, None otherwise
Matcher = Callable[[Record, str], Optional[float]]
ItemFactory = Callable[[Record, float], ResultItem]


def prefix_matcher(field: str = "text", score_field: str = "confidence",
                   exclude_exact: bool = True) -> Matcher:
    """
    Strict case-insensitive prefix match on one field.

    Exact matches are excluded by default: suggesting what the user already
    typed is noise. Score is the record's own confidence.
    """
    def match(record: Record, query: str) -> Optional[float]:
        needle = query.strip().lower()
        value = str(record.get(field, "")).lower()
        if not needle or not value.startswith(needle):
            return None
        if exclude_exact and value == needle:
            return None
        return float(record.get(score_field, 0.0))
    return match


def substring_matcher(title_field: str = "title",
                      secondary_fields: Sequence[str] = ("lastMessage",)) -> Matcher:
    """
    Case-insensitive substring match with tiered relevance.

    Tiers:
        3.0 - title starts with the query
        2.0 - title contains the query
        1.0 - only a secondary field contains the query
    """
    def match(record: Record, query: str) -> Optional[float]:
        needle = query.strip().lower()
        if not needle:
            return None
        title = str(record.get(title_field) or "").lower()
        if title.startswith(needle):
            return 3.0
        if needle in title:
            return 2.0
        for name in secondary_fields:
            if needle in str(record.get(name) or "").lower():
                return 1.0
        return None
    return match


def default_item_factory(label_field: str, kind: str = "result",
                         kind_field: Optional[str] = None) -> ItemFactory:
    def build(record: Record, score: float) -> ResultItem:
        return ResultItem(
            id=str(record.get("id")),
            label=str(record.get(label_field, "")),
            score=score,
            kind=str(record.get(kind_field, kind)) if kind_field else kind,
            payload=record,
        )
    return build


class SyntheticBackend(LookupBackend):
    """
    Static-table backend with fixed or jittered latency.

    Usage:
        backend = SyntheticBackend(
            records=SUGGESTION_PHRASES,
            matcher=prefix_matcher(),
            item_factory=default_item_factory("text", kind_field="type"),
            latency_ms=150,
        )
    """

    is_synthetic = True

    def __init__(self,
                 records: Sequence[Record],
                 matcher: Matcher,
                 item_factory: ItemFactory,
                 latency_ms: int = 150,
                 jitter_ms: int = 0,
                 limit: Optional[int] = None,
                 name: str = "synthetic",
                 seed: Optional[int] = None):
        """
        Initialize synthetic backend.

        Args:
            records: Static table searched on every lookup
            matcher: Scores a record against the query, None to drop it
            item_factory: Builds a ResultItem from a matching record and score
            latency_ms: Base artificial latency
            jitter_ms: Extra random latency in [0, jitter_ms)
            limit: Optional cap applied by the backend itself
            name: Name used in logs
            seed: Seed for the jitter generator (deterministic tests)
        """
        self.records: Tuple[Record, ...] = tuple(records)
        self.matcher = matcher
        self.item_factory = item_factory
        self.latency_ms = latency_ms
        self.jitter_ms = jitter_ms
        self.limit = limit
        self.name = name
        self._random = random.Random(seed)
        self._lock = threading.Lock()
        self.call_count = 0

    def lookup(self, query: str, token: CancellationToken) -> List[ResultItem]:
        with self._lock:
            self.call_count += 1
        self._simulate_latency(query, token)
        with timer(f"{self.name} filter", threshold_ms=5.0, query=query):
            return self.filter(query)

    def filter(self, query: str) -> List[ResultItem]:
        """Rank matching records, best first; ties keep table order."""
        if not query.strip():
            return []

        scored = []
        for record in self.records:
            score = self.matcher(record, query)
            if score is not None:
                scored.append(self.item_factory(record, score))

        scored.sort(key=lambda item: item.score, reverse=True)
        if self.limit is not None:
            scored = scored[:self.limit]
        return scored

    def starters(self, token: CancellationToken) -> List[ResultItem]:
        self._simulate_latency("<starters>", token)
        return self.starter_items()

    def starter_items(self, limit: int = 3, min_score: float = 0.8,
                      score_field: str = "confidence") -> List[ResultItem]:
        """Suggestions for an empty box: high-confidence records in table order."""
        starters = [
            self.item_factory(record, float(record.get(score_field, 0.0)))
            for record in self.records
            if float(record.get(score_field, 0.0)) > min_score
        ]
        return starters[:limit]

    def _simulate_latency(self, query: str, token: CancellationToken) -> None:
        delay_ms = self.latency_ms
        if self.jitter_ms > 0:
            delay_ms += self._random.uniform(0, self.jitter_ms)
        if token.wait(delay_ms / 1000):
            logger.debug(f"{self.name}: lookup for {query!r} cancelled during latency")
            raise LookupCancelled(query)
