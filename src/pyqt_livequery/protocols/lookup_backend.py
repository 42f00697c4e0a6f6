"""Lookup backend contract for pluggable result sources."""

from abc import ABC, abstractmethod
from typing import List

from pyqt_livequery.core.cancellation import CancellationToken
from pyqt_livequery.protocols.result_item import ResultItem


class LookupBackend(ABC):
    """
    Produces ranked results for a query string.

    Contract:
    - ``lookup`` runs on a worker thread and must not touch widgets.
    - Every implementation receives the token. Honoring it is best-effort:
      raise ``LookupCancelled`` (or return early) once it is signaled.
    - "No matches" is an empty list, never an exception.
    - Failures raise ``UpstreamError`` or ``LookupTimeoutError``.
    - ``starters`` follows the same rules; backends without starter
      suggestions keep the empty default.
    """

    name: str = "backend"
    is_synthetic: bool = False

    @abstractmethod
    def lookup(self, query: str, token: CancellationToken) -> List[ResultItem]:
        """Return items for query, best first."""
        ...

    def starters(self, token: CancellationToken) -> List[ResultItem]:
        """Suggestions to offer while the input is empty. None by default."""
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
