"""Result item shared by every lookup backend."""

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class ResultItem:
    """One ranked lookup result.

    The coordinator only orders and limits items; ``payload`` carries the
    backend's original record for the render layer.

    Attributes:
        id: Stable identifier within one backend
        label: Display text (chat title, suggestion text)
        score: Ranking score, higher first
        kind: Backend-defined category ("chat", "completion", "question", ...)
        payload: Original record
    """

    id: str
    label: str
    score: float = 0.0
    kind: str = "result"
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)
