"""
Sample catalogs for offline development.

CHAT_HISTORY backs the chat search box, SUGGESTION_PHRASES backs the prompt
autosuggest box. The factories wire each table to the matching policy its UI
expects.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from pyqt_livequery.services.synthetic_backend import (
    SyntheticBackend,
    default_item_factory,
    prefix_matcher,
    substring_matcher,
)

SEARCH_LATENCY_MS = 200
SEARCH_JITTER_MS = 1000       # 200-1200ms, wide enough to reorder responses
AUTOSUGGEST_LATENCY_MS = 150
AUTOSUGGEST_LIMIT = 5


def _ago(days: float = 0, hours: float = 0) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days, hours=hours)).isoformat()


CHAT_HISTORY: List[Dict[str, object]] = [
    {"id": "1", "title": "How to implement search functionality", "createdAt": _ago(days=2),
     "visibility": "private", "messageCount": 15,
     "lastMessage": "Let's implement the search feature step by step", "lastMessageAt": _ago(days=1)},
    {"id": "2", "title": "Search optimization techniques", "createdAt": _ago(days=5),
     "visibility": "public", "messageCount": 8,
     "lastMessage": "We should use PostgreSQL full-text search", "lastMessageAt": _ago(days=3)},
    {"id": "3", "title": "Database indexing strategies", "createdAt": _ago(days=7),
     "visibility": "private", "messageCount": 12,
     "lastMessage": "GIN indexes work great for full-text search", "lastMessageAt": _ago(days=4)},
    {"id": "4", "title": "React search implementation", "createdAt": _ago(days=1),
     "visibility": "public", "messageCount": 6,
     "lastMessage": "Using AbortController for request cancellation", "lastMessageAt": _ago(hours=2)},
    {"id": "5", "title": "Race condition prevention", "createdAt": _ago(days=3),
     "visibility": "private", "messageCount": 10,
     "lastMessage": "Request ID tracking prevents stale results", "lastMessageAt": _ago(days=1)},
    {"id": "6", "title": "Next.js API routes", "createdAt": _ago(days=4),
     "visibility": "public", "messageCount": 7,
     "lastMessage": "Creating search endpoints with proper error handling", "lastMessageAt": _ago(hours=6)},
    {"id": "7", "title": "PostgreSQL full-text search", "createdAt": _ago(days=6),
     "visibility": "private", "messageCount": 14,
     "lastMessage": "Using tsvector for efficient text search", "lastMessageAt": _ago(days=2)},
    {"id": "8", "title": "TypeScript best practices", "createdAt": _ago(days=8),
     "visibility": "public", "messageCount": 9,
     "lastMessage": "Proper type definitions for search results", "lastMessageAt": _ago(days=5)},
    {"id": "9", "title": "UI/UX design patterns", "createdAt": _ago(days=10),
     "visibility": "private", "messageCount": 11,
     "lastMessage": "Creating intuitive search interfaces", "lastMessageAt": _ago(days=7)},
    {"id": "10", "title": "Performance optimization", "createdAt": _ago(days=12),
     "visibility": "public", "messageCount": 13,
     "lastMessage": "Debouncing and request cancellation for better UX", "lastMessageAt": _ago(days=9)},
]

# (id, text, type, confidence)
_PHRASES = [
    ("1", "tell me about", "completion", 0.9),
    ("2", "tell me how to", "completion", 0.88),
    ("3", "tell me more about", "completion", 0.85),
    ("3a", "tell me more about the benefits of", "completion", 0.8),
    ("3b", "tell me more about how to", "completion", 0.8),
    ("3c", "tell me more about the differences between", "completion", 0.8),
    ("3d", "tell me more about the advantages of", "completion", 0.8),
    ("3e", "tell me more about the process of", "completion", 0.8),
    ("3f", "tell me more about the history of", "completion", 0.8),
    ("3g", "tell me more about the features of", "completion", 0.8),
    ("4", "tell me the difference between", "completion", 0.82),
    ("5", "tell me why", "completion", 0.7),
    ("6", "what are the benefits of", "question", 0.9),
    ("6a", "what are the benefits of using", "question", 0.85),
    ("6b", "what are the benefits of implementing", "question", 0.85),
    ("6c", "what are the benefits of adopting", "question", 0.85),
    ("7", "what is the best way to", "question", 0.88),
    ("8", "what should I know about", "question", 0.85),
    ("9", "what are the advantages of", "question", 0.82),
    ("10", "what is the difference between", "question", 0.8),
    ("11", "how does", "question", 0.9),
    ("12", "how to", "question", 0.88),
    ("13", "how can I", "question", 0.85),
    ("14", "how do I", "question", 0.82),
    ("15", "how would you", "question", 0.8),
    ("16", "explain how to", "command", 0.9),
    ("17", "explain the concept of", "command", 0.88),
    ("18", "explain why", "command", 0.85),
    ("19", "explain the difference between", "command", 0.82),
    ("20", "help me with", "completion", 0.9),
    ("21", "help me understand", "completion", 0.88),
    ("22", "help me create", "completion", 0.85),
    ("23", "help me write", "completion", 0.82),
    ("24", "create a", "command", 0.9),
    ("25", "create an example of", "command", 0.88),
    ("26", "create a function that", "command", 0.85),
    ("27", "create a script to", "command", 0.82),
    ("28", "write a", "command", 0.9),
    ("29", "write code to", "command", 0.88),
    ("30", "write a function that", "command", 0.85),
    ("31", "write a script for", "command", 0.82),
    ("32", "show me how to", "suggestion", 0.9),
    ("33", "show me an example of", "suggestion", 0.88),
    ("34", "show me the steps to", "suggestion", 0.85),
    ("35", "compare", "suggestion", 0.9),
    ("36", "compare the pros and cons of", "suggestion", 0.88),
    ("37", "compare these options", "suggestion", 0.85),
    ("38", "generate a", "command", 0.9),
    ("39", "generate code for", "command", 0.88),
    ("40", "generate a list of", "command", 0.85),
    ("41", "debug this", "suggestion", 0.9),
    ("42", "debug my code", "suggestion", 0.88),
    ("43", "debug the issue with", "suggestion", 0.85),
    ("44", "optimize this", "suggestion", 0.9),
    ("45", "optimize performance", "suggestion", 0.88),
    ("46", "optimize the code", "suggestion", 0.85),
    ("47", "implement", "command", 0.9),
    ("48", "implement a solution for", "command", 0.88),
    ("49", "implement error handling", "command", 0.85),
    ("50", "test this", "suggestion", 0.9),
    ("51", "test the functionality", "suggestion", 0.88),
    ("52", "test my code", "suggestion", 0.85),
]

SUGGESTION_PHRASES: List[Dict[str, object]] = [
    {"id": pid, "text": text, "type": kind, "confidence": confidence}
    for pid, text, kind, confidence in _PHRASES
]


def create_search_backend(latency_ms: int = SEARCH_LATENCY_MS,
                          jitter_ms: int = SEARCH_JITTER_MS,
                          seed: Optional[int] = None) -> SyntheticBackend:
    """Chat-history search: substring match on title or last message."""
    return SyntheticBackend(
        records=CHAT_HISTORY,
        matcher=substring_matcher(title_field="title", secondary_fields=("lastMessage",)),
        item_factory=default_item_factory("title", kind="chat"),
        latency_ms=latency_ms,
        jitter_ms=jitter_ms,
        name="synthetic-search",
        seed=seed,
    )


def create_autosuggest_backend(latency_ms: int = AUTOSUGGEST_LATENCY_MS,
                               limit: int = AUTOSUGGEST_LIMIT) -> SyntheticBackend:
    """Prompt autosuggest: strict prefix match ranked by confidence."""
    return SyntheticBackend(
        records=SUGGESTION_PHRASES,
        matcher=prefix_matcher(field="text", score_field="confidence", exclude_exact=True),
        item_factory=default_item_factory("text", kind_field="type"),
        latency_ms=latency_ms,
        limit=limit,
        name="synthetic-autosuggest",
    )
