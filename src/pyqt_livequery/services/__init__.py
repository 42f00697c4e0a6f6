"""
Service layer for live queries.

Backend selection, synthetic and remote backends, the query coordinator and
keyboard navigation over its results.
"""

from .backend_selector import BackendSelector
from .synthetic_backend import (
    SyntheticBackend,
    prefix_matcher,
    substring_matcher,
    default_item_factory,
)
from .remote_backend import RemoteBackend, parse_result_item
from .sample_data import (
    CHAT_HISTORY,
    SUGGESTION_PHRASES,
    create_search_backend,
    create_autosuggest_backend,
)
from .selection_cursor import SelectionCursor, NO_SELECTION
from .query_coordinator import QueryCoordinator
from .key_navigation import NavigationKey, KeyboardNavigator, navigation_key_for

__all__ = [
    "BackendSelector",
    "SyntheticBackend",
    "prefix_matcher",
    "substring_matcher",
    "default_item_factory",
    "RemoteBackend",
    "parse_result_item",
    "CHAT_HISTORY",
    "SUGGESTION_PHRASES",
    "create_search_backend",
    "create_autosuggest_backend",
    "SelectionCursor",
    "NO_SELECTION",
    "QueryCoordinator",
    "NavigationKey",
    "KeyboardNavigator",
    "navigation_key_for",
]
