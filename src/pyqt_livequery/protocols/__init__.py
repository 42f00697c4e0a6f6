"""
Backend contract and configuration.

ABC-based lookup backend contract (no duck typing), the result item every
backend produces, and the static configuration dataclasses.
"""

from .result_item import ResultItem
from .lookup_backend import LookupBackend
from .query_config import (
    QueryConfig,
    RemoteEndpointConfig,
    search_config,
    autosuggest_config,
    search_endpoint,
    autosuggest_endpoint,
)

__all__ = [
    "ResultItem",
    "LookupBackend",
    "QueryConfig",
    "RemoteEndpointConfig",
    "search_config",
    "autosuggest_config",
    "search_endpoint",
    "autosuggest_endpoint",
]
