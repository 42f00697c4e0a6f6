"""Configuration for query coordinators and remote endpoints.

Both dataclasses are static: build them once (from code or a loaded mapping)
and pass them to the objects that need them.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from pyqt_livequery.core.exceptions import ConfigError

# External surface keys -> field names
_CAMEL_CASE_KEYS = {
    "minChars": "min_chars",
    "debounceDelayMs": "debounce_delay_ms",
    "maxResults": "max_results",
    "useSyntheticBackend": "use_synthetic_backend",
    "autoSelectFirst": "auto_select_first",
    "enableLogging": "enable_logging",
    "enablePerformanceMonitoring": "enable_performance_monitoring",
    "showStarters": "show_starters",
    "baseUrl": "base_url",
    "timeoutMs": "timeout_ms",
    "itemsKey": "items_key",
    "starterPath": "starter_path",
}


def _normalize_keys(cls, mapping: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(cls)}
    values = {}
    for key, value in mapping.items():
        name = _CAMEL_CASE_KEYS.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown {cls.__name__} key: {key!r}")
        values[name] = value
    return values


@dataclass(frozen=True)
class QueryConfig:
    """Behavior of one QueryCoordinator.

    Attributes:
        min_chars: Trimmed length below which no lookup is made
        debounce_delay_ms: Quiet period before a lookup is dispatched
        max_results: Items kept from each backend response
        use_synthetic_backend: Initial backend choice for BackendSelector.from_config
        auto_select_first: Highlight the first result on every new result set
        enable_logging: Log completed requests at INFO instead of DEBUG
        enable_performance_monitoring: Record dispatch-to-settle latency
        show_starters: Fetch starter suggestions while the input is empty
    """

    min_chars: int = 2
    debounce_delay_ms: int = 300
    max_results: int = 20
    use_synthetic_backend: bool = False
    auto_select_first: bool = False
    enable_logging: bool = True
    enable_performance_monitoring: bool = False
    show_starters: bool = False

    def __post_init__(self):
        if self.min_chars < 1:
            raise ConfigError(f"min_chars must be >= 1, got {self.min_chars}")
        if self.debounce_delay_ms < 0:
            raise ConfigError(f"debounce_delay_ms must be >= 0, got {self.debounce_delay_ms}")
        if self.max_results < 1:
            raise ConfigError(f"max_results must be >= 1, got {self.max_results}")

    @property
    def default_cursor_index(self) -> int:
        return 0 if self.auto_select_first else -1

    def with_overrides(self, **overrides) -> "QueryConfig":
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], base: "QueryConfig" = None) -> "QueryConfig":
        """Build a config from snake_case or camelCase keys over base (or defaults)."""
        values = _normalize_keys(cls, mapping)
        try:
            return replace(base, **values) if base is not None else cls(**values)
        except TypeError as e:
            raise ConfigError(str(e)) from e


def search_config(**overrides) -> QueryConfig:
    """Search-as-you-type: explicit Down-arrow engages the result list."""
    return QueryConfig(
        min_chars=2,
        debounce_delay_ms=300,
        max_results=20,
        auto_select_first=False,
    ).with_overrides(**overrides)


def autosuggest_config(**overrides) -> QueryConfig:
    """Suggestion-as-you-type: top suggestion is highlighted automatically."""
    return QueryConfig(
        min_chars=3,
        debounce_delay_ms=500,
        max_results=5,
        auto_select_first=True,
        show_starters=True,
    ).with_overrides(**overrides)


@dataclass(frozen=True)
class RemoteEndpointConfig:
    """Where and how RemoteBackend reaches its lookup endpoint.

    Attributes:
        base_url: Absolute API root
        path: Endpoint path appended to base_url
        method: "GET" (query string) or "POST" (JSON body)
        timeout_ms: Whole-request deadline, surfaced as LookupTimeoutError
        limit: Result limit sent to the server
        items_key: Response field holding the ranked list
        starter_path: Optional GET endpoint for empty-input suggestions
    """

    base_url: str = "http://localhost:3000/api"
    path: str = "/search"
    method: str = "GET"
    timeout_ms: int = 10000
    limit: int = 20
    items_key: str = "items"
    starter_path: Optional[str] = None

    def __post_init__(self):
        if self.method not in ("GET", "POST"):
            raise ConfigError(f"method must be GET or POST, got {self.method!r}")
        if self.timeout_ms <= 0:
            raise ConfigError(f"timeout_ms must be > 0, got {self.timeout_ms}")
        if self.limit < 1:
            raise ConfigError(f"limit must be >= 1, got {self.limit}")

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"

    @property
    def starter_url(self) -> Optional[str]:
        if self.starter_path is None:
            return None
        return f"{self.base_url.rstrip('/')}/{self.starter_path.lstrip('/')}"

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RemoteEndpointConfig":
        values = _normalize_keys(cls, mapping)
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(str(e)) from e


def search_endpoint(base_url: str = RemoteEndpointConfig.base_url) -> RemoteEndpointConfig:
    return RemoteEndpointConfig(base_url=base_url, path="/search", method="GET",
                                timeout_ms=10000, limit=20, items_key="items")


def autosuggest_endpoint(base_url: str = RemoteEndpointConfig.base_url) -> RemoteEndpointConfig:
    return RemoteEndpointConfig(base_url=base_url, path="/autosuggest", method="POST",
                                timeout_ms=5000, limit=5, items_key="suggestions",
                                starter_path="/autosuggest/starter")
