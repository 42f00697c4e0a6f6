"""HTTP lookup backend.

One request per lookup. The server filters and ranks; this module only maps
the JSON response to ResultItems and transport failures to lookup errors:

    GET  <base>/search?q=<text>&limit=<n>   -> {"items": [...], "total": n, "query": "..."}
    POST <base>/autosuggest {"text", "limit"} -> {"suggestions": [...]}
    GET  <base>/autosuggest/starter?maxSuggestions=<n> -> {"suggestions": [...]}
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

import httpx

from pyqt_livequery.core.cancellation import CancellationToken
from pyqt_livequery.core.exceptions import LookupCancelled, LookupTimeoutError, UpstreamError
from pyqt_livequery.protocols.lookup_backend import LookupBackend
from pyqt_livequery.protocols.query_config import RemoteEndpointConfig
from pyqt_livequery.protocols.result_item import ResultItem

logger = logging.getLogger(__name__)

ItemParser = Callable[[Mapping[str, Any]], ResultItem]


def parse_result_item(raw: Mapping[str, Any]) -> ResultItem:
    """
    Map one server record to a ResultItem.

    Accepts both the search shape ({id, title, score}) and the suggestion
    shape ({id, text, type, confidence}).

    Raises:
        UpstreamError: If the record has no id or no label
    """
    if not isinstance(raw, Mapping):
        raise UpstreamError(f"Result item is not an object: {raw!r}")

    item_id = raw.get("id")
    label = raw.get("title", raw.get("text", raw.get("label")))
    if item_id is None or label is None:
        raise UpstreamError(f"Result item missing id or label: {raw!r}")

    score = raw.get("score", raw.get("confidence", raw.get("relevanceScore", 0.0)))
    try:
        score = float(score)
    except (TypeError, ValueError):
        raise UpstreamError(f"Result item has non-numeric score: {score!r}")

    return ResultItem(
        id=str(item_id),
        label=str(label),
        score=score,
        kind=str(raw.get("kind", raw.get("type", "result"))),
        payload=dict(raw),
    )


class RemoteBackend(LookupBackend):
    """
    Lookup backend that calls a JSON HTTP endpoint.

    Usage:
        backend = RemoteBackend(search_endpoint("https://chat.example.com/api"))
        selector = BackendSelector(backend)

    Cancellation is checked before and after the request; the request itself
    runs to completion or to its timeout.
    """

    is_synthetic = False

    def __init__(self,
                 endpoint: Optional[RemoteEndpointConfig] = None,
                 client: Optional[httpx.Client] = None,
                 item_parser: ItemParser = parse_result_item,
                 name: Optional[str] = None):
        """
        Initialize remote backend.

        Args:
            endpoint: Endpoint settings (defaults to GET /search)
            client: Shared httpx client; one is created when omitted
            item_parser: Maps a raw record to a ResultItem
            name: Name used in logs (defaults to "remote:<path>")
        """
        self.endpoint = endpoint or RemoteEndpointConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.endpoint.timeout_s)
        self._item_parser = item_parser
        self.name = name or f"remote:{self.endpoint.path}"

    def lookup(self, query: str, token: CancellationToken) -> List[ResultItem]:
        return self._fetch(query, lambda: self._send(query), token)

    def starters(self, token: CancellationToken) -> List[ResultItem]:
        """GET the starter endpoint, or nothing if the endpoint has none."""
        if self.endpoint.starter_url is None:
            return []
        return self._fetch("<starters>", self._send_starters, token)

    def close(self) -> None:
        """Close the client if this backend created it."""
        if self._owns_client:
            self._client.close()

    def _fetch(self, query: str, send: Callable[[], httpx.Response],
               token: CancellationToken) -> List[ResultItem]:
        token.raise_if_cancelled(query)

        try:
            response = send()
        except httpx.TimeoutException as e:
            if token.is_cancelled:
                raise LookupCancelled(query) from e
            raise LookupTimeoutError(
                f"{self.name}: no response within {self.endpoint.timeout_ms}ms"
            ) from e
        except httpx.HTTPError as e:
            if token.is_cancelled:
                raise LookupCancelled(query) from e
            raise UpstreamError(f"{self.name}: transport error: {e}") from e

        token.raise_if_cancelled(query)
        return self._parse_response(response)

    def _send(self, query: str) -> httpx.Response:
        endpoint = self.endpoint
        if endpoint.method == "POST":
            return self._client.post(
                endpoint.url,
                json={"text": query, "limit": endpoint.limit},
                timeout=endpoint.timeout_s,
            )
        return self._client.get(
            endpoint.url,
            params={"q": query, "limit": endpoint.limit},
            timeout=endpoint.timeout_s,
        )

    def _send_starters(self) -> httpx.Response:
        endpoint = self.endpoint
        return self._client.get(
            endpoint.starter_url,
            params={"maxSuggestions": endpoint.limit},
            timeout=endpoint.timeout_s,
        )

    def _parse_response(self, response: httpx.Response) -> List[ResultItem]:
        if not response.is_success:
            raise UpstreamError(
                f"{self.name}: HTTP {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"{self.name}: response is not JSON") from e

        if not isinstance(body, Mapping):
            raise UpstreamError(f"{self.name}: response is not an object")

        raw_items = body.get(self.endpoint.items_key)
        if raw_items is None:
            raw_items = []
        if not isinstance(raw_items, list):
            raise UpstreamError(f"{self.name}: {self.endpoint.items_key!r} is not a list")

        items = [self._item_parser(raw) for raw in raw_items]
        logger.debug(f"{self.name}: {len(items)} items (server total={body.get('total')})")
        return items
