from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

import requests
from requests.structures import CaseInsensitiveDict

from .. import __version__
from .auth import serialize_body
from .models import TransportRequest, TransportResponse

LOGGER = logging.getLogger(__name__)

USER_AGENT = f"elebase/py-sdk/{__version__}"


def flatten_params(params: Optional[Mapping[str, Any]], *, sort: bool = False) -> List[Tuple[str, str]]:
    """Flatten query params into bracketed `(key, value)` pairs.

    Nested mappings become `key[sub]` and sequences become `key[0]`, `key[1]`.
    `None` values are dropped and booleans render as `true`/`false`.

    Example:
        >>> flatten_params({"filter": {"type": "post"}, "ids": ["a", "b"]})
        [('filter[type]', 'post'), ('ids[0]', 'a'), ('ids[1]', 'b')]
    """
    pairs: List[Tuple[str, str]] = []
    if isinstance(params, Mapping):
        for key in _keys(params, sort):
            _flatten(str(key), params[key], pairs, sort)
    return pairs


def _keys(mapping: Mapping[Any, Any], sort: bool) -> List[Any]:
    return sorted(mapping, key=str) if sort else list(mapping)


def _flatten(prefix: str, value: Any, pairs: List[Tuple[str, str]], sort: bool) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key in _keys(value, sort):
            _flatten(f"{prefix}[{key}]", value[key], pairs, sort)
    elif isinstance(value, (list, tuple)):
        for position, item in enumerate(value):
            _flatten(f"{prefix}[{position}]", item, pairs, sort)
    elif isinstance(value, bool):
        pairs.append((prefix, "true" if value else "false"))
    else:
        pairs.append((prefix, str(value)))


# HTTP Client Protocol
class HTTPClient(Protocol):
    def send(self, request: TransportRequest) -> TransportResponse:
        ...


class RequestsHTTPClient:
    """Default transport built on a `requests.Session`.

    Never raises on error statuses; branching on status belongs to the caller.
    Network failures propagate as `requests` exceptions.

    Args:
        base_url: Address every request path is appended to.
        timeout: Timeout in milliseconds, 0 for none.
        headers: Default headers sent with every request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 0,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout / 1000.0 if timeout and timeout > 0 else None
        self._headers: Dict[str, str] = dict(headers or {})
        self._headers["Accept"] = "application/json"
        self._headers["User-Agent"] = USER_AGENT
        self._session: Optional[requests.Session] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> Optional[float]:
        """Timeout in seconds as passed to `requests`."""
        return self._timeout

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self._headers)
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "RequestsHTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def send(self, request: TransportRequest) -> TransportResponse:
        session = self._get_session()
        url = f"{self._base_url}{request.url}"
        headers = CaseInsensitiveDict(request.headers)
        body = serialize_body(request.data)
        payload: Optional[bytes] = None
        if body is not None:
            # Send exactly the JSON string that was signed
            payload = body.encode("utf-8")
            headers.setdefault("Content-Type", "application/json")

        response: Optional[requests.Response] = None
        try:
            response = session.request(
                request.method,
                url,
                headers=headers,
                params=flatten_params(request.params),
                data=payload,
                timeout=self._timeout,
            )
            return TransportResponse(
                status=response.status_code,
                headers=response.headers,
                data=_decode_body(response),
            )
        except requests.exceptions.Timeout as exc:
            raise requests.exceptions.Timeout(
                f"Request timed out after {self._timeout} seconds while connecting to {url}"
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise requests.exceptions.ConnectionError(
                f"Failed to establish connection to {url}: {exc}"
            ) from exc
        finally:
            # Release the connection back to the pool
            if response is not None:
                response.close()


def _decode_body(response: requests.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        LOGGER.debug("Non-JSON response body (status %s)", response.status_code)
        return response.text


__all__ = ["HTTPClient", "RequestsHTTPClient", "USER_AGENT", "flatten_params"]
