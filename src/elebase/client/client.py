from __future__ import annotations
import dataclasses
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from .builder import build_request
from .diagnostics import DiagnosticsLogger
from .http import HTTPClient, RequestsHTTPClient
from .models import ClientConfig, NormalizedResponse, RequestOptions, Target
from .normalizer import normalize

LOGGER = logging.getLogger(__name__)


# Main client class for interacting with the Elebase content and geo APIs
class APIClient:
    def __init__(
        self,
        config: ClientConfig,
        http_client: Optional[HTTPClient] = None,
        diagnostics: Optional[DiagnosticsLogger] = None,
    ):
        self._config = config
        # HTTP client - track if we own it for cleanup
        self._owns_http_client = http_client is None
        self._http_client = http_client or RequestsHTTPClient(
            config.base_url, timeout=config.timeout, headers=config.headers
        )
        self._diagnostics = diagnostics or DiagnosticsLogger()

    def close(self) -> None:
        if self._owns_http_client and hasattr(self._http_client, "close"):
            self._http_client.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def target(self) -> Target:
        return self._config.target

    def get(self, path: str, **options: Any) -> NormalizedResponse:
        """Send a GET request.

        Args:
            path: API endpoint path, e.g. `/entries`.
            **options: `params`, `headers`, `locales`, `user`, `first`.
        """
        return self._send_request("GET", path, **options)

    def post(self, path: str, **options: Any) -> NormalizedResponse:
        """Send a POST request. `data` is required."""
        return self._send_request("POST", path, **options)

    def put(self, path: str, **options: Any) -> NormalizedResponse:
        """Send a PUT request. `data` is required."""
        return self._send_request("PUT", path, **options)

    def delete(self, path: str, **options: Any) -> NormalizedResponse:
        """Send a DELETE request."""
        return self._send_request("DELETE", path, **options)

    def create(self, path: str, **options: Any) -> NormalizedResponse:
        """Alias of `post`."""
        return self.post(path, **options)

    def update(self, path: str, **options: Any) -> NormalizedResponse:
        """Alias of `put`."""
        return self.put(path, **options)

    # Build, send, normalize, then raise or return
    def _send_request(
        self,
        method: str,
        path: str,
        *,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        locales: Optional[Sequence[str]] = None,
        user: Optional[str] = None,
        first: bool = False,
        **ignored: Any,
    ) -> NormalizedResponse:
        if ignored:
            LOGGER.debug("Ignoring unknown request options: %s", ", ".join(sorted(ignored)))
        options = RequestOptions(
            method=method,
            path=path,
            data=data,
            params=params,
            headers=headers,
            locales=locales,
            user=user,
            first=first,
        )
        request = build_request(self._config, options)
        raw = self._http_client.send(request)
        txn = normalize(raw, request, options.context(self.target), self.target)

        if self._config.logging:
            self._diagnostics.log(txn)

        if txn.error is not None:
            raise txn.error

        response = txn.response
        # First-mode only unwraps content API list envelopes
        if (
            first is True
            and self.target is Target.API
            and isinstance(response.data, dict)
            and isinstance(response.data.get("index"), list)
        ):
            index = response.data["index"]
            response = dataclasses.replace(response, data=index[0] if index else None)
        return response


def create_client(
    config: Union[ClientConfig, Mapping[str, Any], None] = None,
    target: Union[Target, str] = Target.API,
    *,
    http_client: Optional[HTTPClient] = None,
    diagnostics: Optional[DiagnosticsLogger] = None,
) -> APIClient:
    """Validate options and return a client for the given target.

    Raises:
        ConfigValidationError: If the options are invalid.
    """
    if not isinstance(config, ClientConfig):
        config = ClientConfig.create(target, **dict(config or {}))
    LOGGER.debug("Created %s client for %s", config.target.value, config.base_url)
    return APIClient(config, http_client=http_client, diagnostics=diagnostics)


__all__ = ["APIClient", "create_client"]
