"""Human-readable logging of normalized transactions."""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional

from .constants import PASSWORD_MASK, REDACTED_FIELDS
from .http import flatten_params
from .models import NormalizedTransaction

LOGGER = logging.getLogger("elebase.diagnostics")


def stringify_params(params: Optional[Mapping[str, Any]]) -> str:
    """Render query params the way they are sent, with keys sorted and values unencoded."""
    pairs = flatten_params(params, sort=True)
    return "&".join(f"{key}={value}" for key, value in pairs)


def format_label(txn: NormalizedTransaction) -> str:
    """One-line label: `{METHOD} {path}?{query} ({status})`."""
    uri = txn.request.url
    query = stringify_params(txn.request.params)
    if query:
        uri = f"{uri}?{query}"
    return f"{txn.request.method} {uri} ({txn.response.status})"


def redact_body(data: Any) -> Any:
    """Return a copy of a request body with sensitive fields masked."""
    if not isinstance(data, Mapping):
        return data
    if not any(data.get(name) for name in REDACTED_FIELDS):
        return data
    redacted: Dict[str, Any] = dict(data)
    for name in REDACTED_FIELDS:
        if redacted.get(name):
            redacted[name] = PASSWORD_MASK
    return redacted


class DiagnosticsLogger:
    """Write normalized transactions to a logging sink.

    Args:
        logger: Destination logger (default: `elebase.diagnostics`).
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or LOGGER

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def log(self, txn: NormalizedTransaction) -> None:
        label = format_label(txn)
        request = txn.request

        if txn.error is not None:
            error = txn.error
            self._logger.error(
                "%s\n  error: %s(status=%s, headers=%s, details=%s)",
                label,
                type(error).__name__,
                error.status,
                error.headers,
                _error_details(error),
            )
            return

        self._logger.info(
            "%s\n  request: method=%s url=%s params=%s headers=%s data=%s",
            label,
            request.method,
            request.url,
            request.params,
            request.headers,
            redact_body(request.data),
        )
        self._logger.info(
            "%s\n  response: status=%s headers=%s data=%s",
            label,
            txn.response.status,
            dict(txn.response.headers),
            txn.response.data,
        )


def _error_details(error: Any) -> Dict[str, Any]:
    fields = ("id", "data", "code", "info", "type", "message")
    return {name: getattr(error, name) for name in fields if hasattr(error, name)}


__all__ = ["DiagnosticsLogger", "format_label", "redact_body", "stringify_params"]
