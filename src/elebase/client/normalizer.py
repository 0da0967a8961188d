"""Response normalization for Elebase API calls.

Maps a raw `TransportResponse` to a `NormalizedTransaction`: an echo of the
request that was sent, the response with its `data` envelope unwrapped, and a
`RequestError` when the status is above 304. Content and geo API error bodies
are read into their own error types.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional

from .constants import ERROR_STATUS_THRESHOLD, USAGE_LIMIT_HEADERS
from .models import (
    ContentAPIError,
    GeoAPIError,
    NormalizedResponse,
    NormalizedTransaction,
    RequestEcho,
    RequestError,
    Target,
    TransportRequest,
    TransportResponse,
)

LOGGER = logging.getLogger(__name__)


def is_error_status(status: int) -> bool:
    return status > ERROR_STATUS_THRESHOLD


def _lowercase_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    # Later keys win when two names differ only by case
    lowered: Dict[str, Any] = {}
    for key, value in (headers or {}).items():
        lowered[str(key).lower()] = value
    return lowered


def _usage_limit_headers(headers: Mapping[str, Any]) -> Dict[str, str]:
    wanted = {name.lower(): name for name in USAGE_LIMIT_HEADERS}
    copied: Dict[str, str] = {}
    for key, value in headers.items():
        name = wanted.get(str(key).lower())
        if name and value:
            copied[name] = value
    return copied


def build_request_echo(request: TransportRequest, context: Mapping[str, Any]) -> RequestEcho:
    """Echo what was actually sent, with the caller's context attached."""
    return RequestEcho(
        method=request.method.upper(),
        url=request.url,
        headers=_lowercase_headers(request.headers),
        params=request.params,
        data=request.data,
        config=dict(context),
    )


def build_response(raw: TransportResponse) -> NormalizedResponse:
    """Unwrap a `{"data": {...}}` envelope one level; non-object bodies become `{}`."""
    body = raw.data if isinstance(raw.data, (dict, list)) else {}
    data = body.get("data") if isinstance(body, dict) else None
    return NormalizedResponse(
        status=raw.status,
        headers=raw.headers if raw.headers is not None else {},
        data=data if isinstance(data, (dict, list)) else body,
        body=body,
    )


def build_error(response: NormalizedResponse, target: Target) -> RequestError:
    """Build the error for an already normalized error response.

    Args:
        response: Normalized response; its raw `body` carries the error object.
        target: Service whose error shape applies.
    """
    body = response.body if isinstance(response.body, dict) else {}
    error = body.get("error")
    error = error if isinstance(error, dict) else {}
    headers = _usage_limit_headers(response.headers)

    if target is Target.GEO:
        return GeoAPIError(
            status=response.status,
            code=error.get("code"),
            info=error.get("info"),
            error_type=error.get("type"),
            headers=headers,
        )
    return ContentAPIError(
        status=response.status,
        error_id=error.get("id"),
        data=error.get("data"),
        headers=headers,
    )


def normalize(
    raw: TransportResponse,
    request: TransportRequest,
    context: Mapping[str, Any],
    target: Target = Target.API,
) -> NormalizedTransaction:
    """Normalize one transport round trip.

    Args:
        raw: Response returned by the transport.
        request: Request that was sent.
        context: Caller context echoed on the request.
        target: Service the request was sent to.

    Returns:
        NormalizedTransaction; `error` is set only when the status is above 304.
    """
    response = build_response(raw)
    error = build_error(response, target) if is_error_status(response.status) else None
    if error is not None:
        LOGGER.debug("%s %s failed with status %s", request.method, request.url, response.status)
    return NormalizedTransaction(
        request=build_request_echo(request, context),
        response=response,
        error=error,
    )


__all__ = ["normalize", "build_request_echo", "build_response", "build_error", "is_error_status"]
