"""Request construction for Elebase API calls.

Turns a `RequestOptions` description into a `TransportRequest`: validates the
path and body, normalizes the path, and injects authentication, locale and
default phase filters depending on the target service.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Sequence

from requests.structures import CaseInsensitiveDict

from .auth import authorization_header
from .constants import BODY_METHODS, ENTRIES_PATH, REQUEST_METHODS
from .models import ClientConfig, RequestOptions, RequestValidationError, Target, TransportRequest

LOGGER = logging.getLogger(__name__)

INVALID_PATH_MESSAGE = "Invalid API endpoint path. Examples: `/entries`, `/geo/feature/types`"
INVALID_DATA_MESSAGE = "Missing or invalid `data` property in request configuration object"


def normalize_path(path: Any) -> str:
    """Validate an endpoint path and return it as `/path` without a trailing slash.

    Raises:
        RequestValidationError: If the path is empty, not a string or absolute.
    """
    url = path.strip() if isinstance(path, str) else ""
    if not url or url.lower().startswith("http"):
        raise RequestValidationError(INVALID_PATH_MESSAGE)
    if not url.startswith("/"):
        url = "/" + url
    if url.endswith("/"):
        url = url[:-1]
    return url


def _normalize_method(method: Any) -> str:
    verb = method.upper() if isinstance(method, str) else ""
    if verb not in REQUEST_METHODS:
        raise RequestValidationError(f"Unsupported request method: {method!r}")
    return verb


def _locale_header(locales: Sequence[str]) -> str:
    return ",".join(str(locale).strip() for locale in locales)


def _phase_missing(params: Mapping[str, Any]) -> bool:
    return params.get("phase") in (None, "")


def build_request(config: ClientConfig, options: RequestOptions) -> TransportRequest:
    """Build the transport request for one call.

    Args:
        config: Client configuration.
        options: Per-call request description. Never mutated.

    Returns:
        TransportRequest with auth, locale and default filter headers/params.

    Raises:
        RequestValidationError: If the method, path or body is invalid.
    """
    method = _normalize_method(options.method)

    data: Any = None
    if method in BODY_METHODS:
        if isinstance(options.data, Mapping):
            data = dict(options.data)
        elif isinstance(options.data, (list, tuple)) and config.target is Target.API:
            # Geo bodies carry the token, so only the content API takes arrays
            data = list(options.data)
        else:
            raise RequestValidationError(INVALID_DATA_MESSAGE)

    url = normalize_path(options.path)
    params: Dict[str, Any] = dict(options.params) if isinstance(options.params, Mapping) else {}
    headers: CaseInsensitiveDict = CaseInsensitiveDict()

    if config.target is Target.GEO:
        # Geo API takes the plain token instead of an Authorization header
        if data is not None:
            data["token"] = config.token
        else:
            params["token"] = config.token
    else:
        locales = options.locales if isinstance(options.locales, (list, tuple)) else config.locales
        user = options.user if isinstance(options.user, str) else config.user

        headers["Accept-Language"] = _locale_header(locales)
        headers["Authorization"] = authorization_header(config, data, user)

        if url == ENTRIES_PATH and _phase_missing(params) and config.phases:
            params["phase"] = ",".join(str(phase) for phase in config.phases)

    if isinstance(options.headers, Mapping):
        headers.update(options.headers)

    LOGGER.debug("Built %s %s request (target=%s)", method, url, config.target.value)
    return TransportRequest(method=method, url=url, headers=headers, params=params, data=data)


__all__ = ["build_request", "normalize_path", "INVALID_PATH_MESSAGE", "INVALID_DATA_MESSAGE"]
