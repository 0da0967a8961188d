"""Python client for the Elebase content and geo APIs.

Available entry points:
- api: client for the project-scoped content API
- geo: client for the geo API
- auth: Authorization header signing helpers
"""

from __future__ import annotations

__version__ = "1.0.0"

from typing import Any

from .client import (
    APIClient,
    ClientConfig,
    ConfigValidationError,
    ContentAPIError,
    DiagnosticsLogger,
    ElebaseError,
    GeoAPIError,
    RequestError,
    RequestValidationError,
    Target,
    create_client,
)
from .client import auth


def api(**options: Any) -> APIClient:
    """Return a content API client, e.g. `api(token="...", project="...")`."""
    diagnostics = options.pop("diagnostics", None)
    http_client = options.pop("http_client", None)
    return create_client(options, Target.API, http_client=http_client, diagnostics=diagnostics)


def geo(**options: Any) -> APIClient:
    """Return a geo API client, e.g. `geo(token="...")`."""
    diagnostics = options.pop("diagnostics", None)
    http_client = options.pop("http_client", None)
    return create_client(options, Target.GEO, http_client=http_client, diagnostics=diagnostics)


__all__ = [
    "__version__",
    "api",
    "geo",
    "auth",
    "APIClient",
    "ClientConfig",
    "DiagnosticsLogger",
    "Target",
    "create_client",
    "ElebaseError",
    "ConfigValidationError",
    "RequestValidationError",
    "RequestError",
    "ContentAPIError",
    "GeoAPIError",
]
