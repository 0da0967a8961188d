"""Elebase API Client Package.

This package provides a small, testable interface to the Elebase content and
geo APIs with support for:
- Basic (token) and HMAC (key pair) request signing
- Locale and default entry-phase injection
- A single error taxonomy for both services' error bodies
- Dependency injection for the HTTP transport and the diagnostics sink

Example usage:
    >>> from elebase.client import create_client
    >>> client = create_client({"token": "your-token", "project": "your-project"})
    >>> client.get("/entries", params={"limit": 1}, first=True).data
"""

from __future__ import annotations

from .auth import authorization_header, serialize_body, sign_basic, sign_hmac
from .builder import build_request, normalize_path
from .client import APIClient, create_client
from .constants import (
    API_VERSIONS,
    CONTENT_BASE_URL,
    DEFAULT_TIMEOUT_MS,
    ENTRY_PHASES,
    GEO_BASE_URL,
    PASSWORD_MASK,
    USAGE_LIMIT_HEADERS,
)
from .diagnostics import DiagnosticsLogger, format_label, redact_body
from .http import HTTPClient, RequestsHTTPClient
from .models import (
    ClientConfig,
    ConfigValidationError,
    ContentAPIError,
    Credential,
    ElebaseError,
    GeoAPIError,
    KeyPairCredential,
    NormalizedResponse,
    NormalizedTransaction,
    RequestEcho,
    RequestError,
    RequestOptions,
    RequestValidationError,
    Target,
    TokenCredential,
    TransportRequest,
    TransportResponse,
)
from .normalizer import normalize

__all__ = [
    # Main client
    "APIClient",
    "create_client",
    # Transport
    "HTTPClient",
    "RequestsHTTPClient",
    # Pipeline stages
    "build_request",
    "normalize_path",
    "normalize",
    "DiagnosticsLogger",
    "format_label",
    "redact_body",
    # Signing
    "sign_basic",
    "sign_hmac",
    "serialize_body",
    "authorization_header",
    # Models
    "Target",
    "ClientConfig",
    "Credential",
    "TokenCredential",
    "KeyPairCredential",
    "RequestOptions",
    "TransportRequest",
    "TransportResponse",
    "RequestEcho",
    "NormalizedResponse",
    "NormalizedTransaction",
    # Exceptions
    "ElebaseError",
    "ConfigValidationError",
    "RequestValidationError",
    "RequestError",
    "ContentAPIError",
    "GeoAPIError",
    # Constants
    "API_VERSIONS",
    "ENTRY_PHASES",
    "CONTENT_BASE_URL",
    "GEO_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    "USAGE_LIMIT_HEADERS",
    "PASSWORD_MASK",
]
