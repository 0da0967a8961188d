from __future__ import annotations
# Supported API versions
API_VERSIONS = ("v1",)
DEFAULT_API_VERSION = "v1"

# Entry publication phases accepted as default filters
ENTRY_PHASES = (0, 1, 2, 3, 4)

# Base addresses
CONTENT_BASE_URL = "https://cdn.elebase.io/{project}/{version}"
GEO_BASE_URL = "https://geo.elebase.io"

# Transport defaults
DEFAULT_TIMEOUT_MS = 20000

# HTTP
REQUEST_METHODS = ("GET", "POST", "PUT", "DELETE")
BODY_METHODS = ("POST", "PUT")
ERROR_STATUS_THRESHOLD = 304

# Rate-limit headers copied onto request errors
USAGE_LIMIT_HEADERS = ("X-Usage-Limit-Info", "X-Usage-Limit-Time")

# Authorization schemes
BASIC_SCHEME = "Basic"
HMAC_SCHEME = "Elebase"

# Content API paths that receive default phase filters
ENTRIES_PATH = "/entries"

# Diagnostics
REDACTED_FIELDS = ("pwd",)
PASSWORD_MASK = "***********"

__all__ = [
    "API_VERSIONS",
    "DEFAULT_API_VERSION",
    "ENTRY_PHASES",
    "CONTENT_BASE_URL",
    "GEO_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    "REQUEST_METHODS",
    "BODY_METHODS",
    "ERROR_STATUS_THRESHOLD",
    "USAGE_LIMIT_HEADERS",
    "BASIC_SCHEME",
    "HMAC_SCHEME",
    "ENTRIES_PATH",
    "REDACTED_FIELDS",
    "PASSWORD_MASK",
]
