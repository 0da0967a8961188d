"""Data models and custom exceptions for the Elebase API client."""
from __future__ import annotations
import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from requests.structures import CaseInsensitiveDict

from .constants import (
    API_VERSIONS,
    CONTENT_BASE_URL,
    DEFAULT_API_VERSION,
    DEFAULT_TIMEOUT_MS,
    ENTRY_PHASES,
    GEO_BASE_URL,
)


class Target(str, Enum):
    """Remote service a client talks to."""

    API = "api"
    GEO = "geo"


# ─────────────────────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────────────────────

class ElebaseError(Exception):
    """Base exception for all Elebase client errors."""
    pass


class ConfigValidationError(ElebaseError, ValueError):
    """Invalid client configuration (credentials, project, phases, version)."""
    pass


class RequestValidationError(ElebaseError, ValueError):
    """Malformed request options, raised before anything is sent."""
    pass


class RequestError(ElebaseError):
    """The remote service answered with an error status (> 304).

    Attributes:
        target: Service that produced the error.
        status: HTTP status code of the response.
        headers: Rate-limit headers present on the response, keyed by their
            canonical names. Absent headers are not present as keys.
    """

    target: Target = Target.API

    def __init__(
        self,
        message: str,
        *,
        status: int,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.headers: Dict[str, str] = dict(headers or {})


class ContentAPIError(RequestError):
    """Error reported by the content API (`{"error": {"id", "data"}}`)."""

    target = Target.API

    def __init__(
        self,
        *,
        status: int,
        error_id: Optional[str] = None,
        data: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        message = ""
        if error_id:
            payload: Dict[str, Any] = {"id": error_id}
            if data is not None:
                payload["data"] = data
            message = f"API error: {json.dumps(payload, separators=(',', ':'), default=str)}"
        super().__init__(message, status=status, headers=headers)
        self.id = error_id or "unknown"
        self.data = data if data else None


class GeoAPIError(RequestError):
    """Error reported by the geo API (`{"error": {"code", "info", "type"}}`)."""

    target = Target.GEO

    def __init__(
        self,
        *,
        status: int,
        code: Optional[str] = None,
        info: Any = None,
        error_type: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.code = code or "unknown"
        self.info = info if info else None
        self.type = error_type or "unknown"
        super().__init__(
            f"Geo API error ({status}): {self.code} [{self.type}]",
            status=status,
            headers=headers,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Credentials
# ─────────────────────────────────────────────────────────────────────────────

class TokenCredential(BaseModel):
    """Pre-issued API token, signed with the Basic scheme."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["token"] = "token"
    token: str = Field(min_length=1)


class KeyPairCredential(BaseModel):
    """Public/private API key pair, signed with the HMAC scheme."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["key"] = "key"
    public: str = Field(min_length=1)
    private: str = Field(min_length=1, repr=False)


Credential = Annotated[Union[TokenCredential, KeyPairCredential], Field(discriminator="kind")]


def _key_halves(key: Any) -> Tuple[Optional[str], Optional[str]]:
    if isinstance(key, KeyPairCredential):
        return key.public, key.private
    if isinstance(key, Mapping):
        return key.get("public"), key.get("private")
    return None, None


def _resolve_credential(target: Target, token: Any, key: Any) -> Union[TokenCredential, KeyPairCredential]:
    if target is Target.GEO:
        if not token:
            raise ValueError("Missing API token in API client config")
        return TokenCredential(token=token)

    if not key and not token:
        raise ValueError("Missing API key/token in API client config")
    if token:
        # Token wins when both credentials are configured
        return TokenCredential(token=token)
    public, private = _key_halves(key)
    if not public or not private:
        raise ValueError("Missing public and/or private API keys in API client config")
    return KeyPairCredential(public=public, private=private)


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────

class ClientConfig(BaseModel):
    """Immutable configuration shared by every call a client makes.

    Attributes:
        target: Remote service (content or geo API).
        credential: Exactly one of a token or a public/private key pair.
        project: Project ID (content API only).
        version: API version.
        locales: Default locale codes for the `Accept-Language` header.
        phases: Default entry phases, sorted ascending.
        user: Default user ID or authentication token.
        timeout: Transport timeout in milliseconds (0 disables it).
        logging: Whether transactions are passed to the diagnostics logger.
        headers: Default headers sent with every request.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    target: Target = Target.API
    credential: Credential
    project: Optional[str] = None
    version: str = DEFAULT_API_VERSION
    locales: Tuple[str, ...] = ()
    phases: Tuple[int, ...] = ()
    user: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_MS
    logging: bool = False
    headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def create(cls, target: Union[Target, str] = Target.API, **options: Any) -> "ClientConfig":
        """Validate raw client options and build a configuration.

        Accepts `token`, `key`, `project`, `version`, `locales`, `phases`,
        `user`, `timeout`, `logging` and `headers`.

        Raises:
            ConfigValidationError: If the options are invalid for the target.
        """
        try:
            target = Target(target)
        except ValueError as exc:
            raise ConfigValidationError(f"Unknown API target: {target}") from exc
        try:
            return cls.model_validate({**options, "target": target})
        except ValidationError as exc:
            raise ConfigValidationError(_config_error_message(exc)) from exc

    @model_validator(mode="before")
    @classmethod
    def resolve_credential(cls, values: Any) -> Any:
        """Check the raw options and fold `token`/`key` into one credential."""
        if not isinstance(values, Mapping):
            return values
        values = dict(values)
        target = Target(values.get("target", Target.API))
        version = values.get("version")

        if version and version not in API_VERSIONS:
            raise ValueError("Unknown or unsupported API version in API client config")

        if "credential" not in values:
            values["credential"] = _resolve_credential(
                target, values.pop("token", None), values.pop("key", None)
            )

        project = values.get("project")
        if target is Target.API and (not project or not isinstance(project, str)):
            raise ValueError("Missing or invalid project ID in API client config")
        return values

    @field_validator("version", mode="before")
    @classmethod
    def default_version(cls, v: Any) -> str:
        return v or DEFAULT_API_VERSION

    @field_validator("phases", mode="before")
    @classmethod
    def validate_phases(cls, v: Any) -> Tuple[int, ...]:
        """Restrict phases to the closed set and canonicalize their order."""
        if not isinstance(v, (list, tuple)):
            return ()
        for phase in v:
            if isinstance(phase, bool) or phase not in ENTRY_PHASES:
                raise ValueError("Invalid Entry phase in API client config")
        return tuple(sorted(v))

    @field_validator("locales", mode="before")
    @classmethod
    def validate_locales(cls, v: Any) -> Tuple[str, ...]:
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(str(locale) for locale in v)

    @field_validator("user", mode="before")
    @classmethod
    def validate_user(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) and v else None

    @field_validator("timeout", mode="before")
    @classmethod
    def clamp_timeout(cls, v: Any) -> float:
        """Coerce to a non-negative number of milliseconds."""
        try:
            timeout = float(v)
        except (TypeError, ValueError):
            return DEFAULT_TIMEOUT_MS
        if math.isnan(timeout):
            return DEFAULT_TIMEOUT_MS
        return max(timeout, 0.0)

    @field_validator("logging", mode="before")
    @classmethod
    def strict_logging_flag(cls, v: Any) -> bool:
        return v is True

    @field_validator("headers", mode="before")
    @classmethod
    def validate_headers(cls, v: Any) -> Dict[str, str]:
        return dict(v) if isinstance(v, Mapping) else {}

    @property
    def base_url(self) -> str:
        if self.target is Target.GEO:
            return GEO_BASE_URL
        return CONTENT_BASE_URL.format(project=self.project, version=self.version)

    @property
    def token(self) -> Optional[str]:
        if isinstance(self.credential, TokenCredential):
            return self.credential.token
        return None


def _config_error_message(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        original = (error.get("ctx") or {}).get("error")
        if original is not None:
            messages.append(str(original))
        else:
            location = ".".join(str(part) for part in error.get("loc", ()))
            messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(messages)


# ─────────────────────────────────────────────────────────────────────────────
# Per-call values
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class RequestOptions:
    """Logical description of one call, consumed by the request builder."""
    method: str
    path: Any
    data: Any = None
    params: Any = None
    headers: Any = None
    locales: Any = None
    user: Any = None
    first: bool = False

    def context(self, target: Target) -> Dict[str, Any]:
        """Caller context echoed back on the normalized request."""
        return {
            "method": self.method,
            "url": self.path,
            "data": self.data,
            "params": self.params,
            "headers": self.headers,
            "locales": self.locales,
            "user": self.user,
            "first": self.first,
            "target": target.value,
        }


@dataclass
class TransportRequest:
    """Fully formed request handed to the transport."""
    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    params: Dict[str, Any] = field(default_factory=dict)
    data: Any = None


@dataclass
class TransportResponse:
    """Raw response returned by the transport."""
    status: int
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    data: Any = None


@dataclass(frozen=True)
class RequestEcho:
    """What was actually sent, plus the caller's context."""
    method: str
    url: str
    headers: Dict[str, str]
    params: Optional[Dict[str, Any]]
    data: Any
    config: Dict[str, Any]


@dataclass(frozen=True)
class NormalizedResponse:
    """Response with the `data` envelope unwrapped one level.

    `body` keeps the undecorated response body the error is read from.
    """
    status: int
    headers: Mapping[str, str]
    data: Any
    body: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class NormalizedTransaction:
    request: RequestEcho
    response: NormalizedResponse
    error: Optional[RequestError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "Target",
    # Exceptions
    "ElebaseError",
    "ConfigValidationError",
    "RequestValidationError",
    "RequestError",
    "ContentAPIError",
    "GeoAPIError",
    # Credentials
    "TokenCredential",
    "KeyPairCredential",
    "Credential",
    # Config
    "ClientConfig",
    # Per-call values
    "RequestOptions",
    "TransportRequest",
    "TransportResponse",
    "RequestEcho",
    "NormalizedResponse",
    "NormalizedTransaction",
]
