"""Environment-based configuration using Pydantic Settings.

Loads Elebase credentials and client defaults from `ELEBASE_*` environment
variables and a `.env` file, so scripts do not hardcode secrets.

Example:
    >>> from elebase.config import get_settings
    >>> import elebase
    >>> client = elebase.api(**get_settings().client_options())
"""

from __future__ import annotations

import logging
import threading
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from elebase.client.constants import DEFAULT_API_VERSION, DEFAULT_TIMEOUT_MS

LOGGER = logging.getLogger(__name__)


def _split_csv(v: Any) -> Any:
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class ElebaseSettings(BaseSettings):
    """Elebase client settings.

    Example .env file:
        ELEBASE_TOKEN=your_token
        ELEBASE_PROJECT=your_project_id
        ELEBASE_LOCALES=en-US,fr-FR
        ELEBASE_PHASES=2,3
    """

    model_config = SettingsConfigDict(
        env_prefix="ELEBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    token: Optional[str] = Field(
        default=None,
        description="API token (Basic auth; required for the geo API)",
    )
    key_public: Optional[str] = Field(
        default=None,
        description="Public API key (HMAC auth)",
    )
    key_private: Optional[str] = Field(
        default=None,
        description="Private API key (HMAC auth)",
    )
    project: Optional[str] = Field(
        default=None,
        description="Project ID (content API only)",
    )
    version: str = Field(
        default=DEFAULT_API_VERSION,
        description="API version",
    )
    locales: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Default locale codes, comma separated",
    )
    phases: Annotated[List[int], NoDecode] = Field(
        default_factory=list,
        description="Default entry phases (0-4), comma separated",
    )
    user: Optional[str] = Field(
        default=None,
        description="Default user ID or authentication token",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=0,
        description="Request timeout in milliseconds",
    )
    logging: bool = Field(
        default=False,
        description="Log every transaction through the diagnostics logger",
    )

    @field_validator("locales", mode="before")
    @classmethod
    def parse_locales(cls, v: Any) -> Any:
        return _split_csv(v)

    @field_validator("phases", mode="before")
    @classmethod
    def parse_phases(cls, v: Any) -> Any:
        """Accept `2,0,3` as well as a list."""
        v = _split_csv(v)
        if isinstance(v, list):
            try:
                return [int(item) for item in v]
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Entry phases must be integers: {v}") from exc
        return v

    def client_options(self) -> Dict[str, Any]:
        """Keyword options for `elebase.api()` / `elebase.geo()`."""
        options: Dict[str, Any] = {
            "version": self.version,
            "locales": list(self.locales),
            "phases": list(self.phases),
            "timeout": self.timeout,
            "logging": self.logging,
        }
        if self.token:
            options["token"] = self.token
        if self.key_public or self.key_private:
            options["key"] = {"public": self.key_public, "private": self.key_private}
        if self.project:
            options["project"] = self.project
        if self.user:
            options["user"] = self.user
        return options


# Lazy initialization - only create settings when accessed
_settings: Optional[ElebaseSettings] = None
_settings_lock = threading.Lock()


def get_settings() -> ElebaseSettings:
    """Get or create the ElebaseSettings singleton (thread-safe).

    Returns:
        ElebaseSettings loaded from environment variables/.env file.

    Raises:
        ValidationError: If a setting has an invalid value.
    """
    global _settings

    # First check without lock (fast path)
    if _settings is not None:
        return _settings

    with _settings_lock:
        # Double-check after acquiring lock
        if _settings is None:
            LOGGER.info("Loading Elebase settings from environment variables and .env file")
            try:
                _settings = ElebaseSettings()
            except ValidationError as e:
                LOGGER.error("Elebase configuration validation failed: %s", e)
                raise

    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next `get_settings()` reloads them."""
    global _settings
    with _settings_lock:
        _settings = None


__all__ = ["ElebaseSettings", "get_settings", "reset_settings"]
