"""Configuration management for the Elebase client."""

from __future__ import annotations

from .settings import ElebaseSettings, get_settings, reset_settings

__all__ = ["ElebaseSettings", "get_settings", "reset_settings"]
