"""Shared pytest fixtures for Elebase client tests."""

from __future__ import annotations

from typing import Generator

import pytest

from elebase.config import settings as settings_module

ELEBASE_ENV_VARS = [
    "ELEBASE_TOKEN",
    "ELEBASE_KEY_PUBLIC",
    "ELEBASE_KEY_PRIVATE",
    "ELEBASE_PROJECT",
    "ELEBASE_VERSION",
    "ELEBASE_LOCALES",
    "ELEBASE_PHASES",
    "ELEBASE_USER",
    "ELEBASE_TIMEOUT",
    "ELEBASE_LOGGING",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path) -> None:
    """Remove all Elebase env vars and run from an empty directory (no .env)."""
    for var in ELEBASE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings singleton between tests to ensure isolation."""
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()
