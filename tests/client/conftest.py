"""Fixtures for the API client tests."""

from __future__ import annotations

import pytest

from elebase.client.models import ClientConfig, Target


@pytest.fixture
def token_config() -> ClientConfig:
    """Content API config with token credentials and defaults set."""
    return ClientConfig.create(
        Target.API,
        token="test-token",
        project="proj123",
        locales=["en-US", " fr-FR "],
        phases=[2, 0, 3],
        user="user-1",
    )


@pytest.fixture
def key_config() -> ClientConfig:
    """Content API config with a public/private key pair and no defaults."""
    return ClientConfig.create(
        Target.API,
        key={"public": "pub-key", "private": "priv-key"},
        project="proj123",
    )


@pytest.fixture
def geo_config() -> ClientConfig:
    return ClientConfig.create(Target.GEO, token="geo-token")
