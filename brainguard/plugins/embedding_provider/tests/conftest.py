"""Shared fixtures for embedding provider tests."""

import pytest

from ..env import (
    ENV_EMBEDDING_MODEL,
    ENV_EMBEDDING_TIMEOUT_MS,
    ENV_GOOGLE_API_KEY,
    ENV_GOOGLE_CLOUD_PROJECT,
    ENV_GOOGLE_LOCATION,
    ENV_GOOGLE_PROJECT,
    ENV_GOOGLE_USE_VERTEX,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove every variable the provider reads."""
    for name in (
        ENV_EMBEDDING_MODEL,
        ENV_EMBEDDING_TIMEOUT_MS,
        ENV_GOOGLE_API_KEY,
        ENV_GOOGLE_CLOUD_PROJECT,
        ENV_GOOGLE_LOCATION,
        ENV_GOOGLE_PROJECT,
        ENV_GOOGLE_USE_VERTEX,
    ):
        monkeypatch.delenv(name, raising=False)
