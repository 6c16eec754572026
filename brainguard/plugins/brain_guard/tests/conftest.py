"""Shared fixtures for BrainGuard tests."""

import pytest

from ...embedding_provider.env import (
    ENV_EMBEDDING_MODEL,
    ENV_EMBEDDING_TIMEOUT_MS,
    ENV_GOOGLE_API_KEY,
    ENV_GOOGLE_CLOUD_PROJECT,
    ENV_GOOGLE_LOCATION,
    ENV_GOOGLE_PROJECT,
    ENV_GOOGLE_USE_VERTEX,
)
from ..config_loader import ENV_CONFIG_PATH


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run each test in an empty directory with no BrainGuard or Google settings."""
    for name in (
        ENV_CONFIG_PATH,
        ENV_EMBEDDING_MODEL,
        ENV_EMBEDDING_TIMEOUT_MS,
        ENV_GOOGLE_API_KEY,
        ENV_GOOGLE_CLOUD_PROJECT,
        ENV_GOOGLE_LOCATION,
        ENV_GOOGLE_PROJECT,
        ENV_GOOGLE_USE_VERTEX,
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
