"""
Unit test specific configuration and fixtures.
Unit tests should be fast (<100ms) and have no external dependencies.
"""

import os

import pytest

from src.bistatic.core import config as config_module


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove BISTATIC_ overrides so configuration tests see only their inputs."""
    for key in list(os.environ):
        if key.startswith(config_module.ENV_PREFIX):
            monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def reset_config():
    """Drop the cached global configuration before and after a test."""
    config_module._config = None
    yield
    config_module._config = None
