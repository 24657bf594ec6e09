"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator

import pytest

from respondwithjson.core.config import Settings, get_settings


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object built from test environment variables.

    Returns:
        Settings: Settings with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")

    return Settings()


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Remove application environment variables for the duration of a test.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = [
        "APP_",
        "ENVIRONMENT",
        "DEBUG",
        "DOCS_URL",
        "OPENAPI_URL",
        "LOG_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.upper().startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch
