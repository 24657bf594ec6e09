"""Unit tests for Settings and LogConfig."""

import pytest
import pytest_check
from pydantic import ValidationError

from respondwithjson.core.config import LogConfig, Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Test cases for Settings class."""

    def test_default_application_settings(self) -> None:
        """Test default application settings."""
        settings = Settings()

        with pytest_check.check:
            assert settings.app_name == "respondwithjson"
        with pytest_check.check:
            assert settings.app_version
        with pytest_check.check:
            assert settings.environment == "development"
        with pytest_check.check:
            assert settings.debug is True
        with pytest_check.check:
            assert settings.docs_url == "/docs"
        with pytest_check.check:
            assert settings.openapi_url == "/openapi.json"

    def test_default_log_config(self) -> None:
        """Test default logging configuration."""
        settings = Settings()

        with pytest_check.check:
            assert isinstance(settings.log_config, LogConfig)
        with pytest_check.check:
            assert settings.log_config.log_level == "INFO"
        with pytest_check.check:
            assert settings.log_config.log_formatter_type == "console"

    @pytest.mark.parametrize(
        ("environment", "expected_formatter"),
        [
            ("development", "console"),
            ("staging", "json"),
            ("production", "json"),
        ],
    )
    def test_formatter_auto_detection(
        self,
        monkeypatch: pytest.MonkeyPatch,
        environment: str,
        expected_formatter: str,
    ) -> None:
        """Test that the formatter follows the environment when unset."""
        monkeypatch.setenv("ENVIRONMENT", environment)

        settings = Settings()

        assert settings.log_config.log_formatter_type == expected_formatter

    def test_explicit_formatter_is_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an explicit formatter overrides auto-detection."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_CONFIG__LOG_FORMATTER_TYPE", "console")

        settings = Settings()

        assert settings.log_config.log_formatter_type == "console"

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the __ nested delimiter for log settings."""
        monkeypatch.setenv("LOG_CONFIG__LOG_LEVEL", "DEBUG")

        settings = Settings()

        assert settings.log_config.log_level == "DEBUG"

    @pytest.mark.parametrize("field", ["docs_url", "openapi_url"])
    def test_empty_url_becomes_none(
        self, monkeypatch: pytest.MonkeyPatch, field: str
    ) -> None:
        """Test that empty documentation URLs disable the endpoint."""
        monkeypatch.setenv(field.upper(), "")

        settings = Settings()

        assert getattr(settings, field) is None

    def test_invalid_environment_rejected(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that unknown environments fail validation."""
        monkeypatch.setenv("ENVIRONMENT", "qa")

        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_log_level_rejected(self) -> None:
        """Test that LogConfig validates the level."""
        with pytest.raises(ValidationError):
            LogConfig(log_level="VERBOSE")  # type: ignore[arg-type]


@pytest.mark.unit
class TestGetSettings:
    """Test cases for the cached settings accessor."""

    def test_returns_cached_instance(self) -> None:
        """Test that repeated calls return the same object."""
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that clearing the cache picks up new environment values."""
        first = get_settings()
        monkeypatch.setenv("APP_NAME", "Renamed")
        get_settings.cache_clear()

        second = get_settings()

        assert first.app_name == "respondwithjson"
        assert second.app_name == "Renamed"
