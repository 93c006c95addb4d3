"""Tests for configuration settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from a2a_sandbox.config import Settings, get_settings, reload_settings

ENV_VARS = [
    "A2A_ENV",
    "A2A_DEBUG",
    "A2A_LOG_LEVEL",
    "A2A_BASE_URL",
    "A2A_STORAGE_BACKEND",
    "A2A_SQLITE_PATH",
    "A2A_LLM_ENABLED",
    "A2A_LLM_BASE_URL",
    "A2A_WORKING_HOURS_START",
    "A2A_WORKING_HOURS_END",
    "A2A_HTTP_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Fixture to provide clean environment for Settings tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.usefixtures("clean_env")
class TestSettingsDefaults:
    """Test Settings default values."""

    def test_default_env(self):
        """Test default environment is development."""
        settings = Settings()
        assert settings.env == "development"
        assert settings.is_development()
        assert not settings.is_production()

    def test_default_log_level(self):
        """Test default log level is INFO."""
        assert Settings().log_level == "INFO"

    def test_default_storage(self):
        """Test memory storage is the default backend."""
        settings = Settings()
        assert settings.storage_backend == "memory"
        assert settings.sqlite_path == Path("./data/a2a.db")
        assert settings.seed_on_startup is True

    def test_default_llm_settings(self):
        """Test default LLM settings point at a local server."""
        settings = Settings()
        assert settings.llm_enabled is True
        assert settings.llm_base_url == "http://localhost:8080"
        assert settings.llm_timeout == 30.0

    def test_default_working_hours(self):
        """Test working window defaults to 09:00-18:00."""
        settings = Settings()
        assert settings.working_hours_start == "09:00"
        assert settings.working_hours_end == "18:00"

    def test_default_http_settings(self):
        """Test default HTTP settings."""
        settings = Settings()
        assert settings.http_host == "0.0.0.0"
        assert settings.http_port == 3000
        assert settings.base_url == "http://localhost:3000"


@pytest.mark.usefixtures("clean_env")
class TestSettingsFromEnvironment:
    """Test environment overrides."""

    def test_env_prefix(self, monkeypatch):
        """Test A2A_-prefixed variables are read."""
        monkeypatch.setenv("A2A_STORAGE_BACKEND", "sqlite")
        monkeypatch.setenv("A2A_HTTP_PORT", "9000")
        monkeypatch.setenv("A2A_LLM_ENABLED", "false")

        settings = Settings()
        assert settings.storage_backend == "sqlite"
        assert settings.http_port == 9000
        assert settings.llm_enabled is False

    def test_trailing_slash_stripped(self, monkeypatch):
        """Test base URLs lose their trailing slash."""
        monkeypatch.setenv("A2A_BASE_URL", "https://agents.example.com/")
        assert Settings().base_url == "https://agents.example.com"

    def test_invalid_storage_backend(self, monkeypatch):
        """Test unknown backends are rejected."""
        monkeypatch.setenv("A2A_STORAGE_BACKEND", "redis")
        with pytest.raises(ValidationError):
            Settings()


class TestSettingsValidation:
    """Test field validators."""

    def test_working_hours_format(self):
        """Test working hours must be zero-padded HH:mm."""
        with pytest.raises(ValidationError):
            Settings(working_hours_start="9:00")

    def test_working_hours_order(self):
        """Test the working window must be non-empty."""
        with pytest.raises(ValidationError):
            Settings(working_hours_start="18:00", working_hours_end="09:00")

    def test_custom_working_hours(self):
        """Test a valid custom window."""
        settings = Settings(working_hours_start="08:30", working_hours_end="17:00")
        assert settings.working_hours_start == "08:30"


@pytest.mark.usefixtures("clean_env")
class TestGetSettings:
    """Test the settings singleton."""

    def test_singleton(self):
        """Test repeated calls return the same instance."""
        assert get_settings() is get_settings()

    def test_reload(self, monkeypatch):
        """Test reload picks up environment changes."""
        get_settings()
        monkeypatch.setenv("A2A_HTTP_PORT", "4321")
        try:
            assert reload_settings().http_port == 4321
        finally:
            monkeypatch.delenv("A2A_HTTP_PORT")
            reload_settings()
