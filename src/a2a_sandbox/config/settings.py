"""Configuration settings using Pydantic."""

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from a2a_sandbox.logging import get_logger

logger = get_logger(__name__)


def _find_and_load_env_file() -> str | None:
    """Find .env file in the current directory and load it."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
        return str(env_path)
    return None


_env_file_path = _find_and_load_env_file()


class Settings(BaseSettings):
    """Main configuration for the A2A sandbox."""

    model_config = SettingsConfigDict(
        env_file=None,  # already loaded via dotenv with override
        env_file_encoding="utf-8",
        env_prefix="A2A_",
        case_sensitive=False,
        extra="ignore",
    )

    # General settings
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = False

    # Public base URL advertised in agent cards
    base_url: str = "http://localhost:3000"

    # Storage settings
    storage_backend: Literal["memory", "sqlite"] = "memory"
    sqlite_path: Path = Path("./data/a2a.db")
    seed_on_startup: bool = True

    # Language model (OpenAI-compatible server, e.g. llama.cpp)
    llm_enabled: bool = True
    llm_base_url: str = "http://localhost:8080"
    llm_timeout: float = 30.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 500

    # Scheduling
    working_hours_start: str = "09:00"
    working_hours_end: str = "18:00"

    # HTTP server
    http_host: str = "0.0.0.0"
    http_port: int = 3000

    @field_validator("base_url", "llm_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing slash so URLs can be joined with '/path'."""
        return v.rstrip("/")

    @field_validator("working_hours_start", "working_hours_end")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Require zero-padded HH:mm."""
        parts = v.split(":")
        if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
            raise ValueError(f"Expected HH:mm, got {v!r}")
        return v

    @model_validator(mode="after")
    def check_working_hours(self) -> "Settings":
        """Working window must be non-empty."""
        if self.working_hours_start >= self.working_hours_end:
            raise ValueError("working_hours_start must be before working_hours_end")
        return self

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    def is_development(self) -> bool:
        """Check if running in development."""
        return self.env == "development"


_settings_instance: Settings | None = None


def get_settings(reload: bool = False) -> Settings:
    """Get settings instance with optional hot reload.

    Args:
        reload: If True, reload settings from environment/file

    Returns:
        Settings instance (singleton by default)
    """
    global _settings_instance

    if reload or _settings_instance is None:
        _settings_instance = Settings()
        logger.debug(
            "Settings loaded",
            env_file=_env_file_path,
            env=_settings_instance.env,
            storage_backend=_settings_instance.storage_backend,
            llm_enabled=_settings_instance.llm_enabled,
        )

    return _settings_instance


def reload_settings() -> Settings:
    """Force reload settings from environment/file.

    Returns:
        Newly loaded Settings instance
    """
    return get_settings(reload=True)
