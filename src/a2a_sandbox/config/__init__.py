"""A2A sandbox configuration management."""

from a2a_sandbox.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
