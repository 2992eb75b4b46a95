"""Configuration module - settings and environment management."""

from src.config.settings import (
    ConfigurationError,
    DEFAULT_ALLOWED_ORIGINS,
    DEFAULT_USER_AGENT,
    Settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "DEFAULT_ALLOWED_ORIGINS",
    "DEFAULT_USER_AGENT",
    "Settings",
    "load_settings",
]
