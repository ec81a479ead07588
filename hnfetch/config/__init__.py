"""Configuration module - settings and environment management."""

from hnfetch.config.settings import (
    ConfigurationError,
    MAX_COUNT,
    MIN_COUNT,
    Settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "MAX_COUNT",
    "MIN_COUNT",
    "Settings",
    "load_settings",
]
