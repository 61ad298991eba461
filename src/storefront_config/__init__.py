"""Shared application configuration package."""

from .exceptions import ConfigurationError, ConfigurationMissingError
from .settings import (
    Settings,
    clear_settings_cache,
    get_config_dir,
    get_settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "ConfigurationMissingError",
    "Settings",
    "clear_settings_cache",
    "get_config_dir",
    "get_settings",
    "load_settings",
]
