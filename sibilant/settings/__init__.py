"""Configuration loading."""

from sibilant.settings.loader import (
    ConfigError,
    NotificationConfig,
    Settings,
    find_config_file,
    load_settings,
    parse_provider,
    parse_settings,
)

__all__ = [
    "ConfigError",
    "NotificationConfig",
    "Settings",
    "find_config_file",
    "load_settings",
    "parse_provider",
    "parse_settings",
]
