"""Configuration file discovery and parsing.

The configuration is a JSON document::

    {
      "providers": {"open-ai": {"type": "cloud", "title": "OpenAI", "model": "gpt-4o-mini"}},
      "translation": {"provider": "open-ai", "targetLanguage": "en"},
      "notifications": {"style": "dialog", "sounds": {"succeeded": "/path/to/sound.aiff"}}
    }

Keys may be written in camelCase or snake_case. Secrets can live in a
``.env`` file next to the configuration or in the working directory.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from sibilant.notify import NotificationStyle
from sibilant.notify.sounds import MACOS_DEFAULT_SOUNDS
from sibilant.translation.base import TranslationEvent
from sibilant.translation.config import (
    KIND_ALIASES,
    CloudProviderConfig,
    LocalCommandProviderConfig,
    LocalServiceProviderConfig,
    ProviderConfig,
    ProviderKind,
    TranslationConfig,
    UnknownProviderConfig,
)
from sibilant.translation.errors import TranslationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SIBILANT_CONFIG"
CONFIG_FILENAME = "config.json"


class ConfigError(TranslationError):
    """The configuration file is missing, unreadable or invalid."""


@dataclass(frozen=True)
class NotificationConfig:
    style: NotificationStyle = NotificationStyle.DIALOG
    sounds: Mapping[TranslationEvent, str] = field(
        default_factory=lambda: dict(MACOS_DEFAULT_SOUNDS)
    )


@dataclass(frozen=True)
class Settings:
    """Everything one invocation needs, resolved once at start-up."""

    providers: Mapping[str, ProviderConfig]
    translation: TranslationConfig
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    source: Path | None = None


def default_search_paths(cwd: Path | None = None) -> list[Path]:
    """Candidate configuration files, most specific first."""
    paths: list[Path] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path).expanduser())

    xdg = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    paths.append(config_home / "sibilant" / CONFIG_FILENAME)
    paths.append((cwd or Path.cwd()) / "config" / "default.json")
    return paths


def find_config_file(path: str | Path | None = None) -> Path:
    """Return the configuration file to use.

    Raises:
        ConfigError: If an explicit path does not exist or no candidate does.
    """
    if path is not None:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise ConfigError(f"Configuration file not found: {explicit}")
        return explicit

    candidates = default_search_paths()
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    searched = ", ".join(str(c) for c in candidates)
    raise ConfigError(f"No configuration file found. Searched: {searched}")


def load_settings(path: str | Path | None = None) -> Settings:
    """Locate, read and parse the configuration file.

    ``.env`` files beside the configuration and in the working directory are
    loaded first, without overriding variables already set.
    """
    config_path = find_config_file(path)
    load_dotenv(config_path.parent / ".env")
    load_dotenv(Path.cwd() / ".env")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Could not read {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    settings = parse_settings(data, source=config_path)
    logger.debug("Loaded %d provider(s) from %s", len(settings.providers), config_path)
    return settings


def parse_settings(data: Any, source: Path | None = None) -> Settings:
    """Build ``Settings`` from an already-decoded JSON document."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    raw_providers = data.get("providers") or {}
    if not isinstance(raw_providers, dict):
        raise ConfigError("'providers' must be an object keyed by provider id")
    providers = {
        provider_id: parse_provider(provider_id, entry)
        for provider_id, entry in raw_providers.items()
    }

    translation = _section(data, "translation")
    provider = os.environ.get("SIBILANT_PROVIDER") or _get(translation, "provider")
    if not provider:
        raise ConfigError("'translation.provider' is required")
    target_language = (
        os.environ.get("SIBILANT_TARGET_LANGUAGE")
        or _get(translation, "targetLanguage", "target_language")
        or "en"
    )

    return Settings(
        providers=providers,
        translation=TranslationConfig(provider=str(provider), target_language=str(target_language)),
        notifications=_parse_notifications(_section(data, "notifications")),
        source=source,
    )


def parse_provider(provider_id: str, entry: Any) -> ProviderConfig:
    """Parse one ``providers`` entry into its typed configuration."""
    if not isinstance(entry, dict):
        raise ConfigError(f"Provider '{provider_id}' must be an object")

    raw_kind = str(_get(entry, "type", "kind") or "")
    title = str(_get(entry, "title") or provider_id)
    kind = KIND_ALIASES.get(raw_kind.lower())

    if kind == ProviderKind.CLOUD:
        # May be None; CloudProvider rejects a missing key when it is selected.
        api_key = _get(entry, "apiKey", "api_key") or os.environ.get("OPENAI_API_KEY")
        return CloudProviderConfig(
            title=title,
            api_key=str(api_key) if api_key else None,
            model=str(_get(entry, "model") or CloudProviderConfig.model),
            base_url=_get(entry, "baseUrl", "base_url"),
            timeout=_float(entry, provider_id, "timeout", CloudProviderConfig.timeout),
        )

    if kind == ProviderKind.LOCAL_SERVICE:
        return LocalServiceProviderConfig(
            title=title,
            base_url=str(_get(entry, "baseUrl", "base_url") or LocalServiceProviderConfig.base_url),
            api_key=_get(entry, "apiKey", "api_key"),
            timeout=_float(entry, provider_id, "timeout", LocalServiceProviderConfig.timeout),
            health_timeout=_float(
                entry,
                provider_id,
                "healthTimeout",
                LocalServiceProviderConfig.health_timeout,
                "health_timeout",
            ),
        )

    if kind == ProviderKind.LOCAL_COMMAND:
        command = _get(entry, "command")
        if not command:
            raise ConfigError(f"Provider '{provider_id}' needs a 'command'")
        args = _get(entry, "args")
        if args is None:
            args = list(LocalCommandProviderConfig.args)
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise ConfigError(f"Provider '{provider_id}': 'args' must be a list of strings")
        return LocalCommandProviderConfig(
            title=title,
            command=str(command),
            args=tuple(args),
            timeout=_float(entry, provider_id, "timeout", LocalCommandProviderConfig.timeout),
        )

    logger.debug("Provider '%s' has unrecognised type '%s'", provider_id, raw_kind)
    return UnknownProviderConfig(kind=raw_kind, title=title)


def _parse_notifications(section: dict) -> NotificationConfig:
    raw_style = str(_get(section, "style") or NotificationStyle.DIALOG.value)
    try:
        style = NotificationStyle(raw_style.lower())
    except ValueError:
        choices = ", ".join(s.value for s in NotificationStyle)
        raise ConfigError(f"Unknown notification style '{raw_style}' (choose from {choices})") from None

    raw_sounds = _get(section, "sounds")
    if raw_sounds is None:
        return NotificationConfig(style=style)
    if not isinstance(raw_sounds, dict):
        raise ConfigError("'notifications.sounds' must be an object")

    sounds: dict[TranslationEvent, str] = {}
    for name, path in raw_sounds.items():
        try:
            event = TranslationEvent(name)
        except ValueError:
            raise ConfigError(f"Unknown sound event '{name}'") from None
        if path:
            sounds[event] = str(Path(path).expanduser())
    return NotificationConfig(style=style, sounds=sounds)


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be an object")
    return section


def _get(entry: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def _float(entry: Mapping[str, Any], provider_id: str, key: str, default: float, *aliases: str) -> float:
    value = _get(entry, key, *aliases)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Provider '{provider_id}': '{key}' must be a number") from None
