"""Environment requirement checks.

This module performs best-effort checks for external/system dependencies that
Python packaging cannot guarantee (clipboard helpers, translator executables,
sound players). ``sibilant doctor`` prints the result.
"""

from __future__ import annotations

from dataclasses import dataclass
import platform
import shutil
import sys
from urllib.parse import urlparse

from sibilant.notify import NotificationStyle
from sibilant.notify.sounds import PLAYERS
from sibilant.settings import Settings
from sibilant.translation.config import (
    CloudProviderConfig,
    LocalCommandProviderConfig,
    LocalServiceProviderConfig,
    UnknownProviderConfig,
)


LINUX_CLIPBOARD_TOOLS = ("xclip", "xsel", "wl-copy")


@dataclass(frozen=True)
class RequirementIssue:
    id: str
    title: str
    details: str
    severity: str = "error"  # "error" | "warning"


def check_requirements(settings: Settings, system: str | None = None) -> list[RequirementIssue]:
    system = system or platform.system()
    issues: list[RequirementIssue] = []

    if sys.version_info < (3, 10):
        issues.append(
            RequirementIssue(
                id="python_version",
                title="Python >= 3.10",
                details=f"Current version: {sys.version.split()[0]}",
                severity="error",
            )
        )

    if system == "Linux" and not any(shutil.which(tool) for tool in LINUX_CLIPBOARD_TOOLS):
        issues.append(
            RequirementIssue(
                id="clipboard",
                title="Clipboard helper (xclip, xsel or wl-clipboard)",
                details=(
                    "None found in PATH. Install one via your package manager "
                    "(e.g. 'sudo apt-get install xclip')."
                ),
                severity="error",
            )
        )

    provider_id = settings.translation.provider
    config = settings.providers.get(provider_id)
    if config is None:
        issues.append(
            RequirementIssue(
                id="provider",
                title=f"Provider '{provider_id}'",
                details="Not defined under 'providers' in the configuration file.",
                severity="error",
            )
        )
    else:
        issues.extend(_check_provider(provider_id, config))

    if settings.notifications.sounds and shutil.which(PLAYERS.get(system, "")) is None:
        issues.append(
            RequirementIssue(
                id="sound_player",
                title="Sound player",
                details=f"No sound player found for {system}; sounds will be skipped.",
                severity="warning",
            )
        )

    if settings.notifications.style == NotificationStyle.DESKTOP and system == "Linux":
        if shutil.which("notify-send") is None:
            issues.append(
                RequirementIssue(
                    id="notify_send",
                    title="notify-send (libnotify)",
                    details="Not found in PATH. Install 'libnotify-bin' or use the dialog style.",
                    severity="warning",
                )
            )

    return issues


def _check_provider(provider_id: str, config) -> list[RequirementIssue]:
    issues: list[RequirementIssue] = []

    if isinstance(config, UnknownProviderConfig):
        issues.append(
            RequirementIssue(
                id="provider_type",
                title=f"Provider '{provider_id}' type",
                details=f"Unsupported type '{config.kind}'. Use cloud, local-service or local-command.",
                severity="error",
            )
        )
    elif isinstance(config, CloudProviderConfig):
        if not (config.api_key or "").strip():
            issues.append(
                RequirementIssue(
                    id="api_key",
                    title=f"API key for '{provider_id}'",
                    details="Empty. Set 'apiKey' or OPENAI_API_KEY.",
                    severity="error",
                )
            )
    elif isinstance(config, LocalServiceProviderConfig):
        parsed = urlparse(config.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            issues.append(
                RequirementIssue(
                    id="base_url",
                    title=f"Service URL for '{provider_id}'",
                    details=f"'{config.base_url}' is not an http(s) URL.",
                    severity="error",
                )
            )
    elif isinstance(config, LocalCommandProviderConfig):
        if shutil.which(config.command) is None:
            issues.append(
                RequirementIssue(
                    id="command",
                    title=f"{config.command} ({config.title})",
                    details="Not found in PATH. Install it or fix 'command' in the configuration.",
                    severity="error",
                )
            )
        if not any("{text}" in arg for arg in config.args):
            issues.append(
                RequirementIssue(
                    id="command_args",
                    title=f"Arguments for '{provider_id}'",
                    details="No argument contains '{text}'; the clipboard text will not be passed.",
                    severity="warning",
                )
            )

    return issues
