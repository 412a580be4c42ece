"""Native desktop notifications via notify-send (Linux) and osascript (macOS)."""

from __future__ import annotations

import asyncio
import logging
import platform
import subprocess

logger = logging.getLogger(__name__)


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier:
    """Posts a notification banner; does not wait for the user."""

    def __init__(self, system: str | None = None) -> None:
        self._system = system or platform.system()

    def command(self, title: str, message: str) -> list[str] | None:
        """Return the notification command line for this platform."""
        if self._system == "Linux":
            return ["notify-send", title, message]
        if self._system == "Darwin":
            script = (
                f"display notification {_applescript_string(message)} "
                f"with title {_applescript_string(title)}"
            )
            return ["osascript", "-e", script]
        return None

    async def notify(self, title: str, message: str) -> bool:
        cmd = self.command(title, message)
        if cmd is None:
            logger.warning("Desktop notifications are not supported on %s", self._system)
            return False
        try:
            await asyncio.to_thread(subprocess.run, cmd, check=True, capture_output=True, timeout=10)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as exc:
            logger.warning("Could not send desktop notification: %s", exc)
            return False
        return True
