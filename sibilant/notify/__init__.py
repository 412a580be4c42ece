"""User-facing notifications: result dialog, desktop banners and sounds."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

from sibilant.notify.desktop import DesktopNotifier
from sibilant.notify.sounds import SoundPlayer

logger = logging.getLogger(__name__)


class NotificationStyle(str, Enum):
    DIALOG = "dialog"
    DESKTOP = "desktop"
    NONE = "none"


class Notifier(Protocol):
    """Shows a title and message to the user; awaited from the translation loop."""

    async def notify(self, title: str, message: str) -> bool: ...


class NullNotifier:
    """Only logs the notification."""

    async def notify(self, title: str, message: str) -> bool:
        logger.info("%s: %s", title, message)
        return True


def build_notifier(
    style: NotificationStyle,
    copy_fn: Callable[[str], None] | None = None,
) -> Notifier:
    """Return the notifier for ``style``."""
    if style == NotificationStyle.DIALOG:
        # Flet is only imported when a dialog is actually wanted.
        from sibilant.notify.dialog import DialogNotifier

        return DialogNotifier(copy_fn=copy_fn)
    if style == NotificationStyle.DESKTOP:
        return DesktopNotifier()
    return NullNotifier()


__all__ = [
    "DesktopNotifier",
    "NotificationStyle",
    "Notifier",
    "NullNotifier",
    "SoundPlayer",
    "build_notifier",
]
