"""Fire-and-forget sound effects for translation lifecycle events."""

from __future__ import annotations

import logging
import platform
import subprocess
from pathlib import Path
from typing import Mapping

from sibilant.translation.base import TranslationEvent

logger = logging.getLogger(__name__)

PLAYERS = {
    "Darwin": "afplay",
    "Linux": "paplay",
}

MACOS_DEFAULT_SOUNDS = {
    TranslationEvent.STARTED: "/System/Library/Sounds/Purr.aiff",
    TranslationEvent.SUCCEEDED: "/System/Library/Sounds/Hero.aiff",
    TranslationEvent.FAILED: "/System/Library/Sounds/Basso.aiff",
}


class SoundPlayer:
    """Plays the sound configured for an event without waiting for it to finish.

    Instances are callables so they can be handed to a provider as its event
    listener.
    """

    def __init__(
        self,
        sounds: Mapping[TranslationEvent, str],
        player: str | None = None,
    ) -> None:
        self._sounds = dict(sounds)
        self._player = player or PLAYERS.get(platform.system())

    def __call__(self, event: TranslationEvent) -> None:
        self.play(event)

    def play(self, event: TranslationEvent) -> subprocess.Popen | None:
        sound = self._sounds.get(event)
        if not sound or self._player is None:
            return None
        if not Path(sound).exists():
            logger.debug("Sound file for %s not found: %s", event.value, sound)
            return None
        try:
            return subprocess.Popen(
                [self._player, sound],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.warning("Could not play %s: %s", sound, exc)
            return None
