"""Abstract base class for translation providers (Strategy pattern)."""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar

from sibilant.translation.errors import CapabilityUnsupportedError

logger = logging.getLogger(__name__)


class TranslationEvent(str, Enum):
    """Lifecycle events delivered to a provider's ``notify`` hook."""

    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


EventListener = Callable[[TranslationEvent], None]


@dataclass(frozen=True)
class ImagePayload:
    """Raw image bytes captured from the clipboard."""

    data: bytes
    mime_type: str = "image/png"

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


@dataclass(frozen=True)
class TranslationRequest:
    """One unit of work: a text or image source and the language to translate into."""

    source: str | ImagePayload
    target_language: str

    @property
    def is_image(self) -> bool:
        return isinstance(self.source, ImagePayload)


@dataclass(frozen=True)
class ImageTranslation:
    """Result of the image path: recognised text and its translation."""

    text: str
    translation: str


class TranslationProvider(ABC):
    """Abstract interface that all translation providers must implement."""

    supports_images: ClassVar[bool] = False

    def __init__(self, listener: EventListener | None = None) -> None:
        self._listener = listener

    @abstractmethod
    async def translate(self, text: str, target_language: str) -> str:
        """Translate text to the target language.

        Args:
            text: The text to translate. Empty text is still sent to the backend.
            target_language: Language to translate into (e.g. "en" or "Portuguese").

        Returns:
            The translated text, never empty.

        Raises:
            TranslationError: If the backend produced no usable result.
        """
        ...

    async def translate_image(
        self,
        image: ImagePayload,
        target_language: str,
    ) -> ImageTranslation:
        """Recognise the text in an image and translate it.

        Providers without vision support inherit this implementation, which
        fails before any network or process call is made.
        """
        raise CapabilityUnsupportedError(self.name)

    def notify(self, event: TranslationEvent) -> None:
        """Forward a lifecycle event to the listener, if any. Never raises."""
        if self._listener is None:
            return
        try:
            self._listener(event)
        except Exception:
            logger.warning("Event listener failed for %s", event.value, exc_info=True)

    async def close(self) -> None:
        """Release network resources held by the provider."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this provider."""
        ...
