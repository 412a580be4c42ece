"""One-shot clipboard translation: detect, translate, write back, notify."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from sibilant.clipboard import ClipboardBackend, ContentKind, detect_content
from sibilant.notify import Notifier
from sibilant.settings import Settings
from sibilant.translation.base import (
    EventListener,
    TranslationEvent,
    TranslationProvider,
    TranslationRequest,
)
from sibilant.translation.config import get_provider
from sibilant.translation.errors import TranslationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

SUCCESS_TITLE = "Translation Complete"
FAILURE_TITLE = "Translation Error"


@dataclass(frozen=True)
class TranslationOutcome:
    """What happened during one invocation."""

    ok: bool
    content_kind: ContentKind | None = None
    original: str | None = None
    translation: str | None = None
    provider: str | None = None
    error: Exception | None = None

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.ok else EXIT_FAILURE

    @property
    def message(self) -> str:
        if self.ok:
            if self.content_kind == ContentKind.IMAGE and self.original:
                return f"{self.original}\n\n→ {self.translation}"
            return self.translation or ""
        return str(self.error) or type(self.error).__name__


class ClipboardTranslator:
    """Runs a single translation of whatever is on the clipboard.

    There is no loop and no retry: every failure is terminal, reported to the
    user and turned into a non-zero exit status.
    """

    def __init__(
        self,
        settings: Settings,
        clipboard: ClipboardBackend,
        notifier: Notifier,
        listener: EventListener | None = None,
        provider_factory: Callable[..., TranslationProvider] = get_provider,
    ) -> None:
        self._settings = settings
        self._clipboard = clipboard
        self._notifier = notifier
        self._listener = listener
        self._provider_factory = provider_factory
        self.outcome: TranslationOutcome | None = None

    @property
    def target_language(self) -> str:
        return self._settings.translation.target_language

    async def run(self) -> int:
        """Translate the clipboard and return the process exit status."""
        self.outcome = await self.translate_clipboard()
        return self.outcome.exit_code

    async def translate_clipboard(self) -> TranslationOutcome:
        provider: TranslationProvider | None = None
        content_kind: ContentKind | None = None
        start_time = time.perf_counter()
        try:
            content = detect_content(self._clipboard)
            content_kind = content.kind
            request = TranslationRequest(
                source=content.image if content.kind == ContentKind.IMAGE else content.text,
                target_language=self.target_language,
            )
            provider = self._select_provider(require_images=request.is_image)
            provider.notify(TranslationEvent.STARTED)

            try:
                if request.is_image:
                    logger.info("Translating clipboard image (%d bytes)", request.source.size)
                    result = await provider.translate_image(request.source, request.target_language)
                    original, translation = result.text, result.translation
                else:
                    logger.info("Translating %d character(s) of clipboard text", len(request.source))
                    original = request.source
                    translation = await provider.translate(request.source, request.target_language)
            finally:
                await provider.close()

            self._clipboard.write(translation)
        except TranslationError as exc:
            logger.error("Translation failed: %s", exc)
            return await self._fail(exc, provider, content_kind)
        except Exception as exc:
            logger.exception("Unexpected error during translation")
            return await self._fail(exc, provider, content_kind)

        logger.info(
            "Translation copied to clipboard in %.2fs (%d character(s))",
            time.perf_counter() - start_time,
            len(translation),
        )
        provider.notify(TranslationEvent.SUCCEEDED)
        outcome = TranslationOutcome(
            ok=True,
            content_kind=content_kind,
            original=original,
            translation=translation,
            provider=provider.name,
        )
        await self._notify(SUCCESS_TITLE, outcome.message)
        return outcome

    def _select_provider(self, require_images: bool) -> TranslationProvider:
        provider_id = self._settings.translation.provider
        provider = self._provider_factory(
            provider_id,
            self._settings.providers,
            require_images=require_images,
            listener=self._listener,
        )
        logger.info("Using provider '%s' (%s)", provider_id, provider.name)
        return provider

    async def _fail(
        self,
        exc: Exception,
        provider: TranslationProvider | None,
        content_kind: ContentKind | None,
    ) -> TranslationOutcome:
        if provider is not None:
            provider.notify(TranslationEvent.FAILED)
        elif self._listener is not None:
            try:
                self._listener(TranslationEvent.FAILED)
            except Exception:
                logger.warning("Event listener failed", exc_info=True)

        outcome = TranslationOutcome(
            ok=False,
            content_kind=content_kind,
            provider=provider.name if provider is not None else None,
            error=exc,
        )
        await self._notify(FAILURE_TITLE, outcome.message)
        return outcome

    async def _notify(self, title: str, message: str) -> None:
        try:
            await self._notifier.notify(title, message)
        except Exception:
            logger.warning("Could not notify the user", exc_info=True)
