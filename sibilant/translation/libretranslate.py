"""Self-hosted translation provider for LibreTranslate-compatible servers."""

from __future__ import annotations

import logging
import time

import httpx

from sibilant.translation.base import EventListener, TranslationProvider
from sibilant.translation.config import LocalServiceProviderConfig
from sibilant.translation.errors import (
    BackendError,
    EmptyResponseError,
    MalformedResponseError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)


class LibreTranslateProvider(TranslationProvider):
    """Translates text through a local HTTP translation service.

    Every translation is preceded by a ``GET /languages`` probe with a short
    timeout so a dead server fails fast instead of hanging the hotkey.
    """

    def __init__(
        self,
        config: LocalServiceProviderConfig,
        listener: EventListener | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(listener)
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._transport = transport

    async def translate(self, text: str, target_language: str) -> str:
        """Translate text with ``POST /translate`` after a successful probe.

        Raises:
            ServiceUnavailableError: If the health probe fails.
            BackendError: If the server rejects the request.
            MalformedResponseError: If the reply lacks ``translatedText``.
            EmptyResponseError: If ``translatedText`` is blank.
        """
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._config.timeout,
            transport=self._transport,
        ) as client:
            await self._check_health(client)
            return await self._translate(client, text, target_language)

    async def _check_health(self, client: httpx.AsyncClient) -> None:
        url = f"{self._base_url}/languages"
        try:
            resp = await client.get("/languages", timeout=self._config.health_timeout)
        except httpx.HTTPError as exc:
            raise ServiceUnavailableError(url, str(exc) or type(exc).__name__) from exc
        if not resp.is_success:
            raise ServiceUnavailableError(url, f"HTTP {resp.status_code}")
        logger.debug("Health probe OK: %s", url)

    async def _translate(
        self,
        client: httpx.AsyncClient,
        text: str,
        target_language: str,
    ) -> str:
        payload = {
            "q": text,
            "source": "auto",
            "target": target_language,
            "format": "text",
        }
        if self._config.api_key:
            payload["api_key"] = self._config.api_key

        logger.info("Sending %d character(s) to %s", len(text), self._config.title)
        start_time = time.perf_counter()
        try:
            resp = await client.post("/translate", json=payload)
        except httpx.HTTPError as exc:
            raise BackendError(f"{self._config.title} request failed: {exc}") from exc
        logger.info(
            "%s answered HTTP %d in %.2fs",
            self._config.title,
            resp.status_code,
            time.perf_counter() - start_time,
        )

        if not resp.is_success:
            detail = _error_message(resp)
            message = f"{self._config.title} returned HTTP {resp.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise BackendError(message, status=resp.status_code, detail=detail)

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"{self._config.title} returned a non-JSON body") from exc

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            raise MalformedResponseError(
                f"{self._config.title} response has no 'translatedText' field"
            )
        if not translated.strip():
            raise EmptyResponseError(f"{self._config.title} returned an empty translation")
        return translated.strip()

    @property
    def name(self) -> str:
        return self._config.title


def _error_message(resp: httpx.Response) -> str | None:
    """Extract the ``error`` field LibreTranslate puts in failure bodies."""
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return None
