"""Cloud translation provider using the OpenAI chat-completion API."""

from __future__ import annotations

import json
import logging
import re
import time

import httpx
import openai
from openai import AsyncOpenAI

from sibilant.translation.base import (
    EventListener,
    ImagePayload,
    ImageTranslation,
    TranslationProvider,
)
from sibilant.translation.config import CloudProviderConfig
from sibilant.translation.errors import (
    BackendError,
    EmptyResponseError,
    MalformedResponseError,
    MissingApiKeyError,
)

logger = logging.getLogger(__name__)

TRANSLATION_PROMPT = """\
Translate the following text to {target_language}. \
Return ONLY the translated text, with no additional commentary, explanations, or notes.
Preserve the original formatting and paragraph structure.

Text to translate:
{text}"""

IMAGE_PROMPT = (
    "Recognize the text in this image and translate it to {target_language}. "
    'Return ONLY a JSON object with two string fields: "text" holding the '
    'recognized text and "translation" holding its translation.'
)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class CloudProvider(TranslationProvider):
    """Translation provider backed by a hosted chat-completion endpoint."""

    supports_images = True

    def __init__(
        self,
        config: CloudProviderConfig,
        listener: EventListener | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(listener)
        if not config.api_key:
            raise MissingApiKeyError(config.title)
        self._config = config
        self._client = AsyncOpenAI(
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def translate(self, text: str, target_language: str) -> str:
        """Translate text with a single user message.

        Raises:
            EmptyResponseError: If the completion has no content.
            BackendError: If the API call fails.
        """
        prompt = TRANSLATION_PROMPT.format(
            target_language=target_language,
            text=text,
        )
        content = await self._complete(
            [{"role": "user", "content": prompt}],
            payload_size=len(text),
        )
        return content

    async def translate_image(
        self,
        image: ImagePayload,
        target_language: str,
    ) -> ImageTranslation:
        """Recognise and translate the text in an image in one request.

        Raises:
            EmptyResponseError: If the completion has no content.
            MalformedResponseError: If the reply is not the expected JSON object.
            BackendError: If the API call fails.
        """
        message = {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": IMAGE_PROMPT.format(target_language=target_language),
                },
                {
                    "type": "image_url",
                    "image_url": {"url": image.to_data_uri()},
                },
            ],
        }
        content = await self._complete([message], payload_size=image.size)
        return _parse_image_reply(content)

    async def list_models(self) -> list[tuple[str, int]]:
        """Return ``(model_id, created)`` pairs sorted by id."""
        try:
            page = await self._client.models.list()
        except openai.APIError as exc:
            raise _backend_error(exc) from exc
        return sorted((model.id, model.created) for model in page.data)

    async def close(self) -> None:
        await self._client.close()

    async def _complete(self, messages: list[dict], payload_size: int) -> str:
        logger.info(
            "Sending %d byte(s) to %s (model: %s)",
            payload_size,
            self._config.title,
            self._config.model,
        )
        start_time = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=messages,
            )
        except openai.APIError as exc:
            raise _backend_error(exc) from exc
        logger.info("Completion received in %.2fs", time.perf_counter() - start_time)

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if content is None or not content.strip():
            raise EmptyResponseError(f"{self._config.title} returned an empty response")
        return content.strip()

    @property
    def name(self) -> str:
        return self._config.title


def _backend_error(exc: openai.APIError) -> BackendError:
    status = exc.status_code if isinstance(exc, openai.APIStatusError) else None
    detail = exc.message
    prefix = f"HTTP {status}: " if status is not None else ""
    return BackendError(f"Cloud translation failed: {prefix}{detail}", status=status, detail=detail)


def _parse_image_reply(content: str) -> ImageTranslation:
    """Parse the JSON object returned for an image translation.

    Models sometimes wrap the object in a markdown code fence; it is removed
    before decoding.
    """
    match = _CODE_FENCE_RE.match(content)
    if match:
        content = match.group(1)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Image translation reply is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedResponseError("Image translation reply is not a JSON object")

    text = data.get("text")
    translation = data.get("translation")
    if not isinstance(text, str) or not isinstance(translation, str):
        raise MalformedResponseError(
            'Image translation reply must contain string fields "text" and "translation"'
        )
    if not translation.strip():
        raise EmptyResponseError("Image translation reply has an empty translation")

    return ImageTranslation(text=text.strip(), translation=translation.strip())
