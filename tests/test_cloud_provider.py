"""Tests for the OpenAI chat-completion provider."""

import dataclasses
import json

import httpx
import openai
import pytest

from sibilant.translation.cloud import CloudProvider, _parse_image_reply
from sibilant.translation.errors import (
    BackendError,
    EmptyResponseError,
    MalformedResponseError,
    MissingApiKeyError,
)

from fakes import OpenAIStub


def _user_message(request: dict) -> dict:
    assert len(request["messages"]) == 1
    message = request["messages"][0]
    assert message["role"] == "user"
    return message


class TestTextTranslation:
    @pytest.mark.asyncio
    async def test_single_request_carries_text_and_language(self, cloud_config):
        stub = OpenAIStub(content="  Hello\n")
        provider = CloudProvider(cloud_config, http_client=stub.client())

        result = await provider.translate("Hola", "en")

        assert result == "Hello"
        assert len(stub.requests) == 1
        request = stub.requests[0]
        assert request["model"] == "gpt-4o-mini"
        content = _user_message(request)["content"]
        assert "Hola" in content
        assert "to en." in content

    @pytest.mark.asyncio
    async def test_empty_text_is_still_sent(self, cloud_config):
        stub = OpenAIStub(content="(empty)")
        provider = CloudProvider(cloud_config, http_client=stub.client())

        assert await provider.translate("", "en") == "(empty)"
        assert len(stub.requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   \n"])
    async def test_blank_content_raises(self, cloud_config, content):
        stub = OpenAIStub(content=content)
        provider = CloudProvider(cloud_config, http_client=stub.client())

        with pytest.raises(EmptyResponseError):
            await provider.translate("Hola", "en")

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped_with_cause(self, cloud_config):
        stub = OpenAIStub(
            status=401,
            body={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}},
        )
        provider = CloudProvider(cloud_config, http_client=stub.client())

        with pytest.raises(BackendError) as excinfo:
            await provider.translate("Hola", "en")

        assert excinfo.value.status == 401
        assert isinstance(excinfo.value.__cause__, openai.AuthenticationError)
        # No retries.
        assert len(stub.requests) == 1

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self, cloud_config):
        stub = OpenAIStub(status=503)
        provider = CloudProvider(cloud_config, http_client=stub.client())

        with pytest.raises(BackendError) as excinfo:
            await provider.translate("Hola", "en")

        assert excinfo.value.status == 503
        assert len(stub.requests) == 1


class TestImageTranslation:
    @pytest.mark.asyncio
    async def test_image_is_sent_as_data_uri(self, cloud_config, png_payload):
        reply = json.dumps({"text": "Hola mundo", "translation": "Hello world"})
        stub = OpenAIStub(content=reply)
        provider = CloudProvider(cloud_config, http_client=stub.client())

        result = await provider.translate_image(png_payload, "en")

        assert result.text == "Hola mundo"
        assert result.translation == "Hello world"
        parts = _user_message(stub.requests[0])["content"]
        assert parts[0]["type"] == "text"
        assert "translate it to en." in parts[0]["text"]
        assert "JSON" in parts[0]["text"]
        assert parts[1]["type"] == "image_url"
        assert parts[1]["image_url"]["url"] == png_payload.to_data_uri()
        assert parts[1]["image_url"]["url"].startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_non_json_reply_is_malformed(self, cloud_config, png_payload):
        stub = OpenAIStub(content="Hello world")
        provider = CloudProvider(cloud_config, http_client=stub.client())

        with pytest.raises(MalformedResponseError):
            await provider.translate_image(png_payload, "en")

    def test_supports_images(self, cloud_config):
        assert CloudProvider.supports_images is True


class TestImageReplyParsing:
    def test_code_fence_is_tolerated(self):
        reply = '```json\n{"text": "Hola", "translation": "Hello"}\n```'
        result = _parse_image_reply(reply)
        assert (result.text, result.translation) == ("Hola", "Hello")

    def test_missing_field_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            _parse_image_reply('{"text": "Hola"}')

    def test_non_object_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            _parse_image_reply('["Hola", "Hello"]')

    def test_blank_translation_is_empty(self):
        with pytest.raises(EmptyResponseError):
            _parse_image_reply('{"text": "Hola", "translation": " "}')


class TestListModels:
    @pytest.mark.asyncio
    async def test_models_sorted_by_id(self, cloud_config):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/models")
            return httpx.Response(
                200,
                json={
                    "object": "list",
                    "data": [
                        {"id": "gpt-4o", "object": "model", "created": 1715367049, "owned_by": "system"},
                        {"id": "dall-e-3", "object": "model", "created": 1698785189, "owned_by": "system"},
                    ],
                },
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = CloudProvider(cloud_config, http_client=client)

        models = await provider.list_models()

        assert models == [("dall-e-3", 1698785189), ("gpt-4o", 1715367049)]


class TestLifecycle:
    def test_missing_api_key_rejected(self, cloud_config):
        with pytest.raises(MissingApiKeyError):
            CloudProvider(dataclasses.replace(cloud_config, api_key=None))

    @pytest.mark.asyncio
    async def test_close_releases_http_client(self, cloud_config):
        stub = OpenAIStub()
        provider = CloudProvider(cloud_config, http_client=stub.client())

        await provider.translate("Hola", "en")
        await provider.close()

        assert stub.clients[0].is_closed
