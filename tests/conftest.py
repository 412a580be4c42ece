"""Shared pytest fixtures for sibilant tests."""

from __future__ import annotations

import sys

import pytest

from sibilant.settings import NotificationConfig, Settings
from sibilant.notify import NotificationStyle
from sibilant.translation.base import ImagePayload
from sibilant.translation.config import (
    CloudProviderConfig,
    LocalCommandProviderConfig,
    LocalServiceProviderConfig,
    TranslationConfig,
)

from fakes import PNG_BYTES


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SIBILANT_CONFIG", "SIBILANT_PROVIDER", "SIBILANT_TARGET_LANGUAGE", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cloud_config():
    return CloudProviderConfig(title="OpenAI", api_key="sk-test", model="gpt-4o-mini")


@pytest.fixture
def service_config():
    return LocalServiceProviderConfig(title="LibreTranslate", base_url="http://libre.test")


@pytest.fixture
def command_config():
    return LocalCommandProviderConfig(
        title="python",
        command=sys.executable,
        args=("-c", "import sys; print('Bonjour')", "--to", "{targetLanguage}", "{text}"),
    )


@pytest.fixture
def make_settings(cloud_config, service_config, command_config):
    def _make(provider: str = "open-ai", target_language: str = "en") -> Settings:
        return Settings(
            providers={
                "open-ai": cloud_config,
                "libre": service_config,
                "local-translate": command_config,
            },
            translation=TranslationConfig(provider=provider, target_language=target_language),
            notifications=NotificationConfig(style=NotificationStyle.NONE, sounds={}),
        )

    return _make


@pytest.fixture
def png_payload():
    return ImagePayload(data=PNG_BYTES)
