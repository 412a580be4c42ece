"""Tests for the local command-line provider.

The "translator" is a real child process: the current Python interpreter
running a one-line script.
"""

import dataclasses
import json
import logging

import pytest

from sibilant.translation.command import LocalCommandProvider
from sibilant.translation.errors import (
    BackendError,
    CapabilityUnsupportedError,
    EmptyResponseError,
)

ECHO_ARGS = "import json, sys; print(json.dumps(sys.argv[1:]))"


def _script(command_config, code: str, *template: str) -> LocalCommandProvider:
    config = dataclasses.replace(command_config, args=("-c", code, *template))
    return LocalCommandProvider(config)


class TestTranslate:
    @pytest.mark.asyncio
    async def test_stdout_is_returned_trimmed(self, command_config):
        provider = LocalCommandProvider(command_config)

        assert await provider.translate("Hello", "fr") == "Bonjour"

    @pytest.mark.asyncio
    async def test_template_substitution(self, command_config):
        provider = _script(command_config, ECHO_ARGS, "--to", "{targetLanguage}", "{text}")

        result = await provider.translate("Hola amigo", "en")

        assert json.loads(result) == ["--to", "en", "Hola amigo"]

    @pytest.mark.asyncio
    async def test_text_is_not_interpreted_by_a_shell(self, command_config):
        provider = _script(command_config, ECHO_ARGS, "{text}")
        text = "$(echo pwned); `id` 'quoted' \"double\""

        result = await provider.translate(text, "en")

        assert json.loads(result) == [text]

    def test_build_args_accepts_snake_case_placeholder(self, command_config):
        config = dataclasses.replace(command_config, args=(":{target_language}", "{text}"))

        assert LocalCommandProvider(config).build_args("Hi", "de") == [":de", "Hi"]

    @pytest.mark.asyncio
    async def test_stderr_is_logged_not_raised(self, command_config, caplog):
        code = "import sys; sys.stderr.write('deprecated flag\\n'); print('Bonjour')"
        provider = _script(command_config, code)

        with caplog.at_level(logging.WARNING, logger="sibilant.translation.command"):
            result = await provider.translate("Hello", "fr")

        assert result == "Bonjour"
        assert "deprecated flag" in caplog.text


class TestFailures:
    @pytest.mark.asyncio
    async def test_non_zero_exit(self, command_config):
        code = "import sys; sys.stderr.write('no such language'); sys.exit(3)"
        provider = _script(command_config, code)

        with pytest.raises(BackendError) as excinfo:
            await provider.translate("Hello", "xx")

        assert excinfo.value.status == 3
        assert excinfo.value.detail == "no such language"

    @pytest.mark.asyncio
    async def test_missing_executable(self, command_config):
        config = dataclasses.replace(command_config, command="/nonexistent/translate-cli")

        with pytest.raises(BackendError) as excinfo:
            await LocalCommandProvider(config).translate("Hello", "fr")

        assert isinstance(excinfo.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_empty_output(self, command_config):
        provider = _script(command_config, "pass")

        with pytest.raises(EmptyResponseError):
            await provider.translate("", "fr")

    @pytest.mark.asyncio
    async def test_timeout(self, command_config):
        config = dataclasses.replace(
            command_config,
            args=("-c", "import time; time.sleep(10)"),
            timeout=0.5,
        )

        with pytest.raises(BackendError, match="timed out"):
            await LocalCommandProvider(config).translate("Hello", "fr")

    @pytest.mark.asyncio
    async def test_image_rejected(self, command_config, png_payload):
        with pytest.raises(CapabilityUnsupportedError):
            await LocalCommandProvider(command_config).translate_image(png_payload, "fr")
