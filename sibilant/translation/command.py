"""Local command-line translation provider using subprocess invocation.

The executable is started directly (no shell), so clipboard text is passed as a
single argument and never interpreted by a shell.
"""

from __future__ import annotations

import asyncio
import logging
import time

from sibilant.translation.base import EventListener, TranslationProvider
from sibilant.translation.config import LocalCommandProviderConfig
from sibilant.translation.errors import BackendError, EmptyResponseError

logger = logging.getLogger(__name__)

PLACEHOLDERS = ("{text}", "{targetLanguage}", "{target_language}")


class LocalCommandProvider(TranslationProvider):
    """Translation provider that shells out to a configured executable."""

    def __init__(
        self,
        config: LocalCommandProviderConfig,
        listener: EventListener | None = None,
    ) -> None:
        super().__init__(listener)
        self._config = config

    def build_args(self, text: str, target_language: str) -> list[str]:
        """Substitute the text and target language into the argument template."""
        return [
            arg.replace("{targetLanguage}", target_language)
            .replace("{target_language}", target_language)
            .replace("{text}", text)
            for arg in self._config.args
        ]

    async def translate(self, text: str, target_language: str) -> str:
        """Translate text by running the configured command.

        Standard output is the translation; anything on standard error is
        logged as a warning.

        Raises:
            BackendError: If the command cannot be started, times out or exits
                with a non-zero status.
            EmptyResponseError: If the command printed nothing.
        """
        args = self.build_args(text, target_language)
        logger.info("Running %s (%s)", self._config.command, self._config.title)
        start_time = time.perf_counter()

        proc: asyncio.subprocess.Process | None = None
        try:
            proc = await asyncio.create_subprocess_exec(
                self._config.command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(),
                timeout=self._config.timeout,
            )
        except asyncio.TimeoutError:
            if proc is not None:
                proc.kill()
                await proc.wait()
            raise BackendError(
                f"{self._config.title} timed out after {self._config.timeout}s"
            ) from None
        except OSError as exc:
            raise BackendError(
                f"Could not run {self._config.command} ({self._config.title}): {exc}"
            ) from exc

        duration = time.perf_counter() - start_time
        logger.info("%s finished in %.2fs (exit %d)", self._config.command, duration, proc.returncode)

        stderr_text = stderr_bytes.decode(errors="replace").strip()
        if stderr_text:
            logger.warning("%s stderr: %s", self._config.title, stderr_text)

        if proc.returncode != 0:
            raise BackendError(
                f"{self._config.title} exited with code {proc.returncode}"
                + (f": {stderr_text}" if stderr_text else ""),
                status=proc.returncode,
                detail=stderr_text or None,
            )

        translated = stdout_bytes.decode(errors="replace").strip()
        if not translated:
            raise EmptyResponseError(f"{self._config.title} printed no translation")
        return translated

    @property
    def name(self) -> str:
        return self._config.title
