"""System clipboard access for text and images."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

import pyperclip
from PIL import Image, ImageGrab

from sibilant.translation.base import ImagePayload
from sibilant.translation.errors import NoContentError, TranslationError

logger = logging.getLogger(__name__)


class ClipboardError(TranslationError):
    """The system clipboard could not be read or written."""


class ContentKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class ClipboardContent:
    """What was found on the clipboard at the start of an invocation."""

    kind: ContentKind
    text: str | None = None
    image: ImagePayload | None = None


class ClipboardBackend(Protocol):
    """Anything that can read and write the clipboard."""

    def read(self) -> str: ...

    def write(self, text: str) -> None: ...

    def read_image(self) -> ImagePayload | None: ...


class Clipboard:
    """Clipboard backed by ``pyperclip`` (text) and Pillow's ``ImageGrab`` (images)."""

    def read(self) -> str:
        """Return the clipboard text, or "" when there is none."""
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Could not read the clipboard: {exc}") from exc
        return text or ""

    def write(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Could not write to the clipboard: {exc}") from exc
        logger.debug("Wrote %d character(s) to the clipboard", len(text))

    def read_image(self) -> ImagePayload | None:
        """Return the clipboard image as PNG bytes, or None if there is no image.

        Platforms without image clipboard support (e.g. Linux without
        ``wl-paste``/``xclip``) are treated as "no image".
        """
        try:
            grabbed = ImageGrab.grabclipboard()
        except (OSError, NotImplementedError) as exc:
            logger.debug("Image clipboard unavailable: %s", exc)
            return None

        # A list means file names were copied, not image data.
        if not isinstance(grabbed, Image.Image):
            return None

        try:
            return stage_image(grabbed)
        finally:
            grabbed.close()


def stage_image(image: Image.Image) -> ImagePayload:
    """Encode an image as PNG through a temporary file.

    The temporary file is removed on every path, including failures while
    encoding or reading it back.
    """
    with tempfile.NamedTemporaryFile(
        suffix=".png",
        prefix="sibilant_clipboard_",
        delete=False,
    ) as tmp:
        tmp_path = tmp.name

    try:
        image.save(tmp_path, "PNG")
        data = Path(tmp_path).read_bytes()
    finally:
        os.unlink(tmp_path)

    logger.info("Captured clipboard image: %dx%d, %d bytes", image.width, image.height, len(data))
    return ImagePayload(data=data, mime_type="image/png")


def detect_content(clipboard: ClipboardBackend) -> ClipboardContent:
    """Decide what to translate: an image if there is one, otherwise text.

    Images are probed first because most applications also put a text
    representation on the clipboard.

    Raises:
        NoContentError: If the clipboard holds neither an image nor any text.
    """
    image = clipboard.read_image()
    if image is not None:
        return ClipboardContent(kind=ContentKind.IMAGE, image=image)

    text = clipboard.read()
    if text:
        return ClipboardContent(kind=ContentKind.TEXT, text=text)

    raise NoContentError()
