"""Clipboard module: text and image access."""

from sibilant.clipboard.manager import (
    Clipboard,
    ClipboardBackend,
    ClipboardContent,
    ClipboardError,
    ContentKind,
    detect_content,
    stage_image,
)

__all__ = [
    "Clipboard",
    "ClipboardBackend",
    "ClipboardContent",
    "ClipboardError",
    "ContentKind",
    "detect_content",
    "stage_image",
]
