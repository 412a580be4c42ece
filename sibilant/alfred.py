"""Alfred script-filter output."""

from __future__ import annotations

import json

from sibilant.app import TranslationOutcome


def script_filter(outcome: TranslationOutcome) -> str:
    """Render an outcome as Alfred script-filter JSON.

    A successful translation becomes an actionable item whose ``arg`` is the
    translated text; a failure becomes a non-actionable item.
    """
    if outcome.ok:
        item = {
            "uid": "translation",
            "title": outcome.translation,
            "subtitle": f"{outcome.provider}: {outcome.original}" if outcome.original else outcome.provider,
            "arg": outcome.translation,
            "text": {"copy": outcome.translation, "largetype": outcome.translation},
            "valid": True,
        }
    else:
        item = {
            "uid": "error",
            "title": "Translation Error",
            "subtitle": outcome.message,
            "valid": False,
        }
    return json.dumps({"items": [item]}, ensure_ascii=False)


def script_filter_error(message: str) -> str:
    """Render a failure that happened before any outcome existed."""
    return script_filter(TranslationOutcome(ok=False, error=RuntimeError(message)))
