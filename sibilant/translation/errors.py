"""Error hierarchy for clipboard translation.

Every failure that ends an invocation derives from ``TranslationError`` so the
entry point can report it to the user with a single ``except`` clause.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for all translation failures."""


class NoContentError(TranslationError):
    """The clipboard holds neither usable text nor an image."""

    def __init__(self, message: str = "Clipboard is empty: nothing to translate.") -> None:
        super().__init__(message)


class ProviderNotFoundError(TranslationError):
    """The requested provider id is not present in the configuration."""

    def __init__(self, provider_id: str, available: list[str] | None = None) -> None:
        self.provider_id = provider_id
        self.available = sorted(available or [])
        known = ", ".join(self.available) if self.available else "(none configured)"
        super().__init__(f"Provider '{provider_id}' not found. Available: {known}")


class UnsupportedProviderKindError(TranslationError):
    """The provider id exists but its kind cannot be constructed."""

    def __init__(self, provider_id: str, kind: str) -> None:
        self.provider_id = provider_id
        self.kind = kind
        super().__init__(f"Provider '{provider_id}' has unsupported type '{kind}'")


class CapabilityUnsupportedError(TranslationError):
    """The provider does not support the requested capability (e.g. images)."""

    def __init__(self, provider: str, capability: str = "image translation") -> None:
        self.provider = provider
        self.capability = capability
        super().__init__(f"{provider} does not support {capability}")


class MissingApiKeyError(TranslationError):
    """A cloud provider was selected but no API key is configured."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(
            f"{provider} needs an API key: set 'apiKey' or the OPENAI_API_KEY environment variable"
        )


class ServiceUnavailableError(TranslationError):
    """A self-hosted backend failed its health probe."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Translation service at {url} is unavailable: {reason}")


class BackendError(TranslationError):
    """Transport, API or subprocess failure.

    ``status`` carries the upstream HTTP status or process exit code when one
    is known, ``detail`` the upstream error message.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.status = status
        self.detail = detail
        super().__init__(message)


class EmptyResponseError(TranslationError):
    """The backend answered but produced no text."""


class MalformedResponseError(TranslationError):
    """The backend answered with content that could not be interpreted."""
