"""Translation providers (Strategy pattern for swappable translation backends)."""

from sibilant.translation.base import (
    ImagePayload,
    ImageTranslation,
    TranslationEvent,
    TranslationProvider,
    TranslationRequest,
)
from sibilant.translation.cloud import CloudProvider
from sibilant.translation.command import LocalCommandProvider
from sibilant.translation.config import (
    CloudProviderConfig,
    LocalCommandProviderConfig,
    LocalServiceProviderConfig,
    ProviderConfig,
    ProviderKind,
    TranslationConfig,
    UnknownProviderConfig,
    get_provider,
)
from sibilant.translation.errors import (
    BackendError,
    CapabilityUnsupportedError,
    EmptyResponseError,
    MalformedResponseError,
    MissingApiKeyError,
    NoContentError,
    ProviderNotFoundError,
    ServiceUnavailableError,
    TranslationError,
    UnsupportedProviderKindError,
)
from sibilant.translation.libretranslate import LibreTranslateProvider

__all__ = [
    "BackendError",
    "CapabilityUnsupportedError",
    "CloudProvider",
    "CloudProviderConfig",
    "EmptyResponseError",
    "ImagePayload",
    "ImageTranslation",
    "LibreTranslateProvider",
    "LocalCommandProvider",
    "LocalCommandProviderConfig",
    "LocalServiceProviderConfig",
    "MalformedResponseError",
    "MissingApiKeyError",
    "NoContentError",
    "ProviderConfig",
    "ProviderKind",
    "ProviderNotFoundError",
    "ServiceUnavailableError",
    "TranslationConfig",
    "TranslationError",
    "TranslationEvent",
    "TranslationProvider",
    "TranslationRequest",
    "UnknownProviderConfig",
    "UnsupportedProviderKindError",
    "get_provider",
]
