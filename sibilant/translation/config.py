"""Configuration dataclasses and factory function for translation providers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Mapping, Union

from sibilant.translation.errors import (
    CapabilityUnsupportedError,
    ProviderNotFoundError,
    UnsupportedProviderKindError,
)

if TYPE_CHECKING:
    from sibilant.translation.base import EventListener, TranslationProvider


class ProviderKind(str, Enum):
    """Available translation provider types."""

    CLOUD = "cloud"
    LOCAL_SERVICE = "local-service"
    LOCAL_COMMAND = "local-command"


KIND_ALIASES: dict[str, ProviderKind] = {
    "cloud": ProviderKind.CLOUD,
    "openai": ProviderKind.CLOUD,
    "local-service": ProviderKind.LOCAL_SERVICE,
    "libretranslate": ProviderKind.LOCAL_SERVICE,
    "local-command": ProviderKind.LOCAL_COMMAND,
    "local": ProviderKind.LOCAL_COMMAND,
    "command": ProviderKind.LOCAL_COMMAND,
}


@dataclass(frozen=True)
class CloudProviderConfig:
    """Configuration for a hosted chat-completion API (OpenAI or compatible)."""

    kind: ClassVar[ProviderKind] = ProviderKind.CLOUD

    title: str
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    base_url: str | None = None
    timeout: float = 60.0


@dataclass(frozen=True)
class LocalServiceProviderConfig:
    """Configuration for a self-hosted LibreTranslate-compatible server."""

    kind: ClassVar[ProviderKind] = ProviderKind.LOCAL_SERVICE

    title: str
    base_url: str = "http://localhost:5000"
    api_key: str | None = None
    timeout: float = 30.0
    health_timeout: float = 2.0


@dataclass(frozen=True)
class LocalCommandProviderConfig:
    """Configuration for an arbitrary command-line translator."""

    kind: ClassVar[ProviderKind] = ProviderKind.LOCAL_COMMAND

    title: str
    command: str
    args: tuple[str, ...] = ("{text}",)
    timeout: float = 60.0


@dataclass(frozen=True)
class UnknownProviderConfig:
    """A configured provider whose type is not recognised."""

    kind: str
    title: str


ProviderConfig = Union[
    CloudProviderConfig,
    LocalServiceProviderConfig,
    LocalCommandProviderConfig,
    UnknownProviderConfig,
]


@dataclass(frozen=True)
class TranslationConfig:
    """Which provider to use and which language to translate into."""

    provider: str
    target_language: str = "en"


def _provider_class(kind: ProviderKind | str) -> type[TranslationProvider] | None:
    # Import here to avoid circular imports
    from sibilant.translation.cloud import CloudProvider
    from sibilant.translation.command import LocalCommandProvider
    from sibilant.translation.libretranslate import LibreTranslateProvider

    classes: dict[ProviderKind, type[TranslationProvider]] = {
        ProviderKind.CLOUD: CloudProvider,
        ProviderKind.LOCAL_SERVICE: LibreTranslateProvider,
        ProviderKind.LOCAL_COMMAND: LocalCommandProvider,
    }
    if not isinstance(kind, ProviderKind):
        return None
    return classes.get(kind)


def get_provider(
    provider_id: str,
    providers: Mapping[str, ProviderConfig],
    *,
    require_images: bool = False,
    listener: EventListener | None = None,
) -> TranslationProvider:
    """Factory function: returns a configured provider instance.

    Args:
        provider_id: Key of the provider in ``providers``.
        providers: All configured providers, keyed by id.
        require_images: Reject providers without image translation support.
        listener: Optional callback for the provider's ``notify`` hook.

    Returns:
        A concrete TranslationProvider instance.

    Raises:
        ProviderNotFoundError: If ``provider_id`` is not configured.
        UnsupportedProviderKindError: If the configured type is unknown.
        CapabilityUnsupportedError: If images are required but unsupported.
    """
    config = providers.get(provider_id)
    if config is None:
        raise ProviderNotFoundError(provider_id, list(providers))

    provider_cls = _provider_class(config.kind)
    if provider_cls is None:
        kind = config.kind.value if isinstance(config.kind, ProviderKind) else str(config.kind)
        raise UnsupportedProviderKindError(provider_id, kind)

    if require_images and not provider_cls.supports_images:
        raise CapabilityUnsupportedError(config.title or provider_id)

    return provider_cls(config, listener=listener)
