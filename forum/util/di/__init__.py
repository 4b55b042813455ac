"""Dependency injection.

``PROVIDERS`` lists every provider of the application. Production code
builds its container from the production implementations
(``create_container``); tests pick mocks per component.
"""

from typing import Type

from forum.util.di.application import ProdApplicationProvider
from forum.util.di.base import Component, ProviderBase
from forum.util.di.core import ProdConfigProvider
from forum.util.di.domain import ProdDomainProvider
from forum.util.di.infrastructure import (
    CacheProvider,
    MessagingProvider,
    PersistenceProvider,
    ProdCacheProvider,
    ProdMessagingProvider,
    ProdPersistenceProvider,
    RealtimeProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    RealtimeProvider,
    # Swappable for tests
    PersistenceProvider,
    CacheProvider,
    MessagingProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider list entry to the class to instantiate.

    Args:
        base: Entry of ``PROVIDERS``
        use_mock: Pick the mock implementation of a swappable component

    Returns:
        Provider class (not instantiated)

    Raises:
        ValueError: If requested implementation not found
    """
    return base.implementation(use_mock)


def swappable_components() -> set[str]:
    """Names of every component that has a mock implementation."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.is_swappable() and base.__mock_component__
    }


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "swappable_components",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "RealtimeProvider",
    "CacheProvider",
    "MessagingProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdMessagingProvider",
    "ProdPersistenceProvider",
]
