"""Mock providers for testing."""

from .cache import MockCacheProvider
from .messaging import MockMessagingProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockCacheProvider",
    "MockMessagingProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
