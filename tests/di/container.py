"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from forum.util.di import PROVIDERS, Component, swappable_components

# Importing the mock providers registers them as subclasses of their bases
from tests.di.cache import MockCacheProvider  # noqa: F401
from tests.di.messaging import MockMessagingProvider  # noqa: F401
from tests.di.persistence import MockPersistenceProvider  # noqa: F401


def build_test_container(
    unmock: set[Component] | None = None, with_fastapi: bool = False
) -> AsyncContainer:
    """Build a container with mocks for every component not in ``unmock``.

    Unmocked components connect to the services configured in the
    environment, which must already be running.

    Args:
        unmock: Components to use production implementations for
        with_fastapi: Include the FastAPI integration provider, for serving
            a test app from the container

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components or dependency violations

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real Redis
        container = build_test_container(unmock={"cache"})
    """
    unmock = unmock or set()
    _validate_unmock(unmock)

    providers = [
        base.implementation(
            use_mock=base.is_swappable() and base.__mock_component__ not in unmock
        )()
        for base in PROVIDERS
    ]
    if with_fastapi:
        providers.append(FastapiProvider())

    return make_async_container(*providers)


def _validate_unmock(unmock: set[Component]) -> None:
    unknown = set(unmock) - swappable_components()
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    for base in PROVIDERS:
        if base.__mock_component__ in unmock:
            missing = base.__depends_on__ - set(unmock)
            if missing:
                raise ValueError(
                    f"Component '{base.__mock_component__}' requires {missing} to be unmocked"
                )
