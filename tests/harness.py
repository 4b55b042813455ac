"""Environment fixtures for unit, integration and e2e tests.

Unmocked components connect to the services configured in the environment
(.env or exported variables), which must already be running.
"""

import pytest_asyncio

from forum.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Make a fixture yielding a request-scoped container.

    Each test gets a fresh app container, closed after the test so the hub,
    the task pool and the vote workers are stopped.

    Args:
        unmock: Components to use real implementations for

    Usage:
        # Unit tests - everything in memory
        unit_env = create_env_fixture()

        # Integration tests - real PostgreSQL
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_save(integration_env):
            repo = await integration_env.get(PostRepository)
            ...
    """

    @pytest_asyncio.fixture
    async def _environment():
        container = build_test_container(unmock=unmock)
        try:
            async with container() as request_container:
                yield request_container
        finally:
            await container.close()

    return _environment
