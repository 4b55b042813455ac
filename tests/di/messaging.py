"""Mock messaging providers for testing."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from forum.adapter.messaging import InMemoryVoteTransport
from forum.application.pipeline import VoteTransport
from forum.util.di.infrastructure.messaging import MessagingProvider


class MockMessagingProvider(MessagingProvider):
    """Mock messaging provider using the in-memory vote transport."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    async def get_vote_transport(self) -> AsyncIterator[VoteTransport]:
        """Provide in-memory vote transport."""
        transport = InMemoryVoteTransport()
        await transport.start()
        yield transport
        await transport.close()
