"""Messaging infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from forum.adapter.messaging import KafkaVoteTransport
from forum.application.pipeline import VoteTransport
from forum.config import MessagingSettings
from forum.util.di.base import ProviderBase


class MessagingProvider(ProviderBase):
    """Messaging component base."""

    __mock_component__ = "messaging"


class ProdMessagingProvider(MessagingProvider):
    """Production messaging provider using Kafka."""

    __is_mock__ = False

    scope = Scope.APP

    @provide
    async def get_vote_transport(
        self, settings: MessagingSettings
    ) -> AsyncIterator[VoteTransport]:
        """Provide the vote transport, connected for the app's lifetime."""
        transport = KafkaVoteTransport(settings)
        await transport.start()
        yield transport
        await transport.close()
