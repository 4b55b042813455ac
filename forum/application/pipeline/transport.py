"""Vote intent transport interface.

The transport carries serialized vote intents from request handlers to the
pipeline workers. Delivery is at-least-once and ordering is only guaranteed
per subject (the partition key).
"""

from abc import ABC, abstractmethod

from forum.domain.model.vote import VoteIntent


class VoteSubscription(ABC):
    """Async iterator over intents delivered to one consumer."""

    def __aiter__(self) -> "VoteSubscription":
        return self

    @abstractmethod
    async def __anext__(self) -> VoteIntent:
        """Wait for the next intent.

        Raises:
            StopAsyncIteration: Once the subscription is closed
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Leave the consumer group and release resources."""
        pass


class VoteTransport(ABC):
    """Publishes vote intents and hands out subscriptions to them."""

    @abstractmethod
    async def start(self) -> None:
        """Connect to the broker."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Flush pending publishes and disconnect."""
        pass

    @abstractmethod
    async def publish(self, intent: VoteIntent) -> None:
        """Publish an intent for the workers.

        Raises:
            TransportError: If the broker did not acknowledge the message
        """
        pass

    @abstractmethod
    async def publish_dead_letter(self, intent: VoteIntent, reason: str) -> None:
        """Park a failed intent together with the failure reason.

        Raises:
            TransportError: If the broker did not acknowledge the message
        """
        pass

    @abstractmethod
    async def subscribe(self) -> VoteSubscription:
        """Open a new consumer on the vote topic."""
        pass
