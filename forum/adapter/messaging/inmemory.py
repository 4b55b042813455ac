"""In-memory vote transport for testing."""

import asyncio
from typing import Optional

from forum.application.pipeline.transport import VoteSubscription, VoteTransport
from forum.domain.model.vote import VoteIntent


class InMemoryVoteSubscription(VoteSubscription):
    """Queue-backed subscription; one per consumer."""

    def __init__(self, transport: "InMemoryVoteTransport") -> None:
        self._transport = transport
        self._queue: asyncio.Queue[Optional[VoteIntent]] = asyncio.Queue()
        self._in_progress = False
        self._closed = False

    def deliver(self, intent: VoteIntent) -> None:
        self._queue.put_nowait(intent)

    async def join(self) -> None:
        """Wait until every delivered intent has been handled."""
        await self._queue.join()

    async def __anext__(self) -> VoteIntent:
        # Asking for the next intent acknowledges the previous one
        if self._in_progress:
            self._in_progress = False
            self._queue.task_done()
        if self._closed:
            raise StopAsyncIteration

        intent = await self._queue.get()
        if intent is None:
            self._queue.task_done()
            raise StopAsyncIteration
        self._in_progress = True
        return intent

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._transport.detach(self)
        self._queue.put_nowait(None)


class InMemoryVoteTransport(VoteTransport):
    """In-memory implementation of VoteTransport for testing.

    Intents are partitioned across subscriptions by subject ID, like keyed
    Kafka messages. Intents published before anyone subscribes are held
    until the first subscription.
    """

    def __init__(self) -> None:
        self.published: list[VoteIntent] = []
        self.dead_letters: list[tuple[VoteIntent, str]] = []
        self.started = False
        self._subscriptions: list[InMemoryVoteSubscription] = []
        self._pending: list[VoteIntent] = []

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        for subscription in list(self._subscriptions):
            await subscription.close()
        self.started = False

    async def publish(self, intent: VoteIntent) -> None:
        self.published.append(intent)
        if not self._subscriptions:
            self._pending.append(intent)
            return
        partition = hash(str(intent.subject_id)) % len(self._subscriptions)
        self._subscriptions[partition].deliver(intent)

    async def publish_dead_letter(self, intent: VoteIntent, reason: str) -> None:
        self.dead_letters.append((intent, reason))

    async def subscribe(self) -> InMemoryVoteSubscription:
        subscription = InMemoryVoteSubscription(self)
        self._subscriptions.append(subscription)
        for intent in self._pending:
            subscription.deliver(intent)
        self._pending = []
        return subscription

    def detach(self, subscription: InMemoryVoteSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def join(self) -> None:
        """Wait until all subscriptions have handled their intents."""
        for subscription in list(self._subscriptions):
            await subscription.join()
