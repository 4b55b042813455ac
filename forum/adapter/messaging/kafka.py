"""Kafka vote transport.

kafka-python clients are blocking, so every client call runs on a dedicated
single-thread executor: one for the producer and one per consumer. A
KafkaConsumer must only ever be used from one thread.
"""

import asyncio
import json
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import partial
from typing import Any, Optional

import logfire
from kafka import KafkaConsumer, KafkaProducer
from kafka.errors import KafkaError
from pydantic import ValidationError

from forum.adapter.error import TransportError
from forum.application.pipeline.transport import VoteSubscription, VoteTransport
from forum.config import MessagingSettings
from forum.domain.model.vote import VoteIntent
from forum.util.error import ConfigurationError


class KafkaVoteSubscription(VoteSubscription):
    """One consumer of the vote topic within the consumer group."""

    def __init__(
        self,
        consumer: KafkaConsumer,
        executor: ThreadPoolExecutor,
        settings: MessagingSettings,
    ) -> None:
        self._consumer = consumer
        self._executor = executor
        self._settings = settings
        self._buffer: deque[VoteIntent] = deque()
        self._closed = False

    async def __anext__(self) -> VoteIntent:
        loop = asyncio.get_running_loop()
        while not self._buffer:
            if self._closed:
                raise StopAsyncIteration
            polled = await loop.run_in_executor(
                self._executor,
                partial(
                    self._consumer.poll,
                    timeout_ms=self._settings.poll_timeout_ms,
                    max_records=self._settings.max_poll_records,
                ),
            )
            for records in polled.values():
                for record in records:
                    intent = _decode_intent(record.value)
                    if intent is not None:
                        self._buffer.append(intent)
        return self._buffer.popleft()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self._consumer.close)
        self._executor.shutdown(wait=False)
        logfire.info("Kafka consumer closed", topic=self._settings.vote_topic)


class KafkaVoteTransport(VoteTransport):
    """Vote transport backed by Kafka topics.

    Intents are keyed by subject ID, so all votes on one post or comment land
    on the same partition and are applied in publish order.
    """

    def __init__(self, settings: MessagingSettings) -> None:
        """Initialize Kafka transport.

        Args:
            settings: Messaging configuration

        Raises:
            ConfigurationError: If no brokers are configured
        """
        if not settings.brokers:
            raise ConfigurationError("MESSAGING__BROKERS must name at least one broker")
        self.settings = settings
        self._producer: Optional[KafkaProducer] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kafka-producer")

    async def start(self) -> None:
        if self._producer is not None:
            return
        loop = asyncio.get_running_loop()
        try:
            self._producer = await loop.run_in_executor(
                self._executor,
                partial(
                    KafkaProducer,
                    bootstrap_servers=self.settings.brokers,
                    key_serializer=lambda k: k.encode("utf-8"),
                    value_serializer=lambda v: json.dumps(v).encode("utf-8"),
                    acks="all",
                    retries=3,
                    linger_ms=5,
                ),
            )
        except KafkaError as e:
            raise TransportError(f"Cannot connect to Kafka: {e}") from e
        logfire.info("Kafka producer started", brokers=self.settings.brokers)

    async def close(self) -> None:
        if self._producer is None:
            return
        loop = asyncio.get_running_loop()
        producer, self._producer = self._producer, None
        await loop.run_in_executor(self._executor, producer.close)
        self._executor.shutdown(wait=False)
        logfire.info("Kafka producer closed")

    async def publish(self, intent: VoteIntent) -> None:
        await self._send(
            self.settings.vote_topic,
            str(intent.subject_id),
            intent.model_dump(mode="json"),
        )

    async def publish_dead_letter(self, intent: VoteIntent, reason: str) -> None:
        await self._send(
            self.settings.dead_letter_topic,
            str(intent.subject_id),
            {
                "intent": intent.model_dump(mode="json"),
                "reason": reason,
                "failed_at": datetime.now(timezone.utc).isoformat(),
            },
        )

    async def subscribe(self) -> KafkaVoteSubscription:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kafka-consumer")
        loop = asyncio.get_running_loop()
        try:
            consumer = await loop.run_in_executor(
                executor,
                partial(
                    KafkaConsumer,
                    self.settings.vote_topic,
                    bootstrap_servers=self.settings.brokers,
                    group_id=self.settings.group_id,
                    auto_offset_reset="earliest",
                    enable_auto_commit=True,
                ),
            )
        except KafkaError as e:
            executor.shutdown(wait=False)
            raise TransportError(f"Cannot subscribe to {self.settings.vote_topic}: {e}") from e

        logfire.info(
            "Kafka consumer started",
            topic=self.settings.vote_topic,
            group_id=self.settings.group_id,
        )
        return KafkaVoteSubscription(consumer, executor, self.settings)

    async def _send(self, topic: str, key: str, value: dict[str, Any]) -> None:
        if self._producer is None:
            raise TransportError("Kafka producer is not started")

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                self._executor, partial(self._send_blocking, topic, key, value)
            )
        except KafkaError as e:
            raise TransportError(f"Publish to {topic} failed: {e}") from e

    def _send_blocking(self, topic: str, key: str, value: dict[str, Any]) -> None:
        future = self._producer.send(topic, key=key, value=value)
        future.get(timeout=self.settings.publish_timeout_seconds)


def _decode_intent(raw: Optional[bytes]) -> Optional[VoteIntent]:
    if raw is None:
        return None
    try:
        return VoteIntent.model_validate_json(raw)
    except ValidationError as e:
        logfire.warn("Skipping malformed vote intent", error=str(e))
        return None
