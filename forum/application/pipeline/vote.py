"""Asynchronous vote pipeline.

Request handlers only submit vote intents. Workers consume them from the
transport and, per intent:

1. persist the vote and the subject's counter in one transaction,
2. re-score the post in the ranking cache once the transaction committed,
3. notify the author of an upvote.

An intent that fails to persist or re-score is logged and parked on the
dead-letter topic; it is never retried automatically.
"""

import asyncio
from functools import partial
from uuid import UUID

import logfire
from dishka import AsyncContainer

from forum.config import MessagingSettings, PipelineSettings
from forum.domain.cache import RankingCache
from forum.domain.model.vote import VoteIntent, VoteIntentState
from forum.domain.service import NotificationService, VoteService
from forum.domain.value import PostId, UserId, VotableType, VoteValue
from forum.util.coalescer import KeyedRequestCoalescer, make_key
from forum.util.tasks import BackgroundTaskPool

from .transport import VoteTransport


class VoteEventPipeline:
    """Submits vote intents and runs the workers that apply them."""

    def __init__(
        self,
        container: AsyncContainer,
        transport: VoteTransport,
        ranking_cache: RankingCache,
        notification_service: NotificationService,
        coalescer: KeyedRequestCoalescer,
        task_pool: BackgroundTaskPool,
        messaging_settings: MessagingSettings,
        pipeline_settings: PipelineSettings,
    ) -> None:
        """Initialize vote pipeline.

        Args:
            container: App-scoped DI container; each intent is applied in its
                own request scope (one database transaction)
            transport: Vote intent transport
            ranking_cache: Ranking cache re-scored after each post vote
            notification_service: Upvote notifications
            coalescer: Shared request coalescer
            task_pool: Background task pool used for publishing
            messaging_settings: Messaging configuration
            pipeline_settings: Worker configuration
        """
        self.container = container
        self.transport = transport
        self.ranking_cache = ranking_cache
        self.notification_service = notification_service
        self.coalescer = coalescer
        self.task_pool = task_pool
        self.messaging_settings = messaging_settings
        self.pipeline_settings = pipeline_settings
        self._workers: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return any(not worker.done() for worker in self._workers)

    async def submit(
        self,
        subject_id: UUID,
        subject_kind: VotableType,
        user_id: UserId,
        vote_value: VoteValue,
    ) -> VoteIntent:
        """Hand a vote intent to the background publisher.

        Returns as soon as the publish is queued, without waiting for the
        vote to be persisted. Concurrent submissions are merged only when
        every field of the intent matches, vote value included: an upvote
        racing a removal by the same user publishes both.

        Returns:
            The submitted intent
        """
        intent = VoteIntent(
            subject_id=subject_id,
            subject_kind=subject_kind,
            user_id=user_id,
            vote_value=vote_value,
        )
        self._log_state(intent, VoteIntentState.SUBMITTED)
        key = make_key(
            "vote_submit", subject_kind.value, subject_id, user_id, int(vote_value)
        )
        await self.coalescer.do(key, partial(self._enqueue, intent))
        return intent

    async def get_vote_count(self, subject_kind: VotableType, subject_id: UUID) -> int:
        """Read a subject's vote count, merging concurrent identical reads.

        Raises:
            NotFoundError: If the subject doesn't exist
        """
        key = make_key("vote_count", subject_kind.value, subject_id)
        return await self.coalescer.do(
            key, partial(self._read_vote_count, subject_kind, subject_id)
        )

    async def _read_vote_count(self, subject_kind: VotableType, subject_id: UUID) -> int:
        async with self.container() as scope:
            vote_service = await scope.get(VoteService)
            return await vote_service.get_vote_count(subject_kind, subject_id)

    async def _enqueue(self, intent: VoteIntent) -> None:
        await self.task_pool.submit(partial(self._publish, intent))

    async def _publish(self, intent: VoteIntent) -> None:
        try:
            await self.transport.publish(intent)
        except Exception as e:
            logfire.error(
                "Failed to publish vote intent",
                subject_id=str(intent.subject_id),
                user_id=str(intent.user_id),
                error=str(e),
            )
            return
        self._log_state(intent, VoteIntentState.ENQUEUED)

    def start(self) -> None:
        """Start the consumer workers (idempotent)."""
        if self.running:
            return
        self._workers = [
            asyncio.create_task(self._consume(i), name=f"vote-worker-{i}")
            for i in range(self.pipeline_settings.workers)
        ]
        logfire.info("Vote pipeline started", workers=self.pipeline_settings.workers)

    async def stop(self) -> None:
        """Stop the consumer workers, abandoning the intent in progress."""
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logfire.info("Vote pipeline stopped")

    async def _consume(self, index: int) -> None:
        """Consume intents until the subscription ends.

        A failing subscription (broker unreachable, consumer error) is closed
        and replaced after ``retry_backoff_seconds``; the worker only exits
        when the subscription ends normally or the pipeline is stopped.
        """
        backoff = self.pipeline_settings.retry_backoff_seconds
        while True:
            try:
                subscription = await self.transport.subscribe()
            except Exception as e:
                logfire.error(
                    "Vote subscription failed to open",
                    worker=index,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                await asyncio.sleep(backoff)
                continue

            try:
                async for intent in subscription:
                    try:
                        await self.handle(intent)
                    except Exception as e:
                        logfire.error(
                            "Unexpected error in vote worker",
                            worker=index,
                            subject_id=str(intent.subject_id),
                            error=str(e),
                            error_type=type(e).__name__,
                        )
                return
            except Exception as e:
                logfire.error(
                    "Vote subscription failed, resubscribing",
                    worker=index,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            finally:
                await subscription.close()
            await asyncio.sleep(backoff)

    async def handle(self, intent: VoteIntent) -> VoteIntentState:
        """Apply one vote intent.

        Args:
            intent: Intent received from the transport

        Returns:
            DONE, or FAILED if persisting or re-scoring failed
        """
        with logfire.span(
            "vote_pipeline.handle",
            subject_kind=intent.subject_kind.value,
            subject_id=str(intent.subject_id),
            user_id=str(intent.user_id),
            vote_value=int(intent.vote_value),
        ):
            self._log_state(intent, VoteIntentState.PERSISTING)
            try:
                # The transaction commits when the scope closes
                async with self.container() as scope:
                    vote_service = await scope.get(VoteService)
                    outcome = await vote_service.apply_vote(intent)
            except Exception as e:
                return await self._fail(intent, VoteIntentState.PERSISTING, e)

            if intent.subject_kind == VotableType.POST:
                self._log_state(intent, VoteIntentState.SCORE_UPDATING)
                post_id = PostId(intent.subject_id)
                try:
                    score = await self.ranking_cache.increment_score(
                        post_id, outcome.previous_count, outcome.vote_count
                    )
                    if score is None:
                        await self.ranking_cache.set_score(
                            post_id, outcome.vote_count, outcome.subject_created_at
                        )
                except Exception as e:
                    return await self._fail(intent, VoteIntentState.SCORE_UPDATING, e)

            self._log_state(intent, VoteIntentState.NOTIFYING)
            await self.notification_service.notify_vote(outcome)

            self._log_state(intent, VoteIntentState.DONE)
            return VoteIntentState.DONE

    async def _fail(
        self, intent: VoteIntent, stage: VoteIntentState, error: Exception
    ) -> VoteIntentState:
        reason = f"{stage.value}: {type(error).__name__}: {error}"
        logfire.error(
            "Vote intent failed",
            stage=stage.value,
            subject_id=str(intent.subject_id),
            user_id=str(intent.user_id),
            error=str(error),
            error_type=type(error).__name__,
        )

        if self.messaging_settings.dead_letter_enabled:
            try:
                await self.transport.publish_dead_letter(intent, reason)
            except Exception as e:
                logfire.error(
                    "Failed to dead-letter vote intent",
                    subject_id=str(intent.subject_id),
                    error=str(e),
                )

        self._log_state(intent, VoteIntentState.FAILED)
        return VoteIntentState.FAILED

    @staticmethod
    def _log_state(intent: VoteIntent, state: VoteIntentState) -> None:
        logfire.debug(
            "Vote intent {state}",
            state=state.value,
            subject_id=str(intent.subject_id),
            user_id=str(intent.user_id),
        )
