"""Realtime and background work providers (non-mockable).

These hold in-process state only, so tests use them as-is.
"""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from forum.adapter.realtime.hub import ConnectionHub
from forum.config import HubSettings, PipelineSettings
from forum.domain.service import NotificationSender
from forum.util.coalescer import KeyedRequestCoalescer
from forum.util.di.base import ProviderBase
from forum.util.tasks import BackgroundTaskPool


class RealtimeProvider(ProviderBase):
    """Connection hub, request coalescer and background task pool."""

    scope = Scope.APP

    @provide
    async def get_connection_hub(self, settings: HubSettings) -> AsyncIterator[ConnectionHub]:
        """Provide the running connection hub."""
        hub = ConnectionHub(settings)
        hub.start()
        yield hub
        await hub.stop()

    @provide
    def get_notification_sender(self, hub: ConnectionHub) -> NotificationSender:
        """Notifications go to live connections through the hub."""
        return hub

    @provide
    def get_coalescer(self) -> KeyedRequestCoalescer:
        """Provide the process-wide request coalescer."""
        return KeyedRequestCoalescer()

    @provide
    async def get_task_pool(
        self, settings: PipelineSettings
    ) -> AsyncIterator[BackgroundTaskPool]:
        """Provide the running background task pool, drained on shutdown."""
        pool = BackgroundTaskPool(
            workers=settings.task_pool_workers,
            backlog=settings.task_pool_backlog,
        )
        pool.start()
        yield pool
        await pool.stop(drain=True)
