"""Bounded background task pool.

Request handlers hand off work that must not delay the response (publishing
vote intents, refreshing cache entries, the second delete of a delayed double
delete). Work goes through a bounded queue drained by a fixed number of worker
tasks, so a burst applies backpressure on submitters instead of spawning an
unbounded number of tasks.

Delayed jobs wait on a timer of their own and only enter the queue once due,
so a pending delay never occupies a worker.
"""

import asyncio
from collections.abc import Awaitable, Callable

import logfire

from forum.util.error import TaskPoolClosedError

Job = Callable[[], Awaitable[None]]


class BackgroundTaskPool:
    """Fixed worker pool draining a bounded job queue."""

    def __init__(self, workers: int = 4, backlog: int = 1000, name: str = "background") -> None:
        """Initialize task pool.

        Args:
            workers: Number of worker tasks
            backlog: Maximum queued jobs before submit() waits
            name: Pool name used in logs
        """
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.name = name
        self._worker_count = workers
        self._queue: asyncio.Queue[Job] = asyncio.Queue(maxsize=backlog)
        self._workers: list[asyncio.Task[None]] = []
        self._timers: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def backlog(self) -> int:
        """Jobs waiting to be picked up by a worker."""
        return self._queue.qsize()

    @property
    def scheduled(self) -> int:
        """Delayed jobs whose timer has not fired yet."""
        return len(self._timers)

    @property
    def running(self) -> bool:
        return bool(self._workers) and not self._closed

    def start(self) -> None:
        """Start worker tasks (idempotent)."""
        if self._workers:
            return
        self._closed = False
        self._workers = [
            asyncio.create_task(self._work(), name=f"{self.name}-worker-{i}")
            for i in range(self._worker_count)
        ]
        logfire.info("Task pool started", pool=self.name, workers=self._worker_count)

    async def submit(self, job: Job) -> None:
        """Queue a job, waiting while the backlog is full.

        Args:
            job: Zero-argument coroutine function

        Raises:
            TaskPoolClosedError: If the pool has been stopped
        """
        if self._closed:
            raise TaskPoolClosedError(f"Task pool {self.name} is closed")
        await self._queue.put(job)

    def submit_later(self, delay: float, job: Job) -> None:
        """Queue a job once delay seconds have passed, without waiting for it.

        Args:
            delay: Seconds to wait before queueing
            job: Zero-argument coroutine function

        Raises:
            TaskPoolClosedError: If the pool has been stopped
        """
        if self._closed:
            raise TaskPoolClosedError(f"Task pool {self.name} is closed")
        timer = asyncio.create_task(
            self._enqueue_later(delay, job), name=f"{self.name}-timer"
        )
        self._timers.add(timer)
        timer.add_done_callback(self._timers.discard)

    async def join(self) -> None:
        """Wait until every queued and scheduled job has finished."""
        while self._timers:
            await asyncio.gather(*self._timers, return_exceptions=True)
        await self._queue.join()

    async def stop(self, drain: bool = True) -> None:
        """Stop the pool.

        Args:
            drain: Let scheduled jobs come due and finish queued jobs before
                cancelling the workers; otherwise drop both
        """
        self._closed = True
        if drain and self._workers:
            await self.join()
        for timer in list(self._timers):
            timer.cancel()
        await asyncio.gather(*self._timers, return_exceptions=True)
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logfire.info("Task pool stopped", pool=self.name)

    async def _enqueue_later(self, delay: float, job: Job) -> None:
        await asyncio.sleep(delay)
        # Accepted before the pool closed, so it bypasses the closed check
        await self._queue.put(job)

    async def _work(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # One failed job must not take the worker down
                logfire.error(
                    "Background job failed",
                    pool=self.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            finally:
                self._queue.task_done()
