"""Keyed request coalescing.

Concurrent callers asking for the same key share one in-flight invocation of
the producer and all observe its result (or its exception). Nothing is cached
once the invocation completes: the next caller starts a fresh one.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import logfire

T = TypeVar("T")


def make_key(operation: str, *params: Any) -> str:
    """Build a deterministic coalescing key.

    Args:
        operation: Operation name (e.g. "post_list")
        params: Operation parameters, in a fixed order

    Returns:
        Key such as "post_list:hot:1:10"
    """
    return ":".join([operation, *(str(p) for p in params)])


class KeyedRequestCoalescer:
    """Deduplicates concurrent identical async calls."""

    def __init__(self) -> None:
        self._calls: dict[str, asyncio.Task[Any]] = {}

    @property
    def in_flight(self) -> int:
        """Number of keys with a running invocation."""
        return len(self._calls)

    async def do(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        """Run producer once for all concurrent callers of key.

        The shared invocation runs as its own task, so a caller being
        cancelled does not cancel it for the other waiters.

        Args:
            key: Coalescing key
            producer: Zero-argument coroutine function producing the result

        Returns:
            The shared result

        Raises:
            Exception: Whatever the producer raised, re-raised to every waiter
        """
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, producer))
            task.add_done_callback(_mark_retrieved)
            self._calls[key] = task
        else:
            logfire.debug("Coalesced request", key=key)

        return await asyncio.shield(task)

    async def _run(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        try:
            return await producer()
        finally:
            # Drop before waiters resume so a later caller never sees a finished call
            self._calls.pop(key, None)


def _mark_retrieved(task: asyncio.Task[Any]) -> None:
    # Every waiter may have been cancelled; don't let the loop warn about it
    if not task.cancelled():
        task.exception()
