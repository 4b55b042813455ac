"""Connection hub: who is online, and where their messages go.

A single coordinating task owns the connection map and the offline
mailboxes. Connects, disconnects and routed messages are applied one at a
time in arrival order, so a connect and the flush of that user's mailbox
happen in the same step and no routed message can slip in between.
"""

import asyncio
import time
from collections import deque
from collections.abc import Callable
from typing import Any, Optional

import logfire

from forum.adapter.error import ConnectionClosedError
from forum.adapter.realtime.connection import Connection
from forum.config import HubSettings
from forum.domain.model.notification import MailboxEntry, NotificationMessage
from forum.domain.service.notification_service import NotificationSender

CONNECT = "connect"
DISCONNECT = "disconnect"
MESSAGE = "message"


class ConnectionHub(NotificationSender):
    """Routes messages to live connections and buffers them for offline users.

    ``route`` buffers messages for offline users; ``send_to_user`` drops
    them. Chat-style messages use the former, best-effort notifications the
    latter.
    """

    def __init__(
        self, settings: HubSettings, clock: Callable[[], float] = time.monotonic
    ) -> None:
        """Initialize hub.

        Args:
            settings: Hub configuration
            clock: Time source for mailbox expiry
        """
        self.settings = settings
        self._clock = clock
        self._connections: dict[str, Connection] = {}
        self._mailboxes: dict[str, deque[MailboxEntry]] = {}
        self._events: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def get_connection(self, user_id: str) -> Optional[Connection]:
        return self._connections.get(user_id)

    def has_mailbox(self, user_id: str) -> bool:
        return user_id in self._mailboxes

    def mailbox(self, user_id: str) -> list[NotificationMessage]:
        """Messages buffered for an offline user, oldest first."""
        return [entry.message for entry in self._mailboxes.get(user_id, ())]

    def start(self) -> None:
        """Start the coordinating task (idempotent)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="connection-hub")
        logfire.info("Connection hub started")

    async def stop(self) -> None:
        """Stop the hub and close every live connection."""
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        for connection in self._connections.values():
            connection.close_outbound()
        self._connections.clear()
        logfire.info("Connection hub stopped")

    async def join(self) -> None:
        """Wait until every queued event has been applied."""
        await self._events.join()

    async def connect(self, connection: Connection) -> None:
        """Register a connection and deliver the user's offline mailbox."""
        await self._events.put((CONNECT, connection))

    async def disconnect(self, connection: Connection) -> None:
        """Unregister a connection if it is still the user's current one."""
        await self._events.put((DISCONNECT, connection))

    async def route(self, message: NotificationMessage) -> None:
        """Deliver to the recipient's connection, or buffer it while offline."""
        await self._events.put((MESSAGE, message))

    async def send_to_user(self, message: NotificationMessage) -> bool:
        """Deliver directly to a live recipient; drop the message otherwise.

        Bypasses the event queue. Nothing is ever buffered for offline users.

        Returns:
            True if the message was queued on a live connection
        """
        connection = self._connections.get(message.to_user_id)
        if connection is None:
            return False
        try:
            await connection.put(message)
        except ConnectionClosedError:
            return False
        return True

    async def _run(self) -> None:
        while True:
            kind, payload = await self._events.get()
            try:
                if kind == CONNECT:
                    await self._register(payload)
                elif kind == DISCONNECT:
                    self._unregister(payload)
                else:
                    await self._deliver(payload)
            except Exception as e:
                logfire.error(
                    "Connection hub event failed",
                    event=kind,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            finally:
                self._events.task_done()

    async def _register(self, connection: Connection) -> None:
        user_id = connection.user_id
        previous = self._connections.get(user_id)
        if previous is not None and previous is not connection:
            logfire.info("Replacing existing connection", user_id=user_id)
            previous.close_outbound()
        self._connections[user_id] = connection

        entries = self._mailboxes.pop(user_id, None)
        if not entries:
            logfire.info("User connected", user_id=user_id)
            return

        now = self._clock()
        pending = deque(
            entry
            for entry in entries
            if now - entry.enqueued_at <= self.settings.mailbox_ttl_seconds
        )
        expired = len(entries) - len(pending)
        delivered = 0
        while pending:
            try:
                await connection.put(pending[0].message)
            except ConnectionClosedError:
                # Keep the undelivered tail for the next connection
                self._mailboxes[user_id] = deque(
                    pending, maxlen=self.settings.mailbox_max_messages
                )
                self._unregister(connection)
                logfire.warn(
                    "Connection closed during mailbox flush",
                    user_id=user_id,
                    delivered=delivered,
                    kept=len(pending),
                )
                return
            pending.popleft()
            delivered += 1

        logfire.info(
            "User connected, mailbox flushed",
            user_id=user_id,
            delivered=delivered,
            expired=expired,
        )

    def _unregister(self, connection: Connection) -> None:
        connection.close_outbound()
        if self._connections.get(connection.user_id) is connection:
            del self._connections[connection.user_id]
            logfire.info("User disconnected", user_id=connection.user_id)

    async def _deliver(self, message: NotificationMessage) -> None:
        user_id = message.to_user_id
        if not user_id:
            logfire.warn("Dropping message without recipient", kind=message.kind.value)
            return

        connection = self._connections.get(user_id)
        if connection is not None:
            try:
                await connection.put(message)
                return
            except ConnectionClosedError:
                # Closed but not yet unregistered: treat the user as offline
                pass

        mailbox = self._mailboxes.setdefault(
            user_id, deque(maxlen=self.settings.mailbox_max_messages)
        )
        if len(mailbox) == mailbox.maxlen:
            logfire.warn("Mailbox full, evicting oldest message", user_id=user_id)
        mailbox.append(MailboxEntry(message=message, enqueued_at=self._clock()))
