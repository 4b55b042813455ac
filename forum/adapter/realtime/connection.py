"""Persistent notification connections.

Each connection runs two pumps: a writer draining the outbound queue (and
sending a heartbeat every ping interval, busy or not) and a reader parsing
client frames. Either
side failing ends the connection.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import logfire
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from forum.adapter.error import ConnectionClosedError
from forum.config import HubSettings
from forum.domain.model.notification import NotificationMessage
from forum.domain.value import MessageKind

if TYPE_CHECKING:
    from forum.adapter.realtime.hub import ConnectionHub


class ConnectionTransport(ABC):
    """Bidirectional text frame channel to one client."""

    @abstractmethod
    async def send_text(self, data: str) -> None:
        """Send one frame.

        Raises:
            ConnectionClosedError: If the peer is gone
        """
        pass

    @abstractmethod
    async def receive_text(self) -> str:
        """Wait for the next frame.

        Raises:
            ConnectionClosedError: If the peer disconnected
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the channel (idempotent)."""
        pass


class WebSocketTransport(ConnectionTransport):
    """ConnectionTransport over a FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self._closed = False

    async def send_text(self, data: str) -> None:
        if self._closed:
            raise ConnectionClosedError("WebSocket is closed")
        try:
            await self.websocket.send_text(data)
        except (WebSocketDisconnect, RuntimeError) as e:
            raise ConnectionClosedError(str(e)) from e

    async def receive_text(self) -> str:
        try:
            return await self.websocket.receive_text()
        except (WebSocketDisconnect, RuntimeError) as e:
            raise ConnectionClosedError(str(e)) from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self.websocket.close()
        except RuntimeError:
            # Already closed by the peer
            pass


class Connection:
    """One live notification connection of a user.

    The hub owns registration; the connection owns its outbound queue and
    its two pumps.
    """

    def __init__(
        self, user_id: str, transport: ConnectionTransport, settings: HubSettings
    ) -> None:
        """Initialize connection.

        Args:
            user_id: Authenticated user the connection belongs to
            transport: Frame channel to the client
            settings: Hub configuration (queue size, keepalive timings)
        """
        self.user_id = user_id
        self.transport = transport
        self.settings = settings
        self.outbound: asyncio.Queue[Optional[NotificationMessage]] = asyncio.Queue(
            maxsize=settings.outbound_queue_size
        )
        self._closed = False

    def __repr__(self) -> str:
        return f"Connection(user_id={self.user_id!r}, closed={self._closed})"

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, message: NotificationMessage) -> None:
        """Queue a message for the writer, waiting while the queue is full.

        Raises:
            ConnectionClosedError: If the connection is closed
        """
        if self._closed:
            raise ConnectionClosedError(f"Connection of user {self.user_id} is closed")
        await self.outbound.put(message)

    def close_outbound(self) -> None:
        """Stop accepting messages and let the writer finish (idempotent).

        Messages already queued are still written.
        """
        if self._closed:
            return
        self._closed = True
        # A full queue needs no end marker: the writer stops once it is empty
        if not self.outbound.full():
            self.outbound.put_nowait(None)

    async def serve(self, hub: "ConnectionHub") -> None:
        """Register with the hub and pump frames until either side fails."""
        await hub.connect(self)
        writer = asyncio.create_task(
            self.write_pump(), name=f"connection-writer-{self.user_id}"
        )
        try:
            await self.read_pump(hub)
        finally:
            await hub.disconnect(self)
            self.close_outbound()
            await writer

    async def write_pump(self) -> None:
        """Write queued messages and a heartbeat every ping_interval.

        Pings follow a fixed schedule independent of traffic, so a client
        that only answers pings still hears from us within pong_wait while
        notifications keep flowing.
        """
        loop = asyncio.get_running_loop()
        interval = self.settings.ping_interval_seconds
        next_ping = loop.time() + interval
        try:
            while True:
                timeout = next_ping - loop.time()
                if timeout <= 0:
                    await self._write(
                        NotificationMessage(kind=MessageKind.PING, to_user_id=self.user_id)
                    )
                    next_ping = loop.time() + interval
                    continue

                try:
                    message = await asyncio.wait_for(self.outbound.get(), timeout)
                except asyncio.TimeoutError:
                    continue

                if message is None:
                    return
                await self._write(message)
                if self._closed and self.outbound.empty():
                    return
        except ConnectionClosedError as e:
            logfire.info("Connection write failed", user_id=self.user_id, error=str(e))
        finally:
            self._closed = True
            self._drain()
            await self.transport.close()

    async def read_pump(self, hub: "ConnectionHub") -> None:
        """Read client frames until the peer leaves or stays silent for pong_wait.

        Any frame counts as a sign of life. Pongs only do that; pings are
        answered; everything else is routed through the hub as coming from
        this connection's user.
        """
        try:
            while True:
                raw = await asyncio.wait_for(
                    self.transport.receive_text(), self.settings.pong_wait_seconds
                )
                try:
                    message = NotificationMessage.model_validate_json(raw)
                except ValidationError as e:
                    logfire.warn("Ignoring malformed frame", user_id=self.user_id, error=str(e))
                    continue

                if message.kind == MessageKind.PONG:
                    continue
                if message.kind == MessageKind.PING:
                    if not self._closed and not self.outbound.full():
                        self.outbound.put_nowait(
                            NotificationMessage(kind=MessageKind.PONG, to_user_id=self.user_id)
                        )
                    continue

                await hub.route(message.model_copy(update={"from_user_id": self.user_id}))
        except asyncio.TimeoutError:
            logfire.info("Connection idle timeout", user_id=self.user_id)
        except ConnectionClosedError:
            logfire.debug("Connection closed by peer", user_id=self.user_id)

    async def _write(self, message: NotificationMessage) -> None:
        try:
            await asyncio.wait_for(
                self.transport.send_text(message.model_dump_json()),
                self.settings.write_wait_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ConnectionClosedError(
                f"Write to user {self.user_id} timed out"
            ) from e

    def _drain(self) -> None:
        # Unblocks anyone waiting on a full queue of a dead connection
        while not self.outbound.empty():
            self.outbound.get_nowait()
