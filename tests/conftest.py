"""Test configuration and fixtures."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from forum.adapter.error import ConnectionClosedError
from forum.adapter.realtime.connection import ConnectionTransport
from forum.domain.model.comment import Comment
from forum.domain.model.notification import NotificationMessage
from forum.domain.model.post import Post
from forum.domain.value import CommentId, CommunityId, PostId, UserId


def make_post(
    author_id: Optional[UserId] = None,
    title: str = "Test Post",
    content: str = "Test content",
    created_at: Optional[datetime] = None,
) -> Post:
    """Build a live post with sensible defaults."""
    now = created_at or datetime.now(timezone.utc)
    return Post(
        id=PostId(uuid4()),
        title=title,
        content=content,
        author_id=author_id or UserId(uuid4()),
        author_name="author",
        community_id=CommunityId(uuid4()),
        community_name="science",
        created_at=now,
        updated_at=now,
    )


def make_comment(
    post_id: PostId,
    author_id: Optional[UserId] = None,
    parent_id: Optional[CommentId] = None,
    content: str = "Nice post",
) -> Comment:
    """Build a comment on a post."""
    return Comment(
        id=CommentId(uuid4()),
        post_id=post_id,
        author_id=author_id or UserId(uuid4()),
        author_name="commenter",
        content=content,
        parent_id=parent_id,
    )


class FakeTransport(ConnectionTransport):
    """In-memory frame channel standing in for a websocket."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.incoming: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self.closed = False

    def sent_messages(self) -> list[NotificationMessage]:
        return [NotificationMessage.model_validate_json(raw) for raw in self.sent]

    def push(self, message: NotificationMessage) -> None:
        """Simulate a frame from the client."""
        self.incoming.put_nowait(message.model_dump_json())

    def hang_up(self) -> None:
        """Simulate the client going away."""
        self.incoming.put_nowait(None)

    async def send_text(self, data: str) -> None:
        if self.closed:
            raise ConnectionClosedError("transport closed")
        self.sent.append(data)

    async def receive_text(self) -> str:
        raw = await self.incoming.get()
        if raw is None:
            raise ConnectionClosedError("peer left")
        return raw

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.incoming.put_nowait(None)


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll until predicate holds, failing the test after timeout."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)
