"""Unit tests for CommentService."""

import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from forum.adapter.realtime.connection import Connection
from forum.adapter.realtime.hub import ConnectionHub
from forum.config import HubSettings
from forum.domain.error import ContentDeletedException, NotFoundError, ValidationError
from forum.domain.repository import CommentRepository, PostRepository
from forum.domain.service import CommentService
from forum.domain.value import CommentId, MessageKind, UserId
from tests.conftest import FakeTransport, make_comment, make_post
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


async def connect(hub: ConnectionHub, user_id: UserId) -> Connection:
    connection = Connection(str(user_id), FakeTransport(), HubSettings())
    await hub.connect(connection)
    await hub.join()
    return connection


class TestCreateComment:
    """Tests for create_comment."""

    @pytest.mark.asyncio
    async def test_top_level_comment_notifies_post_author(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        hub = await unit_env.get(ConnectionHub)
        post_author = UserId(uuid4())
        post = await post_repo.save(make_post(author_id=post_author))
        author_connection = await connect(hub, post_author)

        # Act
        saved = await comment_service.create_comment(make_comment(post.id))

        # Assert
        message = author_connection.outbound.get_nowait()
        assert message.kind == MessageKind.COMMENT
        assert message.to_user_id == str(post_author)
        assert json.loads(message.payload)["comment_id"] == str(saved.id)
        assert (await post_repo.find_by_id(post.id)).comment_count == 1

    @pytest.mark.asyncio
    async def test_reply_notifies_parent_author(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        hub = await unit_env.get(ConnectionHub)
        post_author = UserId(uuid4())
        parent_author = UserId(uuid4())
        post = await post_repo.save(make_post(author_id=post_author))
        parent = await comment_service.create_comment(
            make_comment(post.id, author_id=parent_author)
        )
        post_author_connection = await connect(hub, post_author)
        parent_author_connection = await connect(hub, parent_author)

        # Act
        await comment_service.create_comment(make_comment(post.id, parent_id=parent.id))

        # Assert
        assert parent_author_connection.outbound.get_nowait().kind == MessageKind.COMMENT
        assert post_author_connection.outbound.empty()

    @pytest.mark.asyncio
    async def test_own_post_comment_is_not_notified(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        hub = await unit_env.get(ConnectionHub)
        author = UserId(uuid4())
        post = await post_repo.save(make_post(author_id=author))
        connection = await connect(hub, author)

        # Act
        await comment_service.create_comment(make_comment(post.id, author_id=author))

        # Assert
        assert connection.outbound.empty()

    @pytest.mark.asyncio
    async def test_offline_author_is_not_buffered(self, unit_env):
        """Comment notifications are best effort: nothing waits for offline users."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        hub = await unit_env.get(ConnectionHub)
        post = await post_repo.save(make_post())

        # Act
        await comment_service.create_comment(make_comment(post.id))
        await hub.join()

        # Assert
        assert not hub.has_mailbox(str(post.author_id))

    @pytest.mark.asyncio
    async def test_comment_on_missing_post_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.create_comment(make_comment(uuid4()))

    @pytest.mark.asyncio
    async def test_comment_on_deleted_post_raises(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        await post_repo.soft_delete(post.id)

        # Act & Assert
        with pytest.raises(ContentDeletedException):
            await comment_service.create_comment(make_comment(post.id))

    @pytest.mark.asyncio
    async def test_missing_parent_raises(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        # Act & Assert
        with pytest.raises(NotFoundError):
            await comment_service.create_comment(
                make_comment(post.id, parent_id=CommentId(uuid4()))
            )

    @pytest.mark.asyncio
    async def test_parent_on_other_post_raises(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        other_post = await post_repo.save(make_post())
        parent = await comment_service.create_comment(make_comment(other_post.id))

        # Act & Assert
        with pytest.raises(ValidationError):
            await comment_service.create_comment(make_comment(post.id, parent_id=parent.id))


async def seed_thread(unit_env):
    """A post with two top-level comments and two replies to the first one."""
    post_repo = await unit_env.get(PostRepository)
    comment_repo = await unit_env.get(CommentRepository)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    post = await post_repo.save(make_post())

    async def add(minutes, parent_id=None):
        comment = make_comment(post.id, parent_id=parent_id).model_copy(
            update={"created_at": base + timedelta(minutes=minutes)}
        )
        return await comment_repo.save(comment)

    older = await add(0)
    newer = await add(1)
    first_reply = await add(2, parent_id=older.id)
    second_reply = await add(3, parent_id=older.id)
    return post, older, newer, first_reply, second_reply


class TestListComments:
    """Tests for list_comments and list_replies."""

    @pytest.mark.asyncio
    async def test_lists_top_level_comments_newest_first(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post, older, newer, _, _ = await seed_thread(unit_env)

        # Act
        comments = await comment_service.list_comments(post.id, 1, 10)

        # Assert
        assert [c.id for c in comments] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_lists_direct_replies_newest_first(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        _, older, newer, first_reply, second_reply = await seed_thread(unit_env)

        # Act
        replies = await comment_service.list_replies(older.id, 1, 10)
        no_replies = await comment_service.list_replies(newer.id, 1, 10)

        # Assert
        assert [r.id for r in replies] == [second_reply.id, first_reply.id]
        assert no_replies == []

    @pytest.mark.asyncio
    async def test_pages_and_skips_deleted_comments(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post, older, newer, _, _ = await seed_thread(unit_env)
        deleted = make_comment(post.id).model_copy(
            update={"deleted_at": datetime.now(timezone.utc)}
        )
        await comment_repo.save(deleted)

        # Act
        first_page = await comment_service.list_comments(post.id, 1, 1)
        second_page = await comment_service.list_comments(post.id, 2, 1)
        third_page = await comment_service.list_comments(post.id, 3, 1)

        # Assert
        assert [c.id for c in first_page] == [newer.id]
        assert [c.id for c in second_page] == [older.id]
        assert third_page == []

    @pytest.mark.asyncio
    async def test_missing_post_or_comment_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.list_comments(uuid4(), 1, 10)
        with pytest.raises(NotFoundError):
            await comment_service.list_replies(CommentId(uuid4()), 1, 10)
