"""Unit tests for ListCommentsUseCase and ListRepliesUseCase."""

from uuid import uuid4

import pytest

from forum.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
    ListCommentsRequest,
    ListCommentsUseCase,
    ListRepliesRequest,
    ListRepliesUseCase,
)
from forum.domain.error import NotFoundError
from forum.domain.repository import PostRepository
from tests.conftest import make_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


def comment_request(post_id: str, content: str, parent_id=None) -> CreateCommentRequest:
    return CreateCommentRequest(
        post_id=post_id,
        author_id=str(uuid4()),
        author_name="alice",
        content=content,
        parent_id=parent_id,
    )


class TestListCommentsUseCase:
    """Tests for reading a comment thread level by level."""

    @pytest.mark.asyncio
    async def test_top_level_and_replies_are_listed_separately(self, unit_env):
        # Arrange
        create_comment = await unit_env.get(CreateCommentUseCase)
        list_comments = await unit_env.get(ListCommentsUseCase)
        list_replies = await unit_env.get(ListRepliesUseCase)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        top = await create_comment.execute(comment_request(str(post.id), "top"))
        reply = await create_comment.execute(
            comment_request(str(post.id), "reply", parent_id=top.comment_id)
        )

        # Act
        comments = await list_comments.execute(ListCommentsRequest(post_id=str(post.id)))
        replies = await list_replies.execute(ListRepliesRequest(comment_id=top.comment_id))

        # Assert
        assert comments.post_id == str(post.id)
        assert [c.comment_id for c in comments.comments] == [top.comment_id]
        assert comments.comments[0].content == "top"
        assert replies.comment_id == top.comment_id
        assert [r.comment_id for r in replies.replies] == [reply.comment_id]
        assert replies.replies[0].parent_id == top.comment_id

    @pytest.mark.asyncio
    async def test_unknown_post_raises(self, unit_env):
        list_comments = await unit_env.get(ListCommentsUseCase)

        with pytest.raises(NotFoundError):
            await list_comments.execute(ListCommentsRequest(post_id=str(uuid4())))
