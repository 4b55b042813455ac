"""Unit tests for RemoveVoteUseCase."""

import asyncio
from uuid import uuid4

import pytest

from forum.adapter.messaging import InMemoryVoteTransport
from forum.application.pipeline import VoteEventPipeline, VoteTransport
from forum.application.usecase.vote import (
    GetVoteCountRequest,
    GetVoteCountUseCase,
    RemoveVoteRequest,
    RemoveVoteUseCase,
    UpvoteRequest,
    UpvoteUseCase,
)
from forum.domain.repository import PostRepository
from forum.domain.value import VotableType, VoteValue
from forum.util.tasks import BackgroundTaskPool
from tests.conftest import make_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestRemoveVoteUseCase:
    """Tests for RemoveVoteUseCase."""

    @pytest.mark.asyncio
    async def test_remove_submits_unvote(self, unit_env):
        # Arrange
        remove_vote = await unit_env.get(RemoveVoteUseCase)
        transport: InMemoryVoteTransport = await unit_env.get(VoteTransport)
        task_pool = await unit_env.get(BackgroundTaskPool)

        # Act
        response = await remove_vote.execute(
            RemoveVoteRequest(
                votable_type=VotableType.POST,
                votable_id=str(uuid4()),
                user_id=str(uuid4()),
            )
        )
        await task_pool.join()

        # Assert
        assert response.vote_value == int(VoteValue.NONE)
        assert transport.published[0].vote_value == VoteValue.NONE

    @pytest.mark.asyncio
    async def test_vote_then_remove_round_trip_through_workers(self, unit_env):
        """Upvote and removal applied by the workers leave the count at zero."""
        # Arrange
        upvote = await unit_env.get(UpvoteUseCase)
        remove_vote = await unit_env.get(RemoveVoteUseCase)
        get_vote_count = await unit_env.get(GetVoteCountUseCase)
        pipeline = await unit_env.get(VoteEventPipeline)
        transport: InMemoryVoteTransport = await unit_env.get(VoteTransport)
        task_pool = await unit_env.get(BackgroundTaskPool)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())
        user_id = str(uuid4())
        pipeline.start()
        await asyncio.sleep(0)

        # Act
        await upvote.execute(
            UpvoteRequest(votable_type=VotableType.POST, votable_id=str(post.id), user_id=user_id)
        )
        await task_pool.join()
        await transport.join()
        after_upvote = await get_vote_count.execute(
            GetVoteCountRequest(votable_type=VotableType.POST, votable_id=str(post.id))
        )

        await remove_vote.execute(
            RemoveVoteRequest(votable_type=VotableType.POST, votable_id=str(post.id), user_id=user_id)
        )
        await task_pool.join()
        await transport.join()
        after_removal = await get_vote_count.execute(
            GetVoteCountRequest(votable_type=VotableType.POST, votable_id=str(post.id))
        )

        # Assert
        assert after_upvote.vote_count == 1
        assert after_removal.vote_count == 0
        assert transport.dead_letters == []
