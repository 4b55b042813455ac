"""Unit tests for UpdatePostUseCase."""

from uuid import uuid4

import pytest

from forum.application.usecase.post import UpdatePostRequest, UpdatePostUseCase
from forum.config import CacheSettings
from forum.domain.cache import RankingCache
from forum.domain.error import NotAuthorizedError
from forum.domain.repository import PostRepository
from forum.domain.service import PostService
from forum.util.coalescer import KeyedRequestCoalescer
from forum.util.tasks import BackgroundTaskPool
from tests.conftest import make_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def build_use_case(unit_env) -> UpdatePostUseCase:
    """Use case with a short delayed delete so the test doesn't wait seconds."""
    post_service = PostService(
        post_repository=await unit_env.get(PostRepository),
        ranking_cache=await unit_env.get(RankingCache),
        coalescer=await unit_env.get(KeyedRequestCoalescer),
        task_pool=await unit_env.get(BackgroundTaskPool),
        cache_settings=CacheSettings(delayed_delete_seconds=0.01),
    )
    return UpdatePostUseCase(post_service=post_service)


class TestUpdatePostUseCase:
    """Tests for UpdatePostUseCase."""

    @pytest.mark.asyncio
    async def test_author_can_update_content(self, unit_env):
        # Arrange
        use_case = await build_use_case(unit_env)
        post_repo = await unit_env.get(PostRepository)
        ranking_cache = await unit_env.get(RankingCache)
        post = await post_repo.save(make_post(content="before"))
        await ranking_cache.record_new_post(post.to_summary(), post.created_at)

        # Act
        response = await use_case.execute(
            UpdatePostRequest(
                post_id=str(post.id), user_id=str(post.author_id), content="after"
            )
        )
        await (await unit_env.get(BackgroundTaskPool)).join()

        # Assert
        assert response.post_id == str(post.id)
        assert response.content == "after"
        _, missing = await ranking_cache.fetch_summaries([post.id])
        assert missing == [post.id]

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, unit_env):
        # Arrange
        use_case = await build_use_case(unit_env)
        post_repo = await unit_env.get(PostRepository)
        post = await post_repo.save(make_post())

        # Act & Assert
        with pytest.raises(NotAuthorizedError):
            await use_case.execute(
                UpdatePostRequest(
                    post_id=str(post.id), user_id=str(uuid4()), content="mine now"
                )
            )
