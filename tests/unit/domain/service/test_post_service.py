"""Unit tests for PostService."""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio

from forum.config import CacheSettings
from forum.domain.error import ContentDeletedException, NotAuthorizedError, NotFoundError
from forum.domain.service import PostService
from forum.domain.value import RankingOrder, UserId
from forum.persistence.cache.inmemory import InMemoryRankingCache
from forum.persistence.repository.inmemory import InMemoryPostRepository
from forum.util.coalescer import KeyedRequestCoalescer
from forum.util.tasks import BackgroundTaskPool
from tests.conftest import make_post


class CountingRankingCache(InMemoryRankingCache):
    """Counts ranking reads and makes them slow enough to overlap."""

    def __init__(self) -> None:
        super().__init__()
        self.list_calls = 0

    async def list_ids(self, order, page, page_size):
        self.list_calls += 1
        await asyncio.sleep(0.01)
        return await super().list_ids(order, page, page_size)


class HangingRankingCache(InMemoryRankingCache):
    """Invalidations block forever once ``hang`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.hang = False

    async def invalidate(self, post_id):
        if self.hang:
            await asyncio.Event().wait()
        await super().invalidate(post_id)


@pytest_asyncio.fixture
async def task_pool():
    pool = BackgroundTaskPool(workers=2, backlog=100)
    pool.start()
    yield pool
    await pool.stop(drain=False)


@pytest.fixture
def ranking_cache():
    return CountingRankingCache()


@pytest.fixture
def post_repo():
    return InMemoryPostRepository()


def build_service(post_repo, ranking_cache, task_pool, delay=0.05, timeout=1.0):
    return PostService(
        post_repository=post_repo,
        ranking_cache=ranking_cache,
        coalescer=KeyedRequestCoalescer(),
        task_pool=task_pool,
        cache_settings=CacheSettings(
            delayed_delete_seconds=delay, delayed_delete_timeout_seconds=timeout
        ),
    )


class TestCreateAndGet:
    """Tests for create_post and get_post."""

    @pytest.mark.asyncio
    async def test_create_indexes_post(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = make_post(content="x" * 150)

        # Act
        saved = await service.create_post(post)

        # Assert
        summaries, missing = await ranking_cache.fetch_summaries([saved.id])
        assert missing == []
        assert summaries[0].summary == "x" * 100 + "..."
        assert await ranking_cache.list_ids(RankingOrder.HOT, 1, 10) == [saved.id]
        assert await ranking_cache.list_ids(RankingOrder.TIME, 1, 10) == [saved.id]

    @pytest.mark.asyncio
    async def test_get_deleted_post_raises(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())
        await service.delete_post(post.id, post.author_id)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.get_post(post.id)


class TestListPosts:
    """Tests for list_posts."""

    @pytest.mark.asyncio
    async def test_lists_newest_first(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        posts = [
            await service.create_post(make_post(created_at=base + timedelta(minutes=i)))
            for i in range(3)
        ]

        # Act
        summaries = await service.list_posts(RankingOrder.TIME, 1, 10)

        # Assert
        assert [s.post_id for s in summaries] == [p.id for p in reversed(posts)]

    @pytest.mark.asyncio
    async def test_missing_summaries_fall_back_to_database(
        self, post_repo, ranking_cache, task_pool
    ):
        """Evicted summaries are served from the DB and written back later."""
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())
        await ranking_cache.invalidate(post.id)

        # Act
        summaries = await service.list_posts(RankingOrder.HOT, 1, 10)
        await task_pool.join()

        # Assert
        assert [s.post_id for s in summaries] == [post.id]
        cached, missing = await ranking_cache.fetch_summaries([post.id])
        assert missing == []
        assert cached == [post.to_summary()]

    @pytest.mark.asyncio
    async def test_deleted_post_without_summary_is_skipped(
        self, post_repo, ranking_cache, task_pool
    ):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        kept = await service.create_post(make_post())
        gone = await service.create_post(make_post())
        await post_repo.soft_delete(gone.id)
        await ranking_cache.invalidate(gone.id)

        # Act
        summaries = await service.list_posts(RankingOrder.HOT, 1, 10)

        # Assert
        assert [s.post_id for s in summaries] == [kept.id]

    @pytest.mark.asyncio
    async def test_invalid_paging_uses_defaults(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        for _ in range(12):
            await service.create_post(make_post())

        # Act
        normalized = await service.list_posts(RankingOrder.HOT, 0, -5)
        explicit = await service.list_posts(RankingOrder.HOT, 1, 10)

        # Assert
        assert len(normalized) == 10
        assert normalized == explicit

    @pytest.mark.asyncio
    async def test_concurrent_identical_listings_are_coalesced(
        self, post_repo, ranking_cache, task_pool
    ):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        await service.create_post(make_post())

        # Act
        results = await asyncio.gather(
            *(service.list_posts(RankingOrder.HOT, 1, 10) for _ in range(5))
        )

        # Assert
        assert ranking_cache.list_calls == 1
        assert all(r == results[0] for r in results)

    @pytest.mark.asyncio
    async def test_empty_ranking_returns_empty_page(self, post_repo, ranking_cache, task_pool):
        service = build_service(post_repo, ranking_cache, task_pool)

        assert await service.list_posts(RankingOrder.HOT, 1, 10) == []


class TestUpdateContent:
    """Tests for the delayed double delete on update."""

    @pytest.mark.asyncio
    async def test_summary_is_invalidated_before_and_after_write(
        self, post_repo, ranking_cache, task_pool
    ):
        """A stale summary written back between the deletes does not survive."""
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool, delay=0.05)
        post = await service.create_post(make_post(content="old"))
        stale = post.to_summary()

        # Act
        updated = await service.update_content(post.id, post.author_id, "new")

        # Assert - first delete already happened
        _, missing = await ranking_cache.fetch_summaries([post.id])
        assert missing == [post.id]

        # A reader that loaded the pre-write row repopulates the cache
        await ranking_cache.store_summary(stale)

        # The delayed delete removes it again
        await task_pool.join()
        _, missing = await ranking_cache.fetch_summaries([post.id])
        assert missing == [post.id]
        assert updated.content == "new"
        assert (await post_repo.find_by_id(post.id)).content == "new"

    @pytest.mark.asyncio
    async def test_update_keeps_post_ranked(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())

        # Act
        await service.update_content(post.id, post.author_id, "edited")
        await task_pool.join()
        summaries = await service.list_posts(RankingOrder.HOT, 1, 10)

        # Assert
        assert summaries[0].summary == "edited"

    @pytest.mark.asyncio
    async def test_hanging_second_delete_is_abandoned(self, post_repo, task_pool):
        """The delayed delete gives up after its timeout instead of holding a worker."""
        # Arrange
        ranking_cache = HangingRankingCache()
        service = build_service(post_repo, ranking_cache, task_pool, delay=0.01, timeout=0.05)
        post = await service.create_post(make_post())

        # Act
        await service.update_content(post.id, post.author_id, "edited")
        ranking_cache.hang = True
        await asyncio.wait_for(task_pool.join(), 1.0)

        # Assert
        assert task_pool.backlog == 0
        assert task_pool.scheduled == 0

    @pytest.mark.asyncio
    async def test_pending_second_deletes_leave_workers_free(
        self, post_repo, ranking_cache, task_pool
    ):
        """Edits waiting on their delayed delete do not starve other background jobs."""
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool, delay=5.0)
        posts = [await service.create_post(make_post()) for _ in range(4)]
        ran = asyncio.Event()

        async def unrelated_job() -> None:
            ran.set()

        # Act
        for post in posts:
            await service.update_content(post.id, post.author_id, "edited")
        await task_pool.submit(unrelated_job)

        # Assert
        await asyncio.wait_for(ran.wait(), 0.5)
        assert task_pool.scheduled == 4

    @pytest.mark.asyncio
    async def test_only_author_can_update(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())

        # Act & Assert
        with pytest.raises(NotAuthorizedError):
            await service.update_content(post.id, UserId(uuid4()), "hijack")

        # The cache is untouched when the update is rejected
        _, missing = await ranking_cache.fetch_summaries([post.id])
        assert missing == []

    @pytest.mark.asyncio
    async def test_update_deleted_post_raises(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())
        await service.delete_post(post.id, post.author_id)

        # Act & Assert
        with pytest.raises(ContentDeletedException):
            await service.update_content(post.id, post.author_id, "too late")

    @pytest.mark.asyncio
    async def test_update_missing_post_raises(self, post_repo, ranking_cache, task_pool):
        service = build_service(post_repo, ranking_cache, task_pool)

        with pytest.raises(NotFoundError):
            await service.update_content(uuid4(), UserId(uuid4()), "nothing")


class TestDeletePost:
    """Tests for delete_post."""

    @pytest.mark.asyncio
    async def test_delete_removes_from_rankings(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())

        # Act
        await service.delete_post(post.id, post.author_id)

        # Assert
        assert (await post_repo.find_by_id(post.id)).deleted_at is not None
        assert await service.list_posts(RankingOrder.HOT, 1, 10) == []
        assert await ranking_cache.get_score(post.id, RankingOrder.TIME) is None

    @pytest.mark.asyncio
    async def test_only_author_can_delete(self, post_repo, ranking_cache, task_pool):
        # Arrange
        service = build_service(post_repo, ranking_cache, task_pool)
        post = await service.create_post(make_post())

        # Act & Assert
        with pytest.raises(NotAuthorizedError):
            await service.delete_post(post.id, UserId(uuid4()))
