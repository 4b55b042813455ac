"""Unit tests for the in-memory RankingCache."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from forum.domain.service.ranking import hot_score, hot_score_delta
from forum.domain.value import PostId, RankingOrder
from forum.persistence.cache.inmemory import InMemoryRankingCache
from tests.conftest import make_post


class TestRankingCache:
    """Behaviour shared by every RankingCache implementation."""

    @pytest.mark.asyncio
    async def test_recorded_post_can_be_fetched(self):
        """record_new_post then fetch_summaries returns the summary, no misses."""
        # Arrange
        cache = InMemoryRankingCache()
        post = make_post()

        # Act
        await cache.record_new_post(post.to_summary(), post.created_at)
        summaries, missing = await cache.fetch_summaries([post.id])

        # Assert
        assert summaries == [post.to_summary()]
        assert missing == []

    @pytest.mark.asyncio
    async def test_new_post_is_ranked_in_both_orders(self):
        cache = InMemoryRankingCache()
        post = make_post()

        await cache.record_new_post(post.to_summary(), post.created_at)

        assert await cache.get_score(post.id, RankingOrder.HOT) == pytest.approx(
            hot_score(0, post.created_at)
        )
        assert await cache.get_score(post.id, RankingOrder.TIME) == pytest.approx(
            post.created_at.timestamp()
        )

    @pytest.mark.asyncio
    async def test_invalidate_twice_equals_once(self):
        """invalidate is idempotent and keeps the post ranked."""
        # Arrange
        cache = InMemoryRankingCache()
        post = make_post()
        await cache.record_new_post(post.to_summary(), post.created_at)

        # Act
        await cache.invalidate(post.id)
        await cache.invalidate(post.id)

        # Assert
        summaries, missing = await cache.fetch_summaries([post.id])
        assert summaries == []
        assert missing == [post.id]
        assert await cache.list_ids(RankingOrder.HOT, 1, 10) == [post.id]

    @pytest.mark.asyncio
    async def test_list_ids_is_sorted_by_score_descending(self):
        """list_ids(hot) should be non-increasing by score."""
        # Arrange
        cache = InMemoryRankingCache()
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        posts = [make_post(created_at=base + timedelta(hours=i)) for i in range(5)]
        for post in posts:
            await cache.record_new_post(post.to_summary(), post.created_at)
        await cache.set_score(posts[0].id, 1000, posts[0].created_at)

        # Act
        ids = await cache.list_ids(RankingOrder.HOT, 1, 10)

        # Assert
        scores = [await cache.get_score(i, RankingOrder.HOT) for i in ids]
        assert scores == sorted(scores, reverse=True)
        assert ids[0] == posts[0].id

    @pytest.mark.asyncio
    async def test_time_order_is_newest_first(self):
        cache = InMemoryRankingCache()
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        older = make_post(created_at=base)
        newer = make_post(created_at=base + timedelta(minutes=5))
        await cache.record_new_post(older.to_summary(), older.created_at)
        await cache.record_new_post(newer.to_summary(), newer.created_at)

        assert await cache.list_ids(RankingOrder.TIME, 1, 10) == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_pagination(self):
        """Pages slice the ranking; a page past the end is empty."""
        # Arrange
        cache = InMemoryRankingCache()
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i in range(5):
            post = make_post(created_at=base + timedelta(minutes=i))
            await cache.record_new_post(post.to_summary(), post.created_at)

        # Act
        first = await cache.list_ids(RankingOrder.TIME, 1, 2)
        last = await cache.list_ids(RankingOrder.TIME, 3, 2)
        past_end = await cache.list_ids(RankingOrder.TIME, 4, 2)

        # Assert
        assert len(first) == 2
        assert len(last) == 1
        assert past_end == []

    @pytest.mark.asyncio
    async def test_increment_score_applies_vote_delta(self):
        # Arrange
        cache = InMemoryRankingCache()
        post = make_post()
        await cache.set_score(post.id, 4, post.created_at)

        # Act
        score = await cache.increment_score(post.id, 4, 5)

        # Assert
        assert score == pytest.approx(hot_score(4, post.created_at) + hot_score_delta(4, 5))
        assert score == pytest.approx(hot_score(5, post.created_at))

    @pytest.mark.asyncio
    async def test_increment_score_does_not_rank_unknown_post(self):
        """An unranked post stays unranked."""
        cache = InMemoryRankingCache()
        post_id = PostId(uuid4())

        assert await cache.increment_score(post_id, 0, 1) is None
        assert await cache.get_score(post_id, RankingOrder.HOT) is None

    @pytest.mark.asyncio
    async def test_store_summary_does_not_rank(self):
        """Repopulating a summary never touches the rankings."""
        cache = InMemoryRankingCache()
        post = make_post()

        await cache.store_summary(post.to_summary())

        assert await cache.list_ids(RankingOrder.HOT, 1, 10) == []
        summaries, _ = await cache.fetch_summaries([post.id])
        assert summaries == [post.to_summary()]

    @pytest.mark.asyncio
    async def test_remove_drops_summary_and_rankings(self):
        cache = InMemoryRankingCache()
        post = make_post()
        await cache.record_new_post(post.to_summary(), post.created_at)

        await cache.remove(post.id)

        assert await cache.list_ids(RankingOrder.HOT, 1, 10) == []
        assert await cache.list_ids(RankingOrder.TIME, 1, 10) == []
        _, missing = await cache.fetch_summaries([post.id])
        assert missing == [post.id]
