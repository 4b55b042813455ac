"""Redis implementations of the cache interfaces."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

import logfire
from pydantic import ValidationError
from redis.asyncio import Redis

from forum.config import CacheSettings
from forum.domain.cache import RankingCache, TokenBlacklist
from forum.domain.model.post import PostSummary
from forum.domain.service.ranking import hot_score, hot_score_delta, unix_timestamp
from forum.domain.value import PostId, RankingOrder
from forum.persistence.cache.keys import (
    POST_RANKING_KEY,
    POST_TIME_KEY,
    blacklist_key,
    ranking_key,
    summary_key,
)
from forum.persistence.mappers import json_to_summary, summary_to_json


class RedisRankingCache(RankingCache):
    """Ranking cache stored in Redis.

    Summaries are plain string keys with a TTL; the two indexes are sorted
    sets. Multi-key updates run as MULTI/EXEC transactions.

    The client must be created with ``decode_responses=True``.
    """

    def __init__(self, client: Redis, settings: CacheSettings) -> None:
        """Initialize Redis ranking cache.

        Args:
            client: Async Redis client
            settings: Cache configuration
        """
        self.client = client
        self.settings = settings

    async def record_new_post(
        self, summary: PostSummary, created_at: Optional[datetime] = None
    ) -> None:
        created_at = created_at or datetime.now(timezone.utc)
        member = str(summary.post_id)

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.set(
                summary_key(summary.post_id),
                summary_to_json(summary),
                ex=self.settings.summary_ttl_seconds,
            )
            pipe.zadd(POST_TIME_KEY, {member: unix_timestamp(created_at)})
            pipe.zadd(POST_RANKING_KEY, {member: hot_score(0, created_at)})
            await pipe.execute()

        logfire.debug("Post indexed", post_id=member)

    async def store_summary(self, summary: PostSummary) -> None:
        await self.client.set(
            summary_key(summary.post_id),
            summary_to_json(summary),
            ex=self.settings.summary_ttl_seconds,
        )

    async def list_ids(
        self, order: RankingOrder, page: int, page_size: int
    ) -> List[PostId]:
        start = (page - 1) * page_size
        end = start + page_size - 1
        members = await self.client.zrevrange(ranking_key(order), start, end)
        return [PostId(UUID(member)) for member in members]

    async def fetch_summaries(
        self, post_ids: Sequence[PostId]
    ) -> Tuple[List[PostSummary], List[PostId]]:
        if not post_ids:
            return [], []

        values = await self.client.mget([summary_key(post_id) for post_id in post_ids])

        summaries: List[PostSummary] = []
        missing: List[PostId] = []
        for post_id, raw in zip(post_ids, values):
            if raw is None:
                missing.append(post_id)
                continue
            try:
                summaries.append(json_to_summary(raw))
            except ValidationError as e:
                logfire.warn("Unreadable cached summary", post_id=str(post_id), error=str(e))
                missing.append(post_id)
        return summaries, missing

    async def invalidate(self, post_id: PostId) -> None:
        await self.client.delete(summary_key(post_id))

    async def remove(self, post_id: PostId) -> None:
        member = str(post_id)
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(summary_key(post_id))
            pipe.zrem(POST_RANKING_KEY, member)
            pipe.zrem(POST_TIME_KEY, member)
            await pipe.execute()

    async def increment_score(
        self, post_id: PostId, old_votes: int, new_votes: int
    ) -> Optional[float]:
        delta = hot_score_delta(old_votes, new_votes)
        # XX: only existing members, so a removed post stays removed
        return await self.client.zadd(
            POST_RANKING_KEY, {str(post_id): delta}, xx=True, incr=True
        )

    async def set_score(
        self, post_id: PostId, net_votes: int, created_at: datetime
    ) -> None:
        member = str(post_id)
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.zadd(POST_TIME_KEY, {member: unix_timestamp(created_at)})
            pipe.zadd(POST_RANKING_KEY, {member: hot_score(net_votes, created_at)})
            await pipe.execute()

    async def get_score(self, post_id: PostId, order: RankingOrder) -> Optional[float]:
        return await self.client.zscore(ranking_key(order), str(post_id))


class RedisTokenBlacklist(TokenBlacklist):
    """Revoked tokens as Redis keys expiring with the token."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    async def add(self, token: str, ttl_seconds: int) -> None:
        await self.client.set(blacklist_key(token), "1", ex=ttl_seconds)

    async def contains(self, token: str) -> bool:
        return await self.client.exists(blacklist_key(token)) > 0
