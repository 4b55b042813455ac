"""In-memory cache implementations for testing."""

import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from forum.domain.cache import RankingCache, TokenBlacklist
from forum.domain.model.post import PostSummary
from forum.domain.service.ranking import hot_score, hot_score_delta, unix_timestamp
from forum.domain.value import PostId, RankingOrder


class InMemoryRankingCache(RankingCache):
    """In-memory implementation of RankingCache for testing.

    Orders ties the way Redis does (by member, descending, in a reverse
    range). Summary TTLs are not modelled.
    """

    def __init__(self) -> None:
        self.summaries: dict[PostId, PostSummary] = {}
        self._scores: dict[RankingOrder, dict[PostId, float]] = {
            RankingOrder.HOT: {},
            RankingOrder.TIME: {},
        }

    async def record_new_post(
        self, summary: PostSummary, created_at: Optional[datetime] = None
    ) -> None:
        created_at = created_at or datetime.now(timezone.utc)
        self.summaries[summary.post_id] = summary
        self._scores[RankingOrder.TIME][summary.post_id] = unix_timestamp(created_at)
        self._scores[RankingOrder.HOT][summary.post_id] = hot_score(0, created_at)

    async def store_summary(self, summary: PostSummary) -> None:
        self.summaries[summary.post_id] = summary

    async def list_ids(
        self, order: RankingOrder, page: int, page_size: int
    ) -> list[PostId]:
        start = (page - 1) * page_size
        ranked = sorted(
            self._scores[order].items(),
            key=lambda item: (item[1], str(item[0])),
            reverse=True,
        )
        return [post_id for post_id, _ in ranked[start : start + page_size]]

    async def fetch_summaries(
        self, post_ids: Sequence[PostId]
    ) -> tuple[list[PostSummary], list[PostId]]:
        summaries = [self.summaries[p] for p in post_ids if p in self.summaries]
        missing = [p for p in post_ids if p not in self.summaries]
        return summaries, missing

    async def invalidate(self, post_id: PostId) -> None:
        self.summaries.pop(post_id, None)

    async def remove(self, post_id: PostId) -> None:
        self.summaries.pop(post_id, None)
        for scores in self._scores.values():
            scores.pop(post_id, None)

    async def increment_score(
        self, post_id: PostId, old_votes: int, new_votes: int
    ) -> Optional[float]:
        scores = self._scores[RankingOrder.HOT]
        if post_id not in scores:
            return None
        scores[post_id] += hot_score_delta(old_votes, new_votes)
        return scores[post_id]

    async def set_score(
        self, post_id: PostId, net_votes: int, created_at: datetime
    ) -> None:
        self._scores[RankingOrder.TIME][post_id] = unix_timestamp(created_at)
        self._scores[RankingOrder.HOT][post_id] = hot_score(net_votes, created_at)

    async def get_score(self, post_id: PostId, order: RankingOrder) -> Optional[float]:
        return self._scores[order].get(post_id)


class InMemoryTokenBlacklist(TokenBlacklist):
    """In-memory implementation of TokenBlacklist for testing."""

    def __init__(self) -> None:
        self._expiry: dict[str, float] = {}

    async def add(self, token: str, ttl_seconds: int) -> None:
        self._expiry[token] = time.monotonic() + ttl_seconds

    async def contains(self, token: str) -> bool:
        expires_at = self._expiry.get(token)
        if expires_at is None:
            return False
        if expires_at <= time.monotonic():
            del self._expiry[token]
            return False
        return True
