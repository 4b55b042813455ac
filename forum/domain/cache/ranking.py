"""Ranking cache interface.

The cache keeps two ranked indexes of live posts, one ordered by creation
time and one by hotness, plus a summary record per post for list views.
The relational store stays the system of record: everything here can be
rebuilt from it.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from forum.domain.model.post import PostSummary
from forum.domain.value import PostId, RankingOrder


class RankingCache(ABC):
    """Cache of post summaries and ranked post indexes."""

    @abstractmethod
    async def record_new_post(
        self, summary: PostSummary, created_at: Optional[datetime] = None
    ) -> None:
        """Index a freshly created post.

        Stores the summary and adds the post to both ranked indexes with zero
        votes, in a single transaction.

        Args:
            summary: Post summary to cache
            created_at: Creation time (defaults to now)
        """
        pass

    @abstractmethod
    async def store_summary(self, summary: PostSummary) -> None:
        """Store a summary without touching the ranked indexes."""
        pass

    @abstractmethod
    async def list_ids(
        self, order: RankingOrder, page: int, page_size: int
    ) -> List[PostId]:
        """List post IDs of one page, highest score first.

        Args:
            order: Which index to read
            page: 1-based page number
            page_size: Posts per page

        Returns:
            Post IDs, empty past the end of the index
        """
        pass

    @abstractmethod
    async def fetch_summaries(
        self, post_ids: Sequence[PostId]
    ) -> Tuple[List[PostSummary], List[PostId]]:
        """Fetch cached summaries in bulk.

        Args:
            post_ids: IDs to fetch

        Returns:
            (summaries found in input order, IDs with no cached summary)
        """
        pass

    @abstractmethod
    async def invalidate(self, post_id: PostId) -> None:
        """Delete the cached summary only. Idempotent."""
        pass

    @abstractmethod
    async def remove(self, post_id: PostId) -> None:
        """Delete the summary and drop the post from both indexes atomically."""
        pass

    @abstractmethod
    async def increment_score(
        self, post_id: PostId, old_votes: int, new_votes: int
    ) -> Optional[float]:
        """Apply a vote change to the hotness index.

        Only posts already present in the index are updated, so a removed
        post is never brought back.

        Returns:
            The new hot score, or None if the post is not ranked
        """
        pass

    @abstractmethod
    async def set_score(
        self, post_id: PostId, net_votes: int, created_at: datetime
    ) -> None:
        """Write both index memberships from scratch, atomically."""
        pass

    @abstractmethod
    async def get_score(self, post_id: PostId, order: RankingOrder) -> Optional[float]:
        """Read a post's score in one index, None if absent."""
        pass
