"""PostgreSQL implementation of Post repository."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

import logfire
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Post
from forum.domain.repository.post import PostRepository
from forum.domain.value import CommunityId, PostId
from forum.persistence.mappers import post_to_dict, row_to_post
from forum.persistence.tables import posts_table


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        stmt = select(posts_table).where(posts_table.c.id == post_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def find_by_ids(self, post_ids: Sequence[PostId]) -> List[Post]:
        """Find live posts by ID (batch query)."""
        if not post_ids:
            return []

        stmt = select(posts_table).where(
            posts_table.c.id.in_(post_ids),
            posts_table.c.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return [row_to_post(row._asdict()) for row in result.fetchall()]

    async def find_by_community(
        self, community_id: CommunityId, limit: int, offset: int = 0
    ) -> List[Post]:
        """List a community's live posts, newest first."""
        stmt = (
            select(posts_table)
            .where(
                posts_table.c.community_id == community_id,
                posts_table.c.deleted_at.is_(None),
            )
            .order_by(posts_table.c.created_at.desc(), posts_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_post(row._asdict()) for row in result.fetchall()]

    async def save(self, post: Post) -> Post:
        """Insert a new post."""
        stmt = insert(posts_table).values(**post_to_dict(post))
        await self.session.execute(stmt)
        await self.session.flush()
        return post

    async def update_content(self, post_id: PostId, content: str) -> Optional[Post]:
        """Update the content of a live post."""
        with logfire.span("post_repository.update_content", post_id=str(post_id)):
            stmt = (
                update(posts_table)
                .where(posts_table.c.id == post_id)
                .where(posts_table.c.deleted_at.is_(None))
                .values(content=content, updated_at=datetime.now(timezone.utc))
                .returning(posts_table)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            await self.session.flush()
            return row_to_post(row._asdict()) if row else None

    async def soft_delete(self, post_id: PostId) -> bool:
        """Mark a live post as deleted."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .where(posts_table.c.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def increment_votes(self, post_id: PostId) -> None:
        """Atomically increment the vote count by 1."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(vote_count=posts_table.c.vote_count + 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def decrement_votes(self, post_id: PostId) -> None:
        """Atomically decrement the vote count by 1 (minimum 0)."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .where(posts_table.c.vote_count > 0)
            .values(vote_count=posts_table.c.vote_count - 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def get_vote_count(self, post_id: PostId) -> Optional[int]:
        """Read the current vote count."""
        stmt = select(posts_table.c.vote_count).where(posts_table.c.id == post_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment the comment count by 1."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(comment_count=posts_table.c.comment_count + 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()
