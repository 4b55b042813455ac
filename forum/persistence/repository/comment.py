"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Comment
from forum.domain.repository.comment import CommentRepository
from forum.domain.value import CommentId, PostId
from forum.persistence.mappers import comment_to_dict, row_to_comment
from forum.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_post(
        self,
        post_id: PostId,
        parent_id: Optional[CommentId] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[Comment]:
        """List live comments of a post at one level of the thread, newest first."""
        stmt = select(comments_table).where(
            comments_table.c.post_id == post_id,
            comments_table.c.deleted_at.is_(None),
        )
        if parent_id is None:
            stmt = stmt.where(comments_table.c.parent_id.is_(None))
        else:
            stmt = stmt.where(comments_table.c.parent_id == parent_id)

        stmt = (
            stmt.order_by(comments_table.c.created_at.desc(), comments_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        stmt = insert(comments_table).values(**comment_to_dict(comment))
        await self.session.execute(stmt)
        await self.session.flush()
        return comment

    async def increment_votes(self, comment_id: CommentId) -> None:
        """Atomically increment the vote count by 1."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(vote_count=comments_table.c.vote_count + 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def decrement_votes(self, comment_id: CommentId) -> None:
        """Atomically decrement the vote count by 1 (minimum 0)."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .where(comments_table.c.vote_count > 0)
            .values(vote_count=comments_table.c.vote_count - 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def get_vote_count(self, comment_id: CommentId) -> Optional[int]:
        """Read the current vote count."""
        stmt = select(comments_table.c.vote_count).where(
            comments_table.c.id == comment_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
