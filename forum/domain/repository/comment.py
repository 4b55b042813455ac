"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from forum.domain.model.comment import Comment
from forum.domain.value import CommentId, PostId


class CommentRepository(ABC):
    """Repository for Comment entity."""

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_post(
        self,
        post_id: PostId,
        parent_id: Optional[CommentId] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[Comment]:
        """List live comments of a post at one level of the thread, newest first.

        Args:
            post_id: Post the comments belong to
            parent_id: Parent comment, or None for top-level comments
            limit: Maximum number of comments
            offset: Number of comments to skip

        Returns:
            Comments of the page
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a new comment."""
        pass

    @abstractmethod
    async def increment_votes(self, comment_id: CommentId) -> None:
        """Atomically increment the vote count by 1."""
        pass

    @abstractmethod
    async def decrement_votes(self, comment_id: CommentId) -> None:
        """Atomically decrement the vote count by 1 (minimum 0)."""
        pass

    @abstractmethod
    async def get_vote_count(self, comment_id: CommentId) -> Optional[int]:
        """Read the current vote count, None if the comment doesn't exist."""
        pass
