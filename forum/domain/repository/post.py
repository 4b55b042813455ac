"""Post repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from forum.domain.model.post import Post
from forum.domain.value import CommunityId, PostId


class PostRepository(ABC):
    """Repository for Post aggregate.

    Defines the contract for post persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found (including soft-deleted posts), None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, post_ids: Sequence[PostId]) -> List[Post]:
        """Find live posts by ID (batch query).

        Soft-deleted posts are excluded. Order of the result is unspecified.

        Args:
            post_ids: IDs to look up

        Returns:
            Posts found
        """
        pass

    @abstractmethod
    async def find_by_community(
        self, community_id: CommunityId, limit: int, offset: int = 0
    ) -> List[Post]:
        """List a community's live posts, newest first.

        Args:
            community_id: Community to list
            limit: Maximum number of posts
            offset: Number of posts to skip

        Returns:
            Posts of the page
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save a new post.

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass

    @abstractmethod
    async def update_content(self, post_id: PostId, content: str) -> Optional[Post]:
        """Update the content of a post and bump updated_at.

        Args:
            post_id: ID of the post to update
            content: New content

        Returns:
            Updated Post entity, or None if post doesn't exist or is deleted
        """
        pass

    @abstractmethod
    async def soft_delete(self, post_id: PostId) -> bool:
        """Mark a post as deleted.

        Args:
            post_id: The post ID

        Returns:
            True if a live post was deleted, False otherwise
        """
        pass

    @abstractmethod
    async def increment_votes(self, post_id: PostId) -> None:
        """Atomically increment the vote count by 1.

        Uses SQL-level increment to avoid race conditions.

        Args:
            post_id: The post ID
        """
        pass

    @abstractmethod
    async def decrement_votes(self, post_id: PostId) -> None:
        """Atomically decrement the vote count by 1 (minimum 0).

        Args:
            post_id: The post ID
        """
        pass

    @abstractmethod
    async def get_vote_count(self, post_id: PostId) -> Optional[int]:
        """Read the current vote count.

        Returns:
            Vote count, or None if the post doesn't exist
        """
        pass

    @abstractmethod
    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment the comment count by 1."""
        pass
