"""In-memory post repository for testing."""

from datetime import datetime, timezone
from typing import Optional, Sequence

from forum.domain.model.post import Post
from forum.domain.repository.post import PostRepository
from forum.domain.value import CommunityId, PostId


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing."""

    def __init__(self) -> None:
        self._posts: dict[PostId, Post] = {}

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self._posts.get(post_id)

    async def find_by_ids(self, post_ids: Sequence[PostId]) -> list[Post]:
        """Find live posts by ID."""
        return [
            self._posts[post_id]
            for post_id in post_ids
            if post_id in self._posts and self._posts[post_id].deleted_at is None
        ]

    async def find_by_community(
        self, community_id: CommunityId, limit: int, offset: int = 0
    ) -> list[Post]:
        """List a community's live posts, newest first."""
        posts = sorted(
            (
                post
                for post in self._posts.values()
                if post.community_id == community_id and post.deleted_at is None
            ),
            key=lambda post: post.created_at,
            reverse=True,
        )
        return posts[offset : offset + limit]

    async def save(self, post: Post) -> Post:
        """Save a post."""
        self._posts[post.id] = post
        return post

    async def update_content(self, post_id: PostId, content: str) -> Optional[Post]:
        """Update the content of a live post."""
        post = self._posts.get(post_id)
        if post is None or post.deleted_at is not None:
            return None

        updated = post.model_copy(
            update={"content": content, "updated_at": datetime.now(timezone.utc)}
        )
        self._posts[post_id] = updated
        return updated

    async def soft_delete(self, post_id: PostId) -> bool:
        """Mark a live post as deleted."""
        post = self._posts.get(post_id)
        if post is None or post.deleted_at is not None:
            return False

        self._posts[post_id] = post.model_copy(
            update={"deleted_at": datetime.now(timezone.utc)}
        )
        return True

    async def increment_votes(self, post_id: PostId) -> None:
        """Increment the vote count by 1."""
        if post_id in self._posts:
            post = self._posts[post_id]
            self._posts[post_id] = post.model_copy(
                update={"vote_count": post.vote_count + 1}
            )

    async def decrement_votes(self, post_id: PostId) -> None:
        """Decrement the vote count by 1 (minimum 0)."""
        if post_id in self._posts:
            post = self._posts[post_id]
            self._posts[post_id] = post.model_copy(
                update={"vote_count": max(0, post.vote_count - 1)}
            )

    async def get_vote_count(self, post_id: PostId) -> Optional[int]:
        """Read the current vote count."""
        post = self._posts.get(post_id)
        return post.vote_count if post else None

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Increment the comment count by 1."""
        if post_id in self._posts:
            post = self._posts[post_id]
            self._posts[post_id] = post.model_copy(
                update={"comment_count": post.comment_count + 1}
            )
