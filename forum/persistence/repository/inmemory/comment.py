"""In-memory comment repository for testing."""

from typing import Optional

from forum.domain.model.comment import Comment
from forum.domain.repository.comment import CommentRepository
from forum.domain.value import CommentId, PostId


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_by_post(
        self,
        post_id: PostId,
        parent_id: Optional[CommentId] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Comment]:
        """List live comments of a post at one level of the thread, newest first."""
        comments = sorted(
            (
                comment
                for comment in self._comments.values()
                if comment.post_id == post_id
                and comment.parent_id == parent_id
                and comment.deleted_at is None
            ),
            key=lambda comment: comment.created_at,
            reverse=True,
        )
        return comments[offset : offset + limit]

    async def save(self, comment: Comment) -> Comment:
        """Save a comment."""
        self._comments[comment.id] = comment
        return comment

    async def increment_votes(self, comment_id: CommentId) -> None:
        """Increment the vote count by 1."""
        if comment_id in self._comments:
            comment = self._comments[comment_id]
            self._comments[comment_id] = comment.model_copy(
                update={"vote_count": comment.vote_count + 1}
            )

    async def decrement_votes(self, comment_id: CommentId) -> None:
        """Decrement the vote count by 1 (minimum 0)."""
        if comment_id in self._comments:
            comment = self._comments[comment_id]
            self._comments[comment_id] = comment.model_copy(
                update={"vote_count": max(0, comment.vote_count - 1)}
            )

    async def get_vote_count(self, comment_id: CommentId) -> Optional[int]:
        """Read the current vote count."""
        comment = self._comments.get(comment_id)
        return comment.vote_count if comment else None
