"""List comments use cases."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from forum.domain.model.comment import Comment
from forum.domain.service import CommentService
from forum.domain.value import CommentId, PostId


class CommentItem(BaseModel):
    """Comment item in list responses."""

    comment_id: str
    post_id: str
    parent_id: Optional[str]
    author_id: str
    author_name: str
    content: str
    vote_count: int
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentItem":
        return cls(
            comment_id=str(comment.id),
            post_id=str(comment.post_id),
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            author_id=str(comment.author_id),
            author_name=comment.author_name,
            content=comment.content,
            vote_count=comment.vote_count,
            created_at=comment.created_at,
        )


class ListCommentsRequest(BaseModel):
    """List top-level comments request."""

    post_id: str  # UUID string
    page: int = 1
    page_size: int = 10


class ListCommentsResponse(BaseModel):
    """List top-level comments response."""

    post_id: str
    comments: list[CommentItem]


class ListRepliesRequest(BaseModel):
    """List replies request."""

    comment_id: str  # UUID string
    page: int = 1
    page_size: int = 10


class ListRepliesResponse(BaseModel):
    """List replies response."""

    comment_id: str
    replies: list[CommentItem]


class ListCommentsUseCase:
    """Use case for paging through a post's top-level comments."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: ListCommentsRequest) -> ListCommentsResponse:
        """List one page of top-level comments, newest first.

        Raises:
            NotFoundError: If the post doesn't exist or was deleted
        """
        comments = await self.comment_service.list_comments(
            PostId(UUID(request.post_id)), request.page, request.page_size
        )
        return ListCommentsResponse(
            post_id=request.post_id,
            comments=[CommentItem.from_comment(c) for c in comments],
        )


class ListRepliesUseCase:
    """Use case for paging through the direct replies to a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: ListRepliesRequest) -> ListRepliesResponse:
        """List one page of replies, newest first.

        Raises:
            NotFoundError: If the comment doesn't exist or was deleted
        """
        replies = await self.comment_service.list_replies(
            CommentId(UUID(request.comment_id)), request.page, request.page_size
        )
        return ListRepliesResponse(
            comment_id=request.comment_id,
            replies=[CommentItem.from_comment(c) for c in replies],
        )
