"""Create comment use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from forum.domain.model.comment import Comment
from forum.domain.service import CommentService
from forum.domain.value import CommentId, PostId, UserId


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    post_id: str  # UUID string
    author_id: str  # User ID from authenticated user
    author_name: str
    content: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[str] = None  # UUID string for replies


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment_id: str
    post_id: str
    parent_id: Optional[str]
    author_id: str
    author_name: str
    content: str
    vote_count: int
    created_at: datetime


class CreateCommentUseCase:
    """Use case for commenting on a post or replying to a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Create the comment and notify the author it replies to.

        Raises:
            NotFoundError: If the post or parent comment doesn't exist
            ContentDeletedException: If the post was deleted
            ValidationError: If the parent belongs to another post
        """
        comment = Comment(
            id=CommentId(uuid4()),
            post_id=PostId(UUID(request.post_id)),
            author_id=UserId(UUID(request.author_id)),
            author_name=request.author_name,
            content=request.content,
            parent_id=CommentId(UUID(request.parent_id)) if request.parent_id else None,
        )
        saved = await self.comment_service.create_comment(comment)
        return CreateCommentResponse(
            comment_id=str(saved.id),
            post_id=str(saved.post_id),
            parent_id=str(saved.parent_id) if saved.parent_id else None,
            author_id=str(saved.author_id),
            author_name=saved.author_name,
            content=saved.content,
            vote_count=saved.vote_count,
            created_at=saved.created_at,
        )
