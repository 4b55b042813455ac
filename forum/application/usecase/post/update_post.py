"""Update post use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from forum.domain.service import PostService
from forum.domain.value import PostId, UserId

from .common import PostResponse


class UpdatePostRequest(BaseModel):
    """Update post request."""

    post_id: str  # UUID string
    user_id: str  # Current user ID (must be author)
    content: str = Field(max_length=20000)


class UpdatePostUseCase:
    """Use case for updating a post's content."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize update post use case.

        Args:
            post_service: Post service
        """
        self.post_service = post_service

    async def execute(self, request: UpdatePostRequest) -> PostResponse:
        """Execute update post flow.

        Args:
            request: Update post request with post ID, user ID, and new content

        Returns:
            Updated post details

        Raises:
            NotFoundError: If the post doesn't exist
            NotAuthorizedError: If user doesn't own the post
            ContentDeletedException: If post is deleted
        """
        updated = await self.post_service.update_content(
            PostId(UUID(request.post_id)),
            UserId(UUID(request.user_id)),
            request.content,
        )
        return PostResponse.from_post(updated)
