"""Delete post use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.domain.service import PostService
from forum.domain.value import PostId, UserId


class DeletePostRequest(BaseModel):
    """Delete post request."""

    post_id: str  # UUID string
    user_id: str  # Current user ID (must be author)


class DeletePostResponse(BaseModel):
    """Delete post response."""

    success: bool


class DeletePostUseCase:
    """Use case for deleting a post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: DeletePostRequest) -> DeletePostResponse:
        """Soft delete the post and drop it from listings.

        Raises:
            NotFoundError: If the post doesn't exist
            NotAuthorizedError: If user doesn't own the post
            ContentDeletedException: If post is already deleted
        """
        await self.post_service.delete_post(
            PostId(UUID(request.post_id)), UserId(UUID(request.user_id))
        )
        return DeletePostResponse(success=True)
