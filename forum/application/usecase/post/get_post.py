"""Get post use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.domain.service import PostService
from forum.domain.value import PostId

from .common import PostResponse


class GetPostRequest(BaseModel):
    """Get post request."""

    post_id: str  # UUID string


class GetPostUseCase:
    """Use case for reading a single post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: GetPostRequest) -> PostResponse:
        """Read a live post.

        Raises:
            NotFoundError: If the post doesn't exist or was deleted
        """
        post = await self.post_service.get_post(PostId(UUID(request.post_id)))
        return PostResponse.from_post(post)
