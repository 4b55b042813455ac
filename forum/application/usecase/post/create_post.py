"""Create post use case."""

from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from forum.domain.model.post import Post
from forum.domain.service import PostService
from forum.domain.value import CommunityId, PostId, UserId

from .common import PostResponse


class CreatePostRequest(BaseModel):
    """Create post request."""

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(default="", max_length=20000)
    author_id: str  # User ID from authenticated user
    author_name: str
    community_id: str  # UUID string
    community_name: str


class CreatePostUseCase:
    """Use case for creating a post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize create post use case.

        Args:
            post_service: Post domain service
        """
        self.post_service = post_service

    async def execute(self, request: CreatePostRequest) -> PostResponse:
        """Create the post and index it for listing.

        Args:
            request: Create post request

        Returns:
            Created post
        """
        post = Post(
            id=PostId(uuid4()),
            title=request.title,
            content=request.content,
            author_id=UserId(UUID(request.author_id)),
            author_name=request.author_name,
            community_id=CommunityId(UUID(request.community_id)),
            community_name=request.community_name,
        )
        saved = await self.post_service.create_post(post)
        return PostResponse.from_post(saved)
