"""List community posts use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.domain.service import PostService
from forum.domain.service.post_service import normalize_paging
from forum.domain.value import CommunityId

from .common import PostSummaryResponse


class ListCommunityPostsRequest(BaseModel):
    """List community posts request."""

    community_id: str  # UUID string
    page: int = 1
    page_size: int = 10


class ListCommunityPostsResponse(BaseModel):
    """List community posts response."""

    community_id: str
    page: int
    page_size: int
    posts: list[PostSummaryResponse]


class ListCommunityPostsUseCase:
    """Use case for listing one community's posts, newest first."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(
        self, request: ListCommunityPostsRequest
    ) -> ListCommunityPostsResponse:
        summaries = await self.post_service.list_community_posts(
            CommunityId(UUID(request.community_id)), request.page, request.page_size
        )
        page, page_size = normalize_paging(request.page, request.page_size)
        return ListCommunityPostsResponse(
            community_id=request.community_id,
            page=page,
            page_size=page_size,
            posts=[PostSummaryResponse.from_summary(s) for s in summaries],
        )
