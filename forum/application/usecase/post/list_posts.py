"""List posts use case."""

from pydantic import BaseModel

from forum.domain.service import PostService
from forum.domain.value import RankingOrder

from .common import PostSummaryResponse


class ListPostsRequest(BaseModel):
    """List posts request.

    Non-positive page and page size fall back to the first page and the
    default size.
    """

    order: RankingOrder = RankingOrder.HOT
    page: int = 1
    page_size: int = 10


class ListPostsResponse(BaseModel):
    """List posts response."""

    order: RankingOrder
    page: int
    page_size: int
    posts: list[PostSummaryResponse]


class ListPostsUseCase:
    """Use case for listing posts by hotness or recency."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: ListPostsRequest) -> ListPostsResponse:
        summaries = await self.post_service.list_posts(
            request.order, request.page, request.page_size
        )
        return ListPostsResponse(
            order=request.order,
            page=max(request.page, 1),
            page_size=request.page_size if request.page_size > 0 else 10,
            posts=[PostSummaryResponse.from_summary(s) for s in summaries],
        )
