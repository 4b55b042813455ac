"""Post routes."""

from uuid import UUID

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, status
from pydantic import BaseModel, Field

from forum.application.usecase.auth import GetCurrentUserUseCase
from forum.application.usecase.post import (
    CreatePostRequest,
    CreatePostUseCase,
    DeletePostRequest,
    DeletePostResponse,
    DeletePostUseCase,
    GetPostRequest,
    GetPostUseCase,
    ListCommunityPostsRequest,
    ListCommunityPostsResponse,
    ListCommunityPostsUseCase,
    ListPostsRequest,
    ListPostsResponse,
    ListPostsUseCase,
    PostResponse,
    UpdatePostRequest,
    UpdatePostUseCase,
)
from forum.domain.error import DomainError
from forum.domain.value import RankingOrder
from forum.interface.api.auth import require_user
from forum.interface.error import domain_error_to_http

router = APIRouter(prefix="/posts", tags=["posts"], route_class=DishkaRoute)


class CreatePostAPIRequest(BaseModel):
    """API request for creating a post."""

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(default="", max_length=20000)
    community_id: UUID
    community_name: str = Field(min_length=1, max_length=100)


class UpdatePostAPIRequest(BaseModel):
    """API request for updating a post."""

    content: str = Field(max_length=20000)


@router.get("", response_model=ListPostsResponse)
async def list_posts(
    list_posts_use_case: FromDishka[ListPostsUseCase],
    order: RankingOrder = RankingOrder.HOT,
    page: int = 1,
    page_size: int = 10,
) -> ListPostsResponse:
    """List post summaries by hotness or recency.

    Args:
        list_posts_use_case: List posts use case from DI
        order: "hot" or "time"
        page: 1-based page number
        page_size: Posts per page

    Returns:
        One page of post summaries
    """
    return await list_posts_use_case.execute(
        ListPostsRequest(order=order, page=page, page_size=page_size)
    )


@router.get("/community/{community_id}", response_model=ListCommunityPostsResponse)
async def list_community_posts(
    community_id: UUID,
    list_community_posts_use_case: FromDishka[ListCommunityPostsUseCase],
    page: int = 1,
    page_size: int = 10,
) -> ListCommunityPostsResponse:
    """List one community's posts, newest first.

    Args:
        community_id: Community UUID
        list_community_posts_use_case: List community posts use case from DI
        page: 1-based page number
        page_size: Posts per page

    Returns:
        One page of post summaries
    """
    return await list_community_posts_use_case.execute(
        ListCommunityPostsRequest(
            community_id=str(community_id), page=page, page_size=page_size
        )
    )


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostAPIRequest,
    create_post_use_case: FromDishka[CreatePostUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> PostResponse:
    """Create a new post.

    Requires authentication.

    Args:
        request: Post creation data
        create_post_use_case: Create post use case from DI
        get_current_user_use_case: Get current user use case from DI
        auth_token: JWT token from cookie

    Returns:
        Created post details

    Raises:
        HTTPException: If not authenticated or validation fails
    """
    user = await require_user(auth_token, get_current_user_use_case, "create posts")

    try:
        use_case_request = CreatePostRequest(
            title=request.title,
            content=request.content,
            author_id=user.user_id,
            author_name=user.username,
            community_id=str(request.community_id),
            community_name=request.community_name,
        )
        return await create_post_use_case.execute(use_case_request)
    except DomainError as e:
        logfire.warn("Post creation domain error", error=str(e))
        raise domain_error_to_http(e)
    except ValueError as e:
        logfire.warn("Post creation validation error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    get_post_use_case: FromDishka[GetPostUseCase],
) -> PostResponse:
    """Get a single post.

    Raises:
        HTTPException: 404 if the post doesn't exist or was deleted
    """
    try:
        return await get_post_use_case.execute(GetPostRequest(post_id=str(post_id)))
    except DomainError as e:
        raise domain_error_to_http(e)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    request: UpdatePostAPIRequest,
    update_post_use_case: FromDishka[UpdatePostUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> PostResponse:
    """Update a post's content.

    Only the post author can edit.

    Args:
        post_id: Post UUID
        request: Update data (content)
        update_post_use_case: Update post use case from DI
        get_current_user_use_case: Get current user use case from DI
        auth_token: JWT token from cookie

    Returns:
        Updated post details

    Raises:
        HTTPException: If not authenticated, not authorized, or the post is gone
    """
    user = await require_user(auth_token, get_current_user_use_case, "edit posts")

    try:
        use_case_request = UpdatePostRequest(
            post_id=str(post_id),
            user_id=user.user_id,
            content=request.content,
        )
        return await update_post_use_case.execute(use_case_request)
    except DomainError as e:
        logfire.warn("Post update rejected", post_id=str(post_id), error=str(e))
        raise domain_error_to_http(e)


@router.delete("/{post_id}", response_model=DeletePostResponse)
async def delete_post(
    post_id: UUID,
    delete_post_use_case: FromDishka[DeletePostUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> DeletePostResponse:
    """Soft delete a post.

    Only the post author can delete.

    Raises:
        HTTPException: If not authenticated, not authorized, or the post is gone
    """
    user = await require_user(auth_token, get_current_user_use_case, "delete posts")

    try:
        return await delete_post_use_case.execute(
            DeletePostRequest(post_id=str(post_id), user_id=user.user_id)
        )
    except DomainError as e:
        logfire.warn("Post deletion rejected", post_id=str(post_id), error=str(e))
        raise domain_error_to_http(e)
