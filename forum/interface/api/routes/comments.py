"""Comment routes."""

from typing import Optional
from uuid import UUID

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, status
from pydantic import BaseModel, Field

from forum.application.usecase.auth import GetCurrentUserUseCase
from forum.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    ListCommentsRequest,
    ListCommentsResponse,
    ListCommentsUseCase,
    ListRepliesRequest,
    ListRepliesResponse,
    ListRepliesUseCase,
)
from forum.domain.error import DomainError
from forum.interface.api.auth import require_user
from forum.interface.error import domain_error_to_http

router = APIRouter(tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    content: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[UUID] = None


@router.post(
    "/posts/{post_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> CreateCommentResponse:
    """Comment on a post or reply to a comment.

    The author of the post (or of the parent comment) is notified if online.

    Args:
        post_id: Post UUID
        request: Comment content and optional parent comment
        create_comment_use_case: Create comment use case from DI
        get_current_user_use_case: Get current user use case from DI
        auth_token: JWT token from cookie

    Returns:
        Created comment

    Raises:
        HTTPException: If not authenticated, or the post or parent is invalid
    """
    user = await require_user(auth_token, get_current_user_use_case, "comment")

    try:
        use_case_request = CreateCommentRequest(
            post_id=str(post_id),
            author_id=user.user_id,
            author_name=user.username,
            content=request.content,
            parent_id=str(request.parent_id) if request.parent_id else None,
        )
        return await create_comment_use_case.execute(use_case_request)
    except DomainError as e:
        logfire.warn("Comment creation rejected", post_id=str(post_id), error=str(e))
        raise domain_error_to_http(e)


@router.get("/posts/{post_id}/comments", response_model=ListCommentsResponse)
async def list_comments(
    post_id: UUID,
    list_comments_use_case: FromDishka[ListCommentsUseCase],
    page: int = 1,
    page_size: int = 10,
) -> ListCommentsResponse:
    """List a post's top-level comments, newest first.

    Raises:
        HTTPException: 404 if the post doesn't exist or was deleted
    """
    try:
        return await list_comments_use_case.execute(
            ListCommentsRequest(post_id=str(post_id), page=page, page_size=page_size)
        )
    except DomainError as e:
        raise domain_error_to_http(e)


@router.get("/comments/{comment_id}/replies", response_model=ListRepliesResponse)
async def list_replies(
    comment_id: UUID,
    list_replies_use_case: FromDishka[ListRepliesUseCase],
    page: int = 1,
    page_size: int = 10,
) -> ListRepliesResponse:
    """List the direct replies to a comment, newest first.

    Raises:
        HTTPException: 404 if the comment doesn't exist or was deleted
    """
    try:
        return await list_replies_use_case.execute(
            ListRepliesRequest(
                comment_id=str(comment_id), page=page, page_size=page_size
            )
        )
    except DomainError as e:
        raise domain_error_to_http(e)
