"""Vote routes.

Votes are accepted immediately and applied by the vote pipeline in the
background, so the write endpoints answer 202.
"""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, status

from forum.application.usecase.vote import (
    GetVoteCountRequest,
    GetVoteCountResponse,
    GetVoteCountUseCase,
    RemoveVoteRequest,
    RemoveVoteUseCase,
    UpvoteRequest,
    UpvoteUseCase,
    VoteAcceptedResponse,
)
from forum.domain.error import DomainError
from forum.domain.service import JWTService
from forum.domain.value import VotableType
from forum.interface.error import domain_error_to_http

router = APIRouter(tags=["votes"], route_class=DishkaRoute)


async def _require_user_id(jwt_service: JWTService, auth_token: str | None) -> str:
    user_id = await jwt_service.get_user_id_from_token(auth_token)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required to vote",
        )
    return user_id


async def _upvote(
    votable_type: VotableType,
    votable_id: UUID,
    upvote_use_case: UpvoteUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
) -> VoteAcceptedResponse:
    user_id = await _require_user_id(jwt_service, auth_token)
    try:
        request = UpvoteRequest(
            votable_type=votable_type,
            votable_id=str(votable_id),
            user_id=user_id,
        )
        return await upvote_use_case.execute(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


async def _remove_vote(
    votable_type: VotableType,
    votable_id: UUID,
    remove_vote_use_case: RemoveVoteUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
) -> VoteAcceptedResponse:
    user_id = await _require_user_id(jwt_service, auth_token)
    try:
        request = RemoveVoteRequest(
            votable_type=votable_type,
            votable_id=str(votable_id),
            user_id=user_id,
        )
        return await remove_vote_use_case.execute(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


async def _vote_count(
    votable_type: VotableType,
    votable_id: UUID,
    get_vote_count_use_case: GetVoteCountUseCase,
) -> GetVoteCountResponse:
    try:
        return await get_vote_count_use_case.execute(
            GetVoteCountRequest(votable_type=votable_type, votable_id=str(votable_id))
        )
    except DomainError as e:
        raise domain_error_to_http(e)


@router.post(
    "/posts/{post_id}/vote",
    response_model=VoteAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def upvote_post(
    post_id: UUID,
    upvote_use_case: FromDishka[UpvoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> VoteAcceptedResponse:
    """Upvote a post.

    Requires authentication.

    Args:
        post_id: Post UUID
        upvote_use_case: Upvote use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        The accepted vote intent
    """
    return await _upvote(
        VotableType.POST, post_id, upvote_use_case, jwt_service, auth_token
    )


@router.delete(
    "/posts/{post_id}/vote",
    response_model=VoteAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def remove_vote_from_post(
    post_id: UUID,
    remove_vote_use_case: FromDishka[RemoveVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> VoteAcceptedResponse:
    """Remove vote from a post.

    Requires authentication.
    """
    return await _remove_vote(
        VotableType.POST, post_id, remove_vote_use_case, jwt_service, auth_token
    )


@router.get("/posts/{post_id}/votes", response_model=GetVoteCountResponse)
async def get_post_vote_count(
    post_id: UUID,
    get_vote_count_use_case: FromDishka[GetVoteCountUseCase],
) -> GetVoteCountResponse:
    """Get the vote count of a post."""
    return await _vote_count(VotableType.POST, post_id, get_vote_count_use_case)


@router.post(
    "/comments/{comment_id}/vote",
    response_model=VoteAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def upvote_comment(
    comment_id: UUID,
    upvote_use_case: FromDishka[UpvoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> VoteAcceptedResponse:
    """Upvote a comment.

    Requires authentication.
    """
    return await _upvote(
        VotableType.COMMENT, comment_id, upvote_use_case, jwt_service, auth_token
    )


@router.delete(
    "/comments/{comment_id}/vote",
    response_model=VoteAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def remove_vote_from_comment(
    comment_id: UUID,
    remove_vote_use_case: FromDishka[RemoveVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> VoteAcceptedResponse:
    """Remove vote from a comment.

    Requires authentication.
    """
    return await _remove_vote(
        VotableType.COMMENT, comment_id, remove_vote_use_case, jwt_service, auth_token
    )


@router.get("/comments/{comment_id}/votes", response_model=GetVoteCountResponse)
async def get_comment_vote_count(
    comment_id: UUID,
    get_vote_count_use_case: FromDishka[GetVoteCountUseCase],
) -> GetVoteCountResponse:
    """Get the vote count of a comment."""
    return await _vote_count(VotableType.COMMENT, comment_id, get_vote_count_use_case)
