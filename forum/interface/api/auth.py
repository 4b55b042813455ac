"""Request authentication shared by the routes."""

from fastapi import HTTPException, status

from forum.application.usecase.auth import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)
from forum.domain.error import TokenRevokedError
from forum.util.jwt import JWTError


async def require_user(
    auth_token: str | None,
    get_current_user_use_case: GetCurrentUserUseCase,
    action: str,
) -> GetCurrentUserResponse:
    """Resolve the authenticated user or reject the request.

    Args:
        auth_token: JWT token from cookie
        get_current_user_use_case: Get current user use case
        action: What the user tried to do, for the error message

    Returns:
        Authenticated user

    Raises:
        HTTPException: 401 if the token is missing, invalid or revoked
    """
    if not auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )

    try:
        return await get_current_user_use_case.execute(
            GetCurrentUserRequest(token=auth_token)
        )
    except (JWTError, TokenRevokedError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
