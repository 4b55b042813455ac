"""Authentication routes.

Tokens are issued by the account service; this API only reads and revokes
them.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Response, status
from pydantic import BaseModel

from forum.application.usecase.auth import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
    LogoutRequest,
    LogoutUseCase,
)
from forum.domain.error import TokenRevokedError
from forum.util.jwt import JWTError

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return current user if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: GetCurrentUserResponse | None = None


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> AuthStatusResponse:
    """Get current authenticated user.

    Args:
        get_current_user_use_case: Get current user use case from DI
        auth_token: JWT token from cookie

    Returns:
        Authentication status and user if the token is valid
    """
    if not auth_token:
        return AuthStatusResponse(authenticated=False)

    try:
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(token=auth_token)
        )
    except (JWTError, TokenRevokedError):
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True, user=user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    logout_use_case: FromDishka[LogoutUseCase],
    auth_token: str | None = Cookie(default=None),
) -> LogoutResponse:
    """Revoke the current token and clear the auth cookie.

    Args:
        response: FastAPI response (to clear cookie)
        logout_use_case: Logout use case from DI
        auth_token: JWT token from cookie

    Returns:
        Logout confirmation

    Raises:
        HTTPException: 401 if there is no valid token to revoke
    """
    if not auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        await logout_use_case.execute(LogoutRequest(token=auth_token))
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    response.delete_cookie(key="auth_token")
    return LogoutResponse(success=True, message="Logged out successfully")
