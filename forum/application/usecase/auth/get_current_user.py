"""Get current user use case."""

from pydantic import BaseModel

from forum.domain.service import JWTService


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str


class GetCurrentUserResponse(BaseModel):
    """Authenticated user, as carried by the token."""

    user_id: str
    username: str


class GetCurrentUserUseCase:
    """Use case for resolving the user behind a token."""

    def __init__(self, jwt_service: JWTService) -> None:
        self.jwt_service = jwt_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Authenticate the token.

        Raises:
            JWTError: If token is invalid or expired
            TokenRevokedError: If token was revoked
        """
        payload = await self.jwt_service.authenticate(request.token)
        return GetCurrentUserResponse(user_id=payload.user_id, username=payload.username)
