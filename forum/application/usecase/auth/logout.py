"""Logout use case."""

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import JWTService


class LogoutRequest(BaseModel):
    """Logout request."""

    token: str


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool


class LogoutUseCase(BaseUseCase):
    """Use case for revoking the current token."""

    def __init__(self, jwt_service: JWTService) -> None:
        """Initialize logout use case.

        Args:
            jwt_service: JWT domain service
        """
        self.jwt_service = jwt_service

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        """Blacklist the token for the rest of its lifetime.

        Raises:
            JWTError: If token is invalid or expired
        """
        await self.jwt_service.revoke_token(request.token)
        return LogoutResponse(success=True)
