"""JWT token domain service."""

import logfire

from forum.config import AuthSettings
from forum.domain.cache import TokenBlacklist
from forum.domain.error import TokenRevokedError
from forum.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations."""

    def __init__(self, auth_settings: AuthSettings, token_blacklist: TokenBlacklist) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
            token_blacklist: Store of revoked tokens
        """
        self.auth_settings = auth_settings
        self.token_blacklist = token_blacklist

    def create_token(self, user_id: str, username: str) -> str:
        """Create JWT token for user.

        Args:
            user_id: User ID
            username: Display name

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", user_id=user_id):
            token = create_token(user_id, username, self.auth_settings)
            logfire.info("JWT token created", user_id=user_id)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token signature and expiry.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                return verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("JWT token verification failed", error=str(e))
                raise

    async def authenticate(self, token: str) -> TokenPayload:
        """Verify a token and make sure it has not been revoked.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
            TokenRevokedError: If token was revoked by logout
        """
        payload = self.verify_token(token)
        if await self.token_blacklist.contains(token):
            logfire.warn("Revoked token presented", user_id=payload.user_id)
            raise TokenRevokedError("Token has been revoked")
        return payload

    async def revoke_token(self, token: str) -> None:
        """Revoke a token until it would have expired anyway.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.revoke_token"):
            payload = self.verify_token(token)
            ttl_seconds = payload.seconds_left()
            if ttl_seconds <= 0:
                return
            await self.token_blacklist.add(token, ttl_seconds)
            logfire.info("Token revoked", user_id=payload.user_id, ttl_seconds=ttl_seconds)

    async def get_user_id_from_token(self, token: str | None) -> str | None:
        """Extract user ID from a token without raising exceptions.

        Args:
            token: JWT token string (optional)

        Returns:
            User ID if token is valid and not revoked, None otherwise
        """
        if not token:
            return None

        try:
            payload = await self.authenticate(token)
            return payload.user_id
        except (JWTError, TokenRevokedError) as e:
            logfire.debug(
                "Token rejected, treating as unauthenticated", error=str(e)
            )
            return None
