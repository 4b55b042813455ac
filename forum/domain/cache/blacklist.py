"""Revoked token store interface."""

from abc import ABC, abstractmethod


class TokenBlacklist(ABC):
    """Set of revoked tokens, each kept until its natural expiry."""

    @abstractmethod
    async def add(self, token: str, ttl_seconds: int) -> None:
        """Revoke a token for ttl_seconds.

        Args:
            token: Encoded JWT
            ttl_seconds: Remaining lifetime of the token
        """
        pass

    @abstractmethod
    async def contains(self, token: str) -> bool:
        """Check whether a token has been revoked."""
        pass
