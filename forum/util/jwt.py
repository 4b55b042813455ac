"""Signing and verification of session tokens (HS256 JWTs by default)."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from forum.config import AuthSettings

REQUIRED_CLAIMS = ["exp", "user_id", "username"]


class TokenPayload(BaseModel):
    """Claims carried by a session token."""

    user_id: str
    username: str
    exp: datetime

    def seconds_left(self) -> int:
        """Whole seconds until expiry, zero or negative once expired."""
        return int((self.exp - datetime.now(timezone.utc)).total_seconds())


class JWTError(Exception):
    """Token is malformed, badly signed or expired."""

    pass


def create_token(user_id: str, username: str, settings: AuthSettings) -> str:
    """Sign a token valid for ``settings.jwt_expiry_days``."""
    claims = {
        "user_id": user_id,
        "username": username,
        "exp": datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Check signature and expiry and return the claims.

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise JWTError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise JWTError("Invalid token") from e
    return TokenPayload(**claims)
