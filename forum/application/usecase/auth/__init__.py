"""Auth use cases."""

from .get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)
from .logout import LogoutRequest, LogoutResponse, LogoutUseCase

__all__ = [
    "GetCurrentUserRequest",
    "GetCurrentUserResponse",
    "GetCurrentUserUseCase",
    "LogoutRequest",
    "LogoutResponse",
    "LogoutUseCase",
]
