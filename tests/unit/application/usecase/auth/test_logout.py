"""Unit tests for the auth use cases."""

from uuid import uuid4

import pytest

from forum.application.usecase.auth import (
    GetCurrentUserRequest,
    GetCurrentUserUseCase,
    LogoutRequest,
    LogoutUseCase,
)
from forum.domain.error import TokenRevokedError
from forum.domain.service import JWTService
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestLogoutUseCase:
    """Tests for LogoutUseCase."""

    @pytest.mark.asyncio
    async def test_logged_out_token_no_longer_authenticates(self, unit_env):
        # Arrange
        jwt_service = await unit_env.get(JWTService)
        logout = await unit_env.get(LogoutUseCase)
        get_current_user = await unit_env.get(GetCurrentUserUseCase)
        user_id = str(uuid4())
        token = jwt_service.create_token(user_id, "alice")
        before = await get_current_user.execute(GetCurrentUserRequest(token=token))

        # Act
        response = await logout.execute(LogoutRequest(token=token))

        # Assert
        assert before.user_id == user_id
        assert before.username == "alice"
        assert response.success is True
        with pytest.raises(TokenRevokedError):
            await get_current_user.execute(GetCurrentUserRequest(token=token))
