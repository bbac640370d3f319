"""Unit tests for bearer authentication dependencies.

Tests cover:
- Missing bearer header is a 401 in the standard error shape
- get_current_user passes handler failures through as HTTP errors
- require_roles admits listed roles only
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from src.application.dtos import AuthenticatedUser
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Success
from src.domain.enums import UserRole
from src.presentation.routers.api.middleware.auth_dependencies import (
    get_access_token,
    get_current_user,
    require_roles,
)
from src.presentation.routers.api.v1.errors import DomainErrorHTTPException
from tests.utils.factories import make_user


def authenticated(role: UserRole) -> AuthenticatedUser:
    return AuthenticatedUser(user=make_user(role=role), session=Mock())


@pytest.mark.unit
class TestGetAccessToken:
    async def test_returns_raw_token(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="abc.def")

        assert await get_access_token(credentials) == "abc.def"

    async def test_missing_header_is_unauthorized(self):
        with pytest.raises(DomainErrorHTTPException) as exc_info:
            await get_access_token(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.error.code is ErrorCode.TOKEN_INVALID


@pytest.mark.unit
class TestGetCurrentUser:
    async def test_success_returns_caller(self):
        caller = authenticated(UserRole.USER)
        handler = Mock()
        handler.handle = AsyncMock(return_value=Success(value=caller))

        result = await get_current_user("token", handler)

        assert result is caller

    async def test_failure_becomes_http_error(self):
        handler = Mock()
        handler.handle = AsyncMock(
            return_value=Failure(
                error=AuthenticationError(
                    code=ErrorCode.TOKEN_EXPIRED, message="Token has expired"
                )
            )
        )

        with pytest.raises(DomainErrorHTTPException) as exc_info:
            await get_current_user("token", handler)

        assert exc_info.value.status_code == 401
        assert exc_info.value.error.code is ErrorCode.TOKEN_EXPIRED


@pytest.mark.unit
class TestRequireRoles:
    async def test_listed_role_is_admitted(self):
        checker = require_roles(UserRole.ADMIN, UserRole.USER)
        caller = authenticated(UserRole.USER)

        assert await checker(current_user=caller) is caller

    async def test_other_role_is_forbidden(self):
        checker = require_roles(UserRole.ADMIN)

        with pytest.raises(DomainErrorHTTPException) as exc_info:
            await checker(current_user=authenticated(UserRole.USER))

        error = exc_info.value.error
        assert exc_info.value.status_code == 403
        assert error.code is ErrorCode.PERMISSION_DENIED
        assert error.required_permission == "admin"
