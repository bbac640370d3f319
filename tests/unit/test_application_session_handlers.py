"""Unit tests for the session-bound handlers.

Tests cover:
- RefreshTokenHandler delegating to SessionService.refresh
- LogoutUserHandler ending exactly one session
- GetCurrentUserHandler resolving bearer tokens
- Unexpected exceptions turning into INTERNAL_ERROR
"""

from unittest.mock import AsyncMock

import pytest

from src.application.commands.auth_commands import LogoutUser, RefreshTokens
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.commands.handlers.refresh_token_handler import RefreshTokenHandler
from src.application.queries.handlers.get_current_user_handler import (
    GetCurrentUserHandler,
)
from src.application.queries.user_queries import GetCurrentUser
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import LoginType
from tests.utils.factories import make_session_service, make_user
from tests.utils.fakes import (
    FixedClock,
    InMemorySessionRepository,
    InMemoryUserRepository,
    RecordingLogger,
)


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def user_repo(user):
    return InMemoryUserRepository([user])


@pytest.fixture
def session_repo():
    return InMemorySessionRepository()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def session_service(session_repo, user_repo, clock, logger):
    return make_session_service(
        session_repo=session_repo, user_repo=user_repo, clock=clock, logger=logger
    )


@pytest.fixture
async def login(session_service, user):
    result = await session_service.create(user, login_type=LoginType.CREDENTIALS)
    return result.value


@pytest.mark.unit
class TestRefreshTokenHandler:
    async def test_refresh_after_access_expiry(self, session_service, clock, logger, login):
        # Arrange
        handler = RefreshTokenHandler(session_service, logger)
        clock.advance(hours=2)

        # Act
        result = await handler.handle(
            RefreshTokens(
                access_token=login.tokens.access_token,
                refresh_token=login.tokens.refresh_token,
            )
        )

        # Assert
        assert isinstance(result, Success)
        assert result.value.session_id == login.session_id

    async def test_garbage_refresh_token(self, session_service, logger, login):
        handler = RefreshTokenHandler(session_service, logger)

        result = await handler.handle(
            RefreshTokens(access_token=login.tokens.access_token, refresh_token="junk")
        )

        assert result.error.code is ErrorCode.TOKEN_INVALID

    async def test_unexpected_exception(self, logger):
        session_service = AsyncMock()
        session_service.refresh.side_effect = RuntimeError("boom")
        handler = RefreshTokenHandler(session_service, logger)

        result = await handler.handle(RefreshTokens(access_token="a", refresh_token="r"))

        assert result.error.code is ErrorCode.INTERNAL_ERROR
        assert "token_refresh_failed_unexpectedly" in logger.messages()


@pytest.mark.unit
class TestLogoutUserHandler:
    async def test_logout_removes_session(self, session_service, session_repo, logger, login):
        handler = LogoutUserHandler(session_service, logger)

        result = await handler.handle(LogoutUser(access_token=login.tokens.access_token))

        assert isinstance(result, Success)
        assert result.value.message == "Successfully logged out."
        assert session_repo.rows == {}

    async def test_second_logout_is_unauthorized(self, session_service, logger, login):
        handler = LogoutUserHandler(session_service, logger)
        await handler.handle(LogoutUser(access_token=login.tokens.access_token))

        result = await handler.handle(LogoutUser(access_token=login.tokens.access_token))

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.SESSION_NOT_FOUND


@pytest.mark.unit
class TestGetCurrentUserHandler:
    async def test_resolves_user_and_session(
        self, session_service, user_repo, logger, user, login
    ):
        handler = GetCurrentUserHandler(session_service, user_repo, logger)

        result = await handler.handle(GetCurrentUser(access_token=login.tokens.access_token))

        assert isinstance(result, Success)
        assert result.value.user.id == user.id
        assert result.value.session.id == login.session_id

    async def test_deleted_user_is_unauthorized(
        self, session_service, user_repo, logger, user, login
    ):
        await user_repo.soft_delete(user.id)
        handler = GetCurrentUserHandler(session_service, user_repo, logger)

        result = await handler.handle(GetCurrentUser(access_token=login.tokens.access_token))

        assert result.error.code is ErrorCode.SESSION_NOT_FOUND

    async def test_expired_session_is_unauthorized(
        self, session_service, user_repo, clock, logger, login
    ):
        handler = GetCurrentUserHandler(session_service, user_repo, logger)
        clock.advance(hours=2)

        result = await handler.handle(GetCurrentUser(access_token=login.tokens.access_token))

        assert isinstance(result, Failure)
