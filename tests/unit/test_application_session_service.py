"""Unit tests for SessionService.

Tests cover:
- Session creation storing token digests only
- Device binding replacing earlier sessions of the same device
- Resolving bearer tokens (logout takes effect before exp)
- Refresh preconditions, rotation and the concurrent-refresh conflict
- Logout and revoke_all
"""

import pytest

from src.application.commands.auth_commands import DeviceContext
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, AuthorizationError, ConflictError
from src.core.result import Failure, Success
from src.domain.enums import LoginType, OsType
from tests.utils.factories import make_session_service, make_token_digest, make_user
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
def service(session_repo, user_repo, clock, logger):
    return make_session_service(
        session_repo=session_repo, user_repo=user_repo, clock=clock, logger=logger
    )


@pytest.mark.unit
class TestCreate:
    async def test_persists_digests_not_tokens(self, service, session_repo, user):
        # Act
        result = await service.create(
            user,
            login_type=LoginType.CREDENTIALS,
            device=DeviceContext(os=OsType.IOS, device_id="device-1"),
        )

        # Assert
        assert isinstance(result, Success)
        auth = result.value
        stored = session_repo.rows[auth.session_id]
        digest = make_token_digest()
        assert stored.access_token_hash == digest.digest(auth.tokens.access_token)
        assert stored.refresh_token_hash == digest.digest(auth.tokens.refresh_token)
        assert auth.tokens.access_token not in (stored.access_token_hash, stored.refresh_token_hash)
        assert stored.os is OsType.IOS
        assert stored.device_id == "device-1"
        assert auth.user_id == user.id

    async def test_logs_issue_and_persist(self, service, logger, user):
        await service.create(user, login_type=LoginType.GOOGLE)

        assert "token_issued" in logger.messages()
        assert "session_persisted" in logger.messages()

    async def test_sessions_accumulate_without_device_binding(
        self, service, session_repo, user
    ):
        device = DeviceContext(device_id="device-1")

        await service.create(user, login_type=LoginType.CREDENTIALS, device=device)
        await service.create(user, login_type=LoginType.CREDENTIALS, device=device)

        assert len(session_repo.rows) == 2

    async def test_device_binding_replaces_previous_session(
        self, session_repo, user_repo, clock, logger, user
    ):
        # Arrange
        service = make_session_service(
            session_repo=session_repo,
            user_repo=user_repo,
            clock=clock,
            logger=logger,
            enforce_device_binding=True,
        )
        device = DeviceContext(device_id="device-1")
        first = await service.create(user, login_type=LoginType.CREDENTIALS, device=device)

        # Act
        second = await service.create(user, login_type=LoginType.CREDENTIALS, device=device)

        # Assert
        assert list(session_repo.rows) == [second.value.session_id]
        assert first.value.session_id not in session_repo.rows
        assert "device_sessions_replaced" in logger.messages()


@pytest.mark.unit
class TestFindActiveByAccessToken:
    async def test_live_session_resolves(self, service, user):
        created = (await service.create(user, login_type=LoginType.CREDENTIALS)).value

        result = await service.find_active_by_access_token(created.tokens.access_token)

        assert isinstance(result, Success)
        assert result.value.id == created.session_id

    async def test_logged_out_token_no_longer_resolves(self, service, user):
        created = (await service.create(user, login_type=LoginType.CREDENTIALS)).value
        await service.logout(created.tokens.access_token)

        result = await service.find_active_by_access_token(created.tokens.access_token)

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.SESSION_NOT_FOUND

    async def test_invalid_jwt_is_rejected_before_lookup(self, service):
        result = await service.find_active_by_access_token("not-a-jwt")

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.TOKEN_INVALID


@pytest.mark.unit
class TestRefresh:
    async def _login(self, service, user):
        return (await service.create(user, login_type=LoginType.CREDENTIALS)).value

    async def test_rotates_both_tokens_after_access_expiry(
        self, service, session_repo, clock, user, logger
    ):
        # Arrange
        created = await self._login(service, user)
        clock.advance(minutes=61)

        # Act
        result = await service.refresh(
            created.tokens.access_token, created.tokens.refresh_token
        )

        # Assert
        assert isinstance(result, Success)
        refreshed = result.value
        assert refreshed.session_id == created.session_id
        assert refreshed.tokens.access_token != created.tokens.access_token
        assert refreshed.tokens.refresh_token != created.tokens.refresh_token
        stored = session_repo.rows[created.session_id]
        assert stored.access_token_hash == make_token_digest().digest(
            refreshed.tokens.access_token
        )
        assert "session_refreshed" in logger.messages()

    async def test_old_pair_cannot_be_replayed(self, service, clock, user):
        created = await self._login(service, user)
        clock.advance(minutes=61)
        await service.refresh(created.tokens.access_token, created.tokens.refresh_token)

        replay = await service.refresh(
            created.tokens.access_token, created.tokens.refresh_token
        )

        assert isinstance(replay, Failure)
        assert replay.error.code is ErrorCode.SESSION_NOT_FOUND

    async def test_unexpired_access_token_is_refused(self, service, user):
        created = await self._login(service, user)

        result = await service.refresh(
            created.tokens.access_token, created.tokens.refresh_token
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthenticationError)
        assert result.error.code is ErrorCode.ACCESS_TOKEN_NOT_EXPIRED

    async def test_expired_refresh_token_ends_session(
        self, service, session_repo, clock, user
    ):
        created = await self._login(service, user)
        clock.advance(days=8)

        result = await service.refresh(
            created.tokens.access_token, created.tokens.refresh_token
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthorizationError)
        assert result.error.code is ErrorCode.REFRESH_TOKEN_EXPIRED
        assert session_repo.rows == {}

    async def test_mismatched_pair_is_invalid_session(self, service, clock, user):
        first = await self._login(service, user)
        second = await self._login(service, user)
        clock.advance(minutes=61)

        result = await service.refresh(
            first.tokens.access_token, second.tokens.refresh_token
        )

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.SESSION_NOT_FOUND
        assert result.error.message == "Invalid session"

    async def test_access_token_in_refresh_slot_is_rejected(self, service, clock, user):
        created = await self._login(service, user)
        clock.advance(minutes=61)

        result = await service.refresh(
            created.tokens.access_token, created.tokens.access_token
        )

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.TOKEN_INVALID

    async def test_deleted_user_ends_session(
        self, service, session_repo, user_repo, clock, user
    ):
        created = await self._login(service, user)
        await user_repo.soft_delete(user.id)
        clock.advance(minutes=61)

        result = await service.refresh(
            created.tokens.access_token, created.tokens.refresh_token
        )

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.SESSION_NOT_FOUND
        assert session_repo.rows == {}

    async def test_lost_rotation_race_is_retryable_conflict(
        self, service, session_repo, clock, user
    ):
        # Arrange: another request rotates the session first
        created = await self._login(service, user)
        clock.advance(minutes=61)

        async def lost_race(*args, **kwargs):
            return False

        session_repo.rotate = lost_race

        # Act
        result = await service.refresh(
            created.tokens.access_token, created.tokens.refresh_token
        )

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert result.error.code is ErrorCode.SESSION_CONFLICT
        assert result.error.retryable is True


@pytest.mark.unit
class TestLogoutAndRevoke:
    async def test_logout_removes_only_that_session(self, service, session_repo, user):
        first = (await service.create(user, login_type=LoginType.CREDENTIALS)).value
        second = (await service.create(user, login_type=LoginType.CREDENTIALS)).value

        result = await service.logout(first.tokens.access_token)

        assert isinstance(result, Success)
        assert list(session_repo.rows) == [second.session_id]

    async def test_revoke_all_counts_removed_sessions(
        self, service, session_repo, user, logger
    ):
        other = make_user(email="other@example.com")
        await service.create(user, login_type=LoginType.CREDENTIALS)
        await service.create(user, login_type=LoginType.APPLE)
        kept = (await service.create(other, login_type=LoginType.CREDENTIALS)).value

        removed = await service.revoke_all(user)

        assert removed == 2
        assert list(session_repo.rows) == [kept.session_id]
        assert logger.events[-1].message == "sessions_revoked"

