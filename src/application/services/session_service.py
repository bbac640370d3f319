"""Session store: create, resolve, refresh and end sessions.

Only digests of issued tokens are persisted. Refresh semantics:
- Both tokens must belong to one live session
- The old access token must already be expired (401 otherwise)
- An expired refresh token ends the session (403)
- Otherwise BOTH tokens are re-minted and swapped in with a conditional
  update keyed on the old access digest; the loser of a concurrent refresh
  gets a retryable 409
"""

from uuid_extensions import uuid7

from src.application.commands.auth_commands import DeviceContext
from src.application.dtos import AuthSession, AuthTokens
from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import Session, User
from src.domain.enums import LoginType
from src.domain.protocols import (
    ClockProtocol,
    LoggerProtocol,
    SessionRepository,
    TokenDigestProtocol,
    TokenIssuerProtocol,
    UserRepository,
)
from src.domain.value_objects import TokenPair


class SessionService:
    """Application service over the session repository."""

    def __init__(
        self,
        *,
        session_repo: SessionRepository,
        user_repo: UserRepository,
        token_service: TokenIssuerProtocol,
        token_digest: TokenDigestProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
        enforce_device_binding: bool = False,
    ) -> None:
        self._session_repo = session_repo
        self._user_repo = user_repo
        self._token_service = token_service
        self._token_digest = token_digest
        self._clock = clock
        self._logger = logger
        self._enforce_device_binding = enforce_device_binding

    async def create(
        self,
        user: User,
        *,
        login_type: LoginType,
        device: DeviceContext | None = None,
    ) -> Result[AuthSession, DomainError]:
        """Issue a token pair and persist its digests as a new session.

        With device binding enabled, earlier sessions of the same device
        are removed first so a device holds at most one session.
        """
        pair_result = self._token_service.issue_pair(user)
        if isinstance(pair_result, Failure):
            self._logger.error("token_issue_failed", user_id=str(user.id))
            return pair_result
        pair = pair_result.value
        self._logger.info("token_issued", user_id=str(user.id), login_type=login_type.value)

        device = device or DeviceContext()
        if self._enforce_device_binding and device.device_id:
            removed = await self._session_repo.remove_for_device(user.id, device.device_id)
            if removed:
                self._logger.info(
                    "device_sessions_replaced", user_id=str(user.id), removed_count=removed
                )

        now = self._clock.now()
        user_session = Session(
            id=uuid7(),
            user_id=user.id,
            access_token_hash=self._token_digest.digest(pair.access_token),
            access_token_expires_at=pair.access_token_expires_at,
            refresh_token_hash=self._token_digest.digest(pair.refresh_token),
            refresh_token_expires_at=pair.refresh_token_expires_at,
            login_type=login_type,
            os=device.os,
            device_id=device.device_id,
            latitude=device.latitude,
            longitude=device.longitude,
            created_at=now,
            updated_at=now,
        )
        session_id = await self._session_repo.create(user_session)
        self._logger.info(
            "session_persisted",
            user_id=str(user.id),
            session_id=str(session_id),
            login_type=login_type.value,
        )
        return Success(
            value=AuthSession(
                user_id=user.id,
                session_id=session_id,
                tokens=_to_auth_tokens(pair),
                login_type=login_type,
            )
        )

    async def find_active_by_access_token(
        self, access_token: str
    ) -> Result[Session, AuthenticationError]:
        """Resolve a bearer token to its live session.

        The JWT must verify AND its digest must belong to a session that
        has not been logged out, so logout takes effect before ``exp``.
        """
        claims_result = self._token_service.decode_access_token(access_token)
        if isinstance(claims_result, Failure):
            return claims_result
        claims = claims_result.value

        user_session = await self._session_repo.find_active_by_access_token_hash(
            self._token_digest.digest(access_token), self._clock.now()
        )
        if user_session is None or user_session.user_id != claims.user_id:
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Session has expired or been revoked",
                )
            )
        return Success(value=user_session)

    async def refresh(
        self, access_token: str, refresh_token: str
    ) -> Result[AuthSession, DomainError]:
        """Rotate both tokens of a session."""
        subject_result = self._token_service.decode_refresh_token(refresh_token)
        if isinstance(subject_result, Failure):
            return subject_result

        user_session = await self._session_repo.find_by_token_hashes(
            self._token_digest.digest(access_token),
            self._token_digest.digest(refresh_token),
        )
        if user_session is None or str(user_session.user_id) != subject_result.value:
            self._logger.info("refresh_session_not_found")
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Invalid session",
                )
            )

        now = self._clock.now()
        if not user_session.is_access_token_expired(now):
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.ACCESS_TOKEN_NOT_EXPIRED,
                    message="Previous access-token is yet to expire",
                )
            )

        if user_session.is_refresh_token_expired(now):
            await self._session_repo.remove(user_session.id)
            self._logger.info(
                "session_expired_removed",
                session_id=str(user_session.id),
                user_id=str(user_session.user_id),
            )
            return Failure(
                error=AuthorizationError(
                    code=ErrorCode.REFRESH_TOKEN_EXPIRED,
                    message="Refresh token has been expired",
                )
            )

        user = await self._user_repo.find_by_id(user_session.user_id)
        if user is None or not user.is_active():
            await self._session_repo.remove(user_session.id)
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Invalid session",
                )
            )

        pair_result = self._token_service.issue_pair(user)
        if isinstance(pair_result, Failure):
            self._logger.error("token_issue_failed", user_id=str(user.id))
            return pair_result
        pair = pair_result.value

        rotated = await self._session_repo.rotate(
            user_session.id,
            user_session.access_token_hash,
            access_token_hash=self._token_digest.digest(pair.access_token),
            access_token_expires_at=pair.access_token_expires_at,
            refresh_token_hash=self._token_digest.digest(pair.refresh_token),
            refresh_token_expires_at=pair.refresh_token_expires_at,
        )
        if not rotated:
            self._logger.warning("session_rotation_conflict", session_id=str(user_session.id))
            return Failure(
                error=ConflictError(
                    code=ErrorCode.SESSION_CONFLICT,
                    message="Session was refreshed concurrently. Please retry",
                    resource_type="Session",
                    retryable=True,
                )
            )

        self._logger.info(
            "session_refreshed", session_id=str(user_session.id), user_id=str(user.id)
        )
        return Success(
            value=AuthSession(
                user_id=user.id,
                session_id=user_session.id,
                tokens=_to_auth_tokens(pair),
                login_type=user_session.login_type,
            )
        )

    async def logout(self, access_token: str) -> Result[None, AuthenticationError]:
        """Hard-delete the session behind a bearer token."""
        session_result = await self.find_active_by_access_token(access_token)
        if isinstance(session_result, Failure):
            return session_result
        user_session = session_result.value

        await self._session_repo.remove(user_session.id)
        self._logger.info(
            "session_removed",
            session_id=str(user_session.id),
            user_id=str(user_session.user_id),
        )
        return Success(value=None)

    async def revoke_all(self, user: User) -> int:
        """End every session of the user (after a password reset)."""
        removed = await self._session_repo.remove_all_for_user(user.id)
        self._logger.info("sessions_revoked", user_id=str(user.id), removed_count=removed)
        return removed


def _to_auth_tokens(pair: TokenPair) -> AuthTokens:
    return AuthTokens(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        access_token_expires_at=pair.access_token_expires_at,
        refresh_token_expires_at=pair.refresh_token_expires_at,
    )
