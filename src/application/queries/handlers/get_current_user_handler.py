"""Get current user query handler.

Resolves a bearer token in three steps, each of which must pass:
1. JWT signature, type and expiry
2. A live session holding the token digest (logout takes effect at once)
3. A live user owning that session

Any failure is reported as Unauthorized so callers learn nothing about
which step rejected the token.
"""

from src.application.dtos import AuthenticatedUser
from src.application.queries.user_queries import GetCurrentUser
from src.application.services import SessionService
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, DomainError, unexpected_error
from src.core.result import Failure, Result, Success
from src.domain.protocols import LoggerProtocol, UserRepository


class GetCurrentUserHandler:
    """Handler for GetCurrentUser query."""

    def __init__(
        self,
        session_service: SessionService,
        user_repo: UserRepository,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            session_service: Resolves the token to its session.
            user_repo: User lookups.
            logger: Structured logger.
        """
        self._session_service = session_service
        self._user_repo = user_repo
        self._logger = logger

    async def handle(self, query: GetCurrentUser) -> Result[AuthenticatedUser, DomainError]:
        """Handle get current user query.

        Returns:
            Success(AuthenticatedUser) with the user and their session.
            Failure(AuthenticationError) for any invalid, expired or revoked token.
        """
        try:
            session_result = await self._session_service.find_active_by_access_token(
                query.access_token
            )
            if isinstance(session_result, Failure):
                return session_result
            user_session = session_result.value

            user = await self._user_repo.find_by_id(user_session.user_id)
            if user is None:
                return Failure(
                    error=AuthenticationError(
                        code=ErrorCode.SESSION_NOT_FOUND,
                        message="Session has expired or been revoked",
                    )
                )

            return Success(value=AuthenticatedUser(user=user, session=user_session))

        except Exception as e:
            self._logger.error("current_user_lookup_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
