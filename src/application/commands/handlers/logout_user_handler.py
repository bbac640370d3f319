"""Logout User handler.

Flow:
1. Resolve the bearer token to its active session
2. Hard-delete the session
3. Return Success(LogoutResponse)

The access token stops resolving immediately even though its JWT ``exp``
has not passed, because every authenticated call also requires a live
session row.

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (repositories are injected via protocols)
"""

from dataclasses import dataclass

from src.application.commands.auth_commands import LogoutUser
from src.application.services import SessionService
from src.core.errors import DomainError, unexpected_error
from src.core.result import Failure, Result, Success
from src.domain.protocols import LoggerProtocol


@dataclass(frozen=True)
class LogoutResponse:
    """Response data for successful logout."""

    message: str = "Successfully logged out."


class LogoutUserHandler:
    """Handler for logout user command."""

    def __init__(self, session_service: SessionService, logger: LoggerProtocol) -> None:
        """Initialize logout handler with dependencies.

        Args:
            session_service: Session store service.
            logger: Structured logger.
        """
        self._session_service = session_service
        self._logger = logger

    async def handle(self, cmd: LogoutUser) -> Result[LogoutResponse, DomainError]:
        """Handle logout command.

        Returns:
            Success(LogoutResponse) once the session is gone.
            Failure(AuthenticationError) if the token does not resolve to a session.
        """
        try:
            result = await self._session_service.logout(cmd.access_token)
            if isinstance(result, Failure):
                return result
            return Success(value=LogoutResponse())
        except Exception as e:
            self._logger.error("logout_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
