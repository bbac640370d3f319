"""Refresh-token exchange handler.

Flow:
1. Verify the refresh JWT signature and type
2. Locate the session holding both token digests
3. Refuse while the old access token is still valid (401)
4. End the session if the refresh token expired (403)
5. Mint a new pair and swap it in with a conditional update
   (a concurrent refresh that lost the race gets a retryable 409)

All rules live in SessionService.refresh; this handler is the command
boundary that converts unexpected exceptions into InternalError.
"""

from src.application.commands.auth_commands import RefreshTokens
from src.application.dtos import AuthSession
from src.application.services import SessionService
from src.core.errors import DomainError, unexpected_error
from src.core.result import Failure, Result
from src.domain.protocols import LoggerProtocol


class RefreshTokenHandler:
    """Handler for RefreshTokens command."""

    def __init__(self, session_service: SessionService, logger: LoggerProtocol) -> None:
        self._session_service = session_service
        self._logger = logger

    async def handle(self, cmd: RefreshTokens) -> Result[AuthSession, DomainError]:
        """Exchange an expired access token plus its refresh token for a new pair."""
        try:
            return await self._session_service.refresh(cmd.access_token, cmd.refresh_token)
        except Exception as e:
            self._logger.error("token_refresh_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
