"""Token issuer port (signed access/refresh token pairs)."""

from typing import Protocol

from src.core.errors import AuthenticationError, InternalError
from src.core.result import Result
from src.domain.entities.user import User
from src.domain.value_objects import AccessTokenClaims, TokenPair


class TokenIssuerProtocol(Protocol):
    """Mints and validates the service's own JWTs.

    Access and refresh tokens are signed with different secrets so a
    refresh token can never be presented as an access token.
    """

    def issue_pair(self, user: User) -> Result[TokenPair, InternalError]:
        """Sign a new access/refresh pair for the user.

        Returns:
            Success(TokenPair), or Failure(InternalError) if signing failed.
            An unsigned token is never returned.
        """
        ...

    def decode_access_token(
        self, token: str
    ) -> Result[AccessTokenClaims, AuthenticationError]:
        """Validate signature, expiry and token type of an access token."""
        ...

    def decode_refresh_token(self, token: str) -> Result[str, AuthenticationError]:
        """Validate the refresh token's signature and type, ignoring expiry.

        Expiry is judged against the stored session, not the JWT claim.

        Returns:
            Success(subject user id) or Failure(AuthenticationError).
        """
        ...
