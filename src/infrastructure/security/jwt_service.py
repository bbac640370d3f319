"""JWT token issuer (adapter).

Implements TokenIssuerProtocol with PyJWT and HMAC-SHA256.

Security:
    - Access and refresh tokens are signed with DIFFERENT secrets, so one
      can never be replayed as the other
    - Every token carries a unique ``jti``; re-minting within the same
      second still yields a different token (and a different stored digest)
    - Signing failures surface as InternalError; no token is returned unsigned
    - ``iat`` and ``exp`` come from the injected clock, and access-token
      expiry is checked against the same clock

Claims:
    access:  sub, email, phone, role, iat, exp, jti, type="access"
    refresh: sub, iat, exp, jti, type="refresh"
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError
from uuid_extensions import uuid7

from src.core.constants import MIN_SECRET_LENGTH
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, InternalError
from src.core.result import Failure, Result, Success
from src.domain.entities.user import User
from src.domain.enums import UserRole
from src.domain.protocols import ClockProtocol
from src.domain.value_objects import AccessTokenClaims, TokenPair
from src.infrastructure.time import ZonedClock

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class JWTService:
    """JWT access/refresh token issuer.

    Usage:
        from src.core.container import get_token_service

        token_service = get_token_service()
        match token_service.issue_pair(user):
            case Success(value=pair):
                ...
            case Failure(error=error):
                ...
    """

    def __init__(
        self,
        secret_key: str,
        refresh_secret_key: str,
        access_expiration_minutes: int = 60,
        refresh_expiration_minutes: int = 10080,
        algorithm: str = "HS256",
        clock: ClockProtocol | None = None,
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Access token signing secret (>= 32 chars).
            refresh_secret_key: Refresh token signing secret (>= 32 chars,
                different from secret_key).
            access_expiration_minutes: Access token lifetime (default: 1 hour).
            refresh_expiration_minutes: Refresh token lifetime (default: 1 week).
            algorithm: HMAC algorithm (default: HS256).
            clock: Time source for issuing and expiry checks (default: UTC
                wall clock).

        Raises:
            ValueError: If a secret is too short, the secrets are equal, or
                the refresh lifetime is shorter than the access lifetime.
        """
        if len(secret_key) < MIN_SECRET_LENGTH or len(refresh_secret_key) < MIN_SECRET_LENGTH:
            msg = f"JWT secret keys must be at least {MIN_SECRET_LENGTH} bytes (256 bits)"
            raise ValueError(msg)
        if secret_key == refresh_secret_key:
            msg = "Access and refresh secrets must differ"
            raise ValueError(msg)
        if refresh_expiration_minutes < access_expiration_minutes:
            msg = "Refresh token lifetime must not be shorter than access token lifetime"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._refresh_secret_key = refresh_secret_key
        self._access_ttl = timedelta(minutes=access_expiration_minutes)
        self._refresh_ttl = timedelta(minutes=refresh_expiration_minutes)
        self._algorithm = algorithm
        self._clock = clock or ZonedClock("UTC")

    def issue_pair(self, user: User) -> Result[TokenPair, InternalError]:
        """Sign a new access/refresh pair for the user.

        Example:
            >>> service = JWTService("a" * 32, "b" * 32)
            >>> result = service.issue_pair(user)
            >>> match result:
            ...     case Success(value=pair):
            ...         assert pair.refresh_token_expires_at > pair.access_token_expires_at
        """
        now = self._clock.now().replace(microsecond=0)
        access_expires_at = now + self._access_ttl
        refresh_expires_at = now + self._refresh_ttl

        access_payload = {
            "sub": str(user.id),
            "email": user.email,
            "phone": user.phone,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int(access_expires_at.timestamp()),
            "jti": str(uuid7()),
            "type": ACCESS_TOKEN_TYPE,
        }
        refresh_payload = {
            "sub": str(user.id),
            "iat": int(now.timestamp()),
            "exp": int(refresh_expires_at.timestamp()),
            "jti": str(uuid7()),
            "type": REFRESH_TOKEN_TYPE,
        }

        try:
            access_token = jwt.encode(
                access_payload, self._secret_key, algorithm=self._algorithm
            )
            refresh_token = jwt.encode(
                refresh_payload, self._refresh_secret_key, algorithm=self._algorithm
            )
        except Exception as e:
            return Failure(
                error=InternalError(
                    code=ErrorCode.TOKEN_SIGNING_FAILED,
                    message="Could not issue tokens",
                    details={"error_type": type(e).__name__},
                )
            )

        return Success(
            value=TokenPair(
                access_token=access_token,
                access_token_expires_at=access_expires_at,
                refresh_token=refresh_token,
                refresh_token_expires_at=refresh_expires_at,
            )
        )

    def decode_access_token(
        self, token: str
    ) -> Result[AccessTokenClaims, AuthenticationError]:
        """Validate an access token and extract its claims.

        Note:
            - Validates signature, then expiration against the injected clock
            - Rejects refresh tokens (wrong secret, wrong type)
            - Returns Failure (not exceptions) for invalid tokens
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp", "iat", "jti"],
                },
            )
        except InvalidTokenError:
            return Failure(error=_invalid_token())

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return Failure(error=_invalid_token())

        try:
            claims = AccessTokenClaims(
                user_id=UUID(payload["sub"]),
                email=payload.get("email"),
                phone=payload.get("phone"),
                role=UserRole(payload.get("role", UserRole.USER.value)),
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
                token_id=payload["jti"],
            )
        except (ValueError, TypeError):
            return Failure(error=_invalid_token())

        if claims.expires_at <= self._clock.now():
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.TOKEN_EXPIRED,
                    message="Access token has expired",
                )
            )

        return Success(value=claims)

    def decode_refresh_token(self, token: str) -> Result[str, AuthenticationError]:
        """Validate a refresh token's signature and type, ignoring ``exp``.

        Returns:
            Success(user id from ``sub``) or Failure(AuthenticationError).
        """
        try:
            payload = jwt.decode(
                token,
                self._refresh_secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "jti"],
                },
            )
        except InvalidTokenError:
            return Failure(error=_invalid_token())

        if payload.get("type") != REFRESH_TOKEN_TYPE:
            return Failure(error=_invalid_token())
        return Success(value=payload["sub"])


def _invalid_token() -> AuthenticationError:
    return AuthenticationError(code=ErrorCode.TOKEN_INVALID, message="Invalid token")
