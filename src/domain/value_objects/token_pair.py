"""Freshly minted access/refresh token pair and decoded access claims."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.enums import UserRole


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenPair:
    """Signed tokens handed to the client once and never stored in plaintext.

    Raises:
        ValueError: If the refresh token expires before the access token.
    """

    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime

    def __post_init__(self) -> None:
        """Enforce expiry ordering."""
        if self.refresh_token_expires_at < self.access_token_expires_at:
            raise ValueError("Refresh token cannot expire before the access token")


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessTokenClaims:
    """Validated claims of an access token."""

    user_id: UUID
    email: str | None
    phone: str | None
    role: UserRole
    issued_at: datetime
    expires_at: datetime
    token_id: str
