"""Session domain entity (one persisted access/refresh token pair).

Pure business logic, no framework dependencies.

Only one-way digests of the tokens are kept. A session is created on
login, has its token fields replaced on refresh, and is hard-deleted on
logout or by the expiry sweep.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from src.domain.enums import LoginType, OsType


@dataclass(slots=True, kw_only=True)
class Session:
    """Authenticated device session.

    Business Rules:
        - refresh_token_expires_at >= access_token_expires_at
        - Active means: not soft-deleted and access token not yet expired
        - Refresh is allowed only after the access token expired and
          before the refresh token expired

    Attributes:
        id: Unique session identifier.
        user_id: Owning user.
        access_token_hash: Digest of the current access token.
        access_token_expires_at: Expiry of the current access token.
        refresh_token_hash: Digest of the current refresh token.
        refresh_token_expires_at: Expiry of the current refresh token.
        login_type: How the user authenticated.
        os: Client operating system, if reported.
        device_id: Client device identifier, if reported.
        latitude: Reported latitude, if any.
        longitude: Reported longitude, if any.
        created_at: When the session was opened.
        updated_at: When tokens were last rotated.
        deleted_at: Tombstone, excluded from active lookups.
    """

    id: UUID
    user_id: UUID
    access_token_hash: str
    access_token_expires_at: datetime
    refresh_token_hash: str
    refresh_token_expires_at: datetime
    login_type: LoginType = LoginType.CREDENTIALS
    os: OsType | None = None
    device_id: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Enforce expiry ordering.

        Raises:
            ValueError: If the refresh token would expire before the access token.
        """
        if self.refresh_token_expires_at < self.access_token_expires_at:
            raise ValueError("Refresh token cannot expire before the access token")

    def is_access_token_expired(self, now: datetime | None = None) -> bool:
        """True once the access token's expiry has passed."""
        return (now or datetime.now(UTC)) >= self.access_token_expires_at

    def is_refresh_token_expired(self, now: datetime | None = None) -> bool:
        """True once the refresh token's expiry has passed."""
        return (now or datetime.now(UTC)) >= self.refresh_token_expires_at

    def is_active(self, now: datetime | None = None) -> bool:
        """Check if the session authorizes API calls right now."""
        return self.deleted_at is None and not self.is_access_token_expired(now)
