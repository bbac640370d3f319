"""Authentication DTOs (Data Transfer Objects).

Response/result dataclasses for authentication command handlers.
These carry data from handlers back to the presentation layer.

DTOs:
    - AuthTokens: Token pair handed to the client
    - AuthSession: Result of every login flow and of refresh
    - IssuedOtp: Result of issuing a one-time code (never contains the code)
    - UserProfile: Public view of a user
    - AuthenticatedUser: Result of GetCurrentUser (user plus live session)
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.domain.entities import Session, User
from src.domain.enums import LoginType, OtpMedium, UserRole


@dataclass(frozen=True, kw_only=True)
class AuthTokens:
    """Signed tokens returned to the client.

    Attributes:
        access_token: JWT access token.
        refresh_token: JWT refresh token.
        access_token_expires_at: Access expiry (UTC).
        refresh_token_expires_at: Refresh expiry (UTC).
        token_type: Always "bearer".
    """

    access_token: str
    refresh_token: str
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime
    token_type: str = "bearer"


@dataclass(frozen=True, kw_only=True)
class AuthSession:
    """Outcome of a successful login or refresh.

    Attributes:
        user_id: Authenticated user.
        session_id: Persisted session row.
        tokens: Token pair for the client.
        login_type: How the user authenticated.
        is_new_user: True when the social login auto-provisioned the account.
    """

    user_id: UUID
    session_id: UUID
    tokens: AuthTokens
    login_type: LoginType = LoginType.CREDENTIALS
    is_new_user: bool = False


@dataclass(frozen=True, kw_only=True)
class IssuedOtp:
    """A code was delivered and recorded."""

    otp_id: UUID
    medium: OtpMedium
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class UserProfile:
    """Public view of the authenticated user."""

    id: UUID
    email: str | None
    phone: str | None
    first_name: str | None
    last_name: str | None
    email_verified: bool
    phone_verified: bool
    role: UserRole
    has_password: bool
    avatar_url: str | None = None
    linked_providers: list[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class AuthenticatedUser:
    """Caller resolved from a bearer token."""

    user: User
    session: Session


def to_user_profile(user: User) -> UserProfile:
    """Project a user entity onto its public view."""
    return UserProfile(
        id=user.id,
        email=user.email,
        phone=user.phone,
        first_name=user.first_name,
        last_name=user.last_name,
        email_verified=user.email_verified,
        phone_verified=user.phone_verified,
        role=user.role,
        has_password=user.has_password(),
        avatar_url=user.avatar_url,
        linked_providers=sorted(user.social_ids),
    )
