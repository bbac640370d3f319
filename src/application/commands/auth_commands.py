"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic
- Commands don't return values (handlers return Result types)
- Field validation happens on the request schemas (Annotated types)
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from src.domain.enums import LoginType, OsType


@dataclass(frozen=True, kw_only=True)
class DeviceContext:
    """Client-reported device metadata attached to a new session.

    Attributes:
        os: Client operating system.
        device_id: Stable device identifier (enables device binding).
        latitude: Reported latitude.
        longitude: Reported longitude.
    """

    os: OsType | None = None
    device_id: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Authenticate with email-or-phone and password.

    Example:
        >>> command = LoginUser(email_or_phone="a@b.com", password="Secret@123")
        >>> result = await handler.handle(command)
    """

    email_or_phone: str
    password: str
    device: DeviceContext = DeviceContext()


@dataclass(frozen=True, kw_only=True)
class SocialLogin:
    """Authenticate with a social provider assertion.

    Attributes:
        login_type: Provider (google, apple, facebook).
        token: ID token (Google/Apple) or access token (Facebook).
    """

    login_type: LoginType
    token: str
    device: DeviceContext = DeviceContext()


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Create a credentials account.

    Attributes:
        email_or_phone: Contact that identifies the new user.
        password: Plaintext password (strength validated upstream).
    """

    email_or_phone: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, kw_only=True)
class CompleteSocialRegistration:
    """Fill in profile data after a social sign-up."""

    user_id: UUID
    first_name: str
    last_name: str
    phone: str | None = None


@dataclass(frozen=True, kw_only=True)
class RefreshTokens:
    """Exchange an expired access token plus its refresh token for a new pair."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """End the session identified by the bearer access token."""

    access_token: str
