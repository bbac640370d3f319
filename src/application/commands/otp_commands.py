"""Contact verification commands (one-time codes)."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class GenerateOtp:
    """Send a verification code to one of the user's contacts.

    Attributes:
        user_id: Authenticated user.
        email_or_phone: The user's own email or phone to verify.
    """

    user_id: UUID
    email_or_phone: str


@dataclass(frozen=True, kw_only=True)
class VerifyOtp:
    """Redeem a verification code for one of the user's contacts."""

    user_id: UUID
    email_or_phone: str
    code: str
