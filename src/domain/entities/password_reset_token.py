"""Password reset token (single-use link for the email reset flow)."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class PasswordResetToken:
    """Single-use reset link token.

    Same lifecycle as an OTP record, scoped to the emailed reset link.

    Attributes:
        id: Record identifier.
        user_id: User whose password the token resets.
        token_hash: Digest of the token.
        expires_at: Expiry instant.
        is_used: Set once the password was reset with it.
        created_at: Issue time.
    """

    id: UUID
    user_id: UUID
    token_hash: str
    expires_at: datetime
    is_used: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once the expiry has passed."""
        return (now or datetime.now(UTC)) >= self.expires_at
