"""One-time code record.

State machine: created -> verified | expired | superseded. The terminal
states are all expressed by ``is_used`` or by the expiry passing; a record
in any terminal state is never accepted again.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import OtpMedium, OtpPurpose


@dataclass(slots=True, kw_only=True)
class OtpRecord:
    """Issued one-time code.

    Attributes:
        id: Record identifier.
        user_id: User the code was issued to.
        code_hash: Digest of the code (the code itself is never stored).
        purpose: Flow the code may be redeemed in.
        medium: Channel the code was delivered through.
        contact_hash: Digest of the normalized email or phone the code went to.
        expires_at: After this instant the code is rejected.
        is_used: Set on redemption or when burned by the rate limiter.
        message_id: Delivery receipt from the mail/SMS transport.
        created_at: Issue time, used for rate-limit windows.
    """

    id: UUID
    user_id: UUID
    code_hash: str
    purpose: OtpPurpose
    medium: OtpMedium
    expires_at: datetime
    is_used: bool = False
    message_id: str | None = None
    contact_hash: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_redeemable(self, now: datetime | None = None) -> bool:
        """Unused and not expired."""
        return not self.is_used and (now or datetime.now(UTC)) < self.expires_at
