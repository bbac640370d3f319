"""One-time code repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.otp_record import OtpRecord
from src.domain.enums import OtpPurpose
from src.domain.value_objects import TimeWindow


class OtpRepository(Protocol):
    """Persistence port for issued one-time codes."""

    async def count_in_window(
        self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow
    ) -> int:
        """Count codes issued to the user for the purpose within the window."""
        ...

    async def mark_used_in_window(
        self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow
    ) -> int:
        """Burn every code of the user/purpose issued within the window."""
        ...

    async def save(self, record: OtpRecord) -> None:
        """Insert an issued code record."""
        ...

    async def find_redeemable(
        self,
        code_hash: str,
        purpose: OtpPurpose,
        now: datetime,
        user_id: UUID | None = None,
        contact_hash: str | None = None,
    ) -> OtpRecord | None:
        """Most recent unused, unexpired record matching the digest.

        ``user_id`` and ``contact_hash`` narrow the match when given.
        """
        ...

    async def mark_used(self, record_id: UUID) -> bool:
        """Atomically flip is_used. Returns False if it was already used."""
        ...

    async def mark_used_for_user(self, user_id: UUID, purpose: OtpPurpose) -> int:
        """Burn every outstanding code of the user/purpose."""
        ...

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        """Delete up to ``limit`` records past their expiry, used or not."""
        ...

    async def delete_used_batch(self, limit: int) -> int:
        """Delete up to ``limit`` used records."""
        ...
