"""Password reset token repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.password_reset_token import PasswordResetToken


class PasswordResetTokenRepository(Protocol):
    """Persistence port for emailed password reset tokens."""

    async def save(self, token: PasswordResetToken) -> None:
        """Insert a reset token record."""
        ...

    async def find_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        """Find a record by token digest, used or not."""
        ...

    async def mark_used(self, token_id: UUID) -> bool:
        """Atomically flip is_used. Returns False if it was already used."""
        ...

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        """Delete up to ``limit`` records past their expiry."""
        ...
