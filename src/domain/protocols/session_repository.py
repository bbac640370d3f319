"""Session repository protocol for persistence abstraction.

Only token digests ever reach this port. Refresh relies on rotate() being a
conditional update so two concurrent refreshes of one session cannot both win.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.session import Session


class SessionRepository(Protocol):
    """Session repository protocol (port) for persistence."""

    async def create(self, user_session: Session) -> UUID:
        """Insert a session and return its ID."""
        ...

    async def find_active_by_access_token_hash(
        self, access_token_hash: str, now: datetime
    ) -> Session | None:
        """Find a live session whose access token has not expired at ``now``."""
        ...

    async def find_by_token_hashes(
        self, access_token_hash: str, refresh_token_hash: str
    ) -> Session | None:
        """Find a live session by both digests, regardless of expiry."""
        ...

    async def rotate(
        self,
        session_id: UUID,
        expected_access_token_hash: str,
        *,
        access_token_hash: str,
        access_token_expires_at: datetime,
        refresh_token_hash: str,
        refresh_token_expires_at: datetime,
    ) -> bool:
        """Replace the token fields if the stored access digest still matches.

        Returns:
            True if the row was updated, False if another writer got there first.
        """
        ...

    async def remove(self, session_id: UUID) -> bool:
        """Hard-delete a session. Returns False if it was already gone."""
        ...

    async def remove_for_device(self, user_id: UUID, device_id: str) -> int:
        """Hard-delete every session of the user bound to a device."""
        ...

    async def remove_all_for_user(self, user_id: UUID) -> int:
        """Hard-delete every session of the user."""
        ...

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        """Hard-delete up to ``limit`` sessions whose refresh token expired."""
        ...
