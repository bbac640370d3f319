"""SessionRepository - SQLAlchemy implementation of SessionRepository protocol.

Token rotation is a single conditional UPDATE keyed on the previous access
token digest; the database decides which of two concurrent refreshes wins.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.session import Session
from src.domain.enums import LoginType, OsType
from src.infrastructure.persistence.models.session import Session as SessionModel


class SessionRepository:
    """SQLAlchemy implementation of SessionRepository protocol.

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, user_session: Session) -> UUID:
        """Insert a session row."""
        session_model = self._to_model(user_session)
        self.session.add(session_model)
        await self.session.commit()
        return session_model.id

    async def find_active_by_access_token_hash(
        self, access_token_hash: str, now: datetime
    ) -> Session | None:
        """Live session whose access token is still valid at ``now``."""
        stmt = select(SessionModel).where(
            SessionModel.access_token_hash == access_token_hash,
            SessionModel.access_token_expires_at > now,
            SessionModel.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        session_model = result.scalar_one_or_none()
        return self._to_domain(session_model) if session_model else None

    async def find_by_token_hashes(
        self, access_token_hash: str, refresh_token_hash: str
    ) -> Session | None:
        """Live session matching both digests, expired or not."""
        stmt = select(SessionModel).where(
            SessionModel.access_token_hash == access_token_hash,
            SessionModel.refresh_token_hash == refresh_token_hash,
            SessionModel.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        session_model = result.scalar_one_or_none()
        return self._to_domain(session_model) if session_model else None

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
        """Conditionally replace the token pair.

        Returns:
            True if exactly one row changed.
        """
        stmt = (
            update(SessionModel)
            .where(
                SessionModel.id == session_id,
                SessionModel.access_token_hash == expected_access_token_hash,
                SessionModel.deleted_at.is_(None),
            )
            .values(
                access_token_hash=access_token_hash,
                access_token_expires_at=access_token_expires_at,
                refresh_token_hash=refresh_token_hash,
                refresh_token_expires_at=refresh_token_expires_at,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def remove(self, session_id: UUID) -> bool:
        """Hard-delete one session."""
        result = await self.session.execute(
            delete(SessionModel).where(SessionModel.id == session_id)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def remove_for_device(self, user_id: UUID, device_id: str) -> int:
        """Hard-delete the user's sessions bound to a device."""
        result = await self.session.execute(
            delete(SessionModel).where(
                SessionModel.user_id == user_id, SessionModel.device_id == device_id
            )
        )
        await self.session.commit()
        return result.rowcount

    async def remove_all_for_user(self, user_id: UUID) -> int:
        """Hard-delete every session of the user."""
        result = await self.session.execute(
            delete(SessionModel).where(SessionModel.user_id == user_id)
        )
        await self.session.commit()
        return result.rowcount

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        """Hard-delete up to ``limit`` sessions whose refresh token expired."""
        expired_ids = (
            select(SessionModel.id)
            .where(SessionModel.refresh_token_expires_at <= now)
            .limit(limit)
        )
        result = await self.session.execute(
            delete(SessionModel).where(SessionModel.id.in_(expired_ids))
        )
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, session_model: SessionModel) -> Session:
        return Session(
            id=session_model.id,
            user_id=session_model.user_id,
            access_token_hash=session_model.access_token_hash,
            access_token_expires_at=session_model.access_token_expires_at,
            refresh_token_hash=session_model.refresh_token_hash,
            refresh_token_expires_at=session_model.refresh_token_expires_at,
            login_type=LoginType(session_model.login_type),
            os=OsType(session_model.os) if session_model.os else None,
            device_id=session_model.device_id,
            latitude=_decimal_or_none(session_model.latitude),
            longitude=_decimal_or_none(session_model.longitude),
            created_at=session_model.created_at,
            updated_at=session_model.updated_at,
            deleted_at=session_model.deleted_at,
        )

    def _to_model(self, user_session: Session) -> SessionModel:
        return SessionModel(
            id=user_session.id,
            user_id=user_session.user_id,
            access_token_hash=user_session.access_token_hash,
            access_token_expires_at=user_session.access_token_expires_at,
            refresh_token_hash=user_session.refresh_token_hash,
            refresh_token_expires_at=user_session.refresh_token_expires_at,
            login_type=user_session.login_type.value,
            os=user_session.os.value if user_session.os else None,
            device_id=user_session.device_id,
            latitude=user_session.latitude,
            longitude=user_session.longitude,
            created_at=user_session.created_at,
            updated_at=user_session.updated_at,
            deleted_at=user_session.deleted_at,
        )


def _decimal_or_none(value: Decimal | None) -> Decimal | None:
    return Decimal(value) if value is not None else None
