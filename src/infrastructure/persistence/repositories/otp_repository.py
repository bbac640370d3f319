"""OtpRepository - SQLAlchemy implementation of OtpRepository protocol."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.otp_record import OtpRecord
from src.domain.enums import OtpMedium, OtpPurpose
from src.domain.value_objects import TimeWindow
from src.infrastructure.persistence.models.otp_record import (
    OtpRecord as OtpRecordModel,
)


class OtpRepository:
    """SQLAlchemy implementation of OtpRepository protocol.

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def count_in_window(
        self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow
    ) -> int:
        """Count codes issued for (user, purpose) within the window."""
        stmt = select(func.count(OtpRecordModel.id)).where(
            OtpRecordModel.user_id == user_id,
            OtpRecordModel.purpose == purpose.value,
            OtpRecordModel.created_at >= window.start,
            OtpRecordModel.created_at < window.end,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def mark_used_in_window(
        self, user_id: UUID, purpose: OtpPurpose, window: TimeWindow
    ) -> int:
        """Burn every unused code for (user, purpose) in the window."""
        stmt = (
            update(OtpRecordModel)
            .where(
                OtpRecordModel.user_id == user_id,
                OtpRecordModel.purpose == purpose.value,
                OtpRecordModel.created_at >= window.start,
                OtpRecordModel.created_at < window.end,
                OtpRecordModel.is_used.is_(False),
            )
            .values(is_used=True)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def save(self, record: OtpRecord) -> None:
        """Insert an issued code."""
        self.session.add(
            OtpRecordModel(
                id=record.id,
                user_id=record.user_id,
                code_hash=record.code_hash,
                purpose=record.purpose.value,
                medium=record.medium.value,
                expires_at=record.expires_at,
                is_used=record.is_used,
                message_id=record.message_id,
                contact_hash=record.contact_hash,
                created_at=record.created_at,
            )
        )
        await self.session.commit()

    async def find_redeemable(
        self,
        code_hash: str,
        purpose: OtpPurpose,
        now: datetime,
        user_id: UUID | None = None,
        contact_hash: str | None = None,
    ) -> OtpRecord | None:
        """Most recent unused, unexpired record matching the digest."""
        stmt = select(OtpRecordModel).where(
            OtpRecordModel.code_hash == code_hash,
            OtpRecordModel.purpose == purpose.value,
            OtpRecordModel.is_used.is_(False),
            OtpRecordModel.expires_at > now,
        )
        if user_id is not None:
            stmt = stmt.where(OtpRecordModel.user_id == user_id)
        if contact_hash is not None:
            stmt = stmt.where(OtpRecordModel.contact_hash == contact_hash)
        stmt = stmt.order_by(OtpRecordModel.created_at.desc()).limit(1)

        result = await self.session.execute(stmt)
        record_model = result.scalar_one_or_none()
        return self._to_domain(record_model) if record_model else None

    async def mark_used(self, record_id: UUID) -> bool:
        """Flip is_used only if nobody else did first."""
        stmt = (
            update(OtpRecordModel)
            .where(OtpRecordModel.id == record_id, OtpRecordModel.is_used.is_(False))
            .values(is_used=True)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def mark_used_for_user(self, user_id: UUID, purpose: OtpPurpose) -> int:
        """Burn every unused code for (user, purpose), whatever its age."""
        stmt = (
            update(OtpRecordModel)
            .where(
                OtpRecordModel.user_id == user_id,
                OtpRecordModel.purpose == purpose.value,
                OtpRecordModel.is_used.is_(False),
            )
            .values(is_used=True)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        """Delete up to ``limit`` expired records."""
        ids = (
            select(OtpRecordModel.id)
            .where(OtpRecordModel.expires_at <= now)
            .limit(limit)
        )
        result = await self.session.execute(
            delete(OtpRecordModel).where(OtpRecordModel.id.in_(ids))
        )
        await self.session.commit()
        return result.rowcount

    async def delete_used_batch(self, limit: int) -> int:
        """Delete up to ``limit`` used records."""
        ids = (
            select(OtpRecordModel.id)
            .where(OtpRecordModel.is_used.is_(True))
            .limit(limit)
        )
        result = await self.session.execute(
            delete(OtpRecordModel).where(OtpRecordModel.id.in_(ids))
        )
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, record_model: OtpRecordModel) -> OtpRecord:
        return OtpRecord(
            id=record_model.id,
            user_id=record_model.user_id,
            code_hash=record_model.code_hash,
            purpose=OtpPurpose(record_model.purpose),
            medium=OtpMedium(record_model.medium),
            expires_at=record_model.expires_at,
            is_used=record_model.is_used,
            message_id=record_model.message_id,
            contact_hash=record_model.contact_hash,
            created_at=record_model.created_at,
        )
