"""PasswordResetTokenRepository - SQLAlchemy implementation."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.password_reset_token import PasswordResetToken
from src.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken as PasswordResetTokenModel,
)


class PasswordResetTokenRepository:
    """SQLAlchemy implementation of PasswordResetTokenRepository protocol.

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, token: PasswordResetToken) -> None:
        """Insert a reset token."""
        self.session.add(
            PasswordResetTokenModel(
                id=token.id,
                user_id=token.user_id,
                token_hash=token.token_hash,
                expires_at=token.expires_at,
                is_used=token.is_used,
                created_at=token.created_at,
            )
        )
        await self.session.commit()

    async def find_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        """Find token by digest (used or not, expired or not)."""
        stmt = select(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == token_hash
        )
        result = await self.session.execute(stmt)
        token_model = result.scalar_one_or_none()
        if token_model is None:
            return None
        return PasswordResetToken(
            id=token_model.id,
            user_id=token_model.user_id,
            token_hash=token_model.token_hash,
            expires_at=token_model.expires_at,
            is_used=token_model.is_used,
            created_at=token_model.created_at,
        )

    async def mark_used(self, token_id: UUID) -> bool:
        """Flip is_used only if nobody else did first."""
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.id == token_id,
                PasswordResetTokenModel.is_used.is_(False),
            )
            .values(is_used=True)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def delete_expired_batch(self, now: datetime, limit: int) -> int:
        """Delete up to ``limit`` expired tokens."""
        ids = (
            select(PasswordResetTokenModel.id)
            .where(PasswordResetTokenModel.expires_at <= now)
            .limit(limit)
        )
        result = await self.session.execute(
            delete(PasswordResetTokenModel).where(PasswordResetTokenModel.id.in_(ids))
        )
        await self.session.commit()
        return result.rowcount
