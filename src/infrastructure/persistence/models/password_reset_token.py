"""Password reset token database model.

Stores the HMAC digest of the emailed token, never the token itself.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class PasswordResetToken(BaseModel):
    """Single-use password reset token.

    Indexes:
        - token_hash: unique, link lookup
        - idx_password_reset_cleanup: (expires_at) for the sweep
    """

    __tablename__ = "password_reset_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who requested password reset",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, comment="HMAC-SHA256 of the token"
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("idx_password_reset_cleanup", "expires_at"),)
