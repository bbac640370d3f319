"""One-time code database model (table ``user_otps``)."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class OtpRecord(BaseModel):
    """Issued one-time code.

    Indexes:
        - idx_user_otps_window: (user_id, purpose, created_at) for rate limiting
        - idx_user_otps_lookup: (code_hash, purpose) for redemption
        - idx_user_otps_cleanup: (is_used, expires_at) for the sweeps
    """

    __tablename__ = "user_otps"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User the code was issued to",
    )
    code_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, comment="HMAC-SHA256 of the code"
    )
    purpose: Mapped[str] = mapped_column(String(32), nullable=False)
    medium: Mapped[str] = mapped_column(String(16), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    message_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="Delivery receipt from mail/SMS transport"
    )
    contact_hash: Mapped[str | None] = mapped_column(
        String(64), nullable=True, comment="HMAC-SHA256 of the contact the code went to"
    )

    __table_args__ = (
        Index("idx_user_otps_window", "user_id", "purpose", "created_at"),
        Index("idx_user_otps_lookup", "code_hash", "purpose"),
        Index("idx_user_otps_cleanup", "is_used", "expires_at"),
    )
