"""Session database model (one access/refresh token pair per row).

Only HMAC digests of the tokens are stored. Rows are hard-deleted on logout
and by the expiry sweep.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, SoftDeleteMixin


class Session(SoftDeleteMixin, BaseMutableModel):
    """User session (table ``user_sessions``).

    Indexes:
        - access_token_hash: unique, bearer lookups
        - refresh_token_hash: unique
        - idx_user_sessions_cleanup: (refresh_token_expires_at) for the sweep
        - idx_user_sessions_device: (user_id, device_id) for device binding
    """

    __tablename__ = "user_sessions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who owns this session",
    )

    access_token_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, comment="HMAC-SHA256 of access token"
    )
    access_token_expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    refresh_token_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, comment="HMAC-SHA256 of refresh token"
    )
    refresh_token_expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    login_type: Mapped[str] = mapped_column(String(32), nullable=False)
    os: Mapped[str | None] = mapped_column(String(16), nullable=True)
    device_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(9, 6), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(9, 6), nullable=True)

    __table_args__ = (
        Index("idx_user_sessions_cleanup", "refresh_token_expires_at"),
        Index("idx_user_sessions_device", "user_id", "device_id"),
    )
