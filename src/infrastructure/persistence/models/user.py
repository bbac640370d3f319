"""User database model.

Security:
    - password_hash: bcrypt hash, NULL for social-only accounts
    - email/phone: unique when present; emails are stored lowercased
    - deleted_at: tombstone, soft-deleted users never authenticate
"""

from sqlalchemy import Boolean, CheckConstraint, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel, SoftDeleteMixin


class User(SoftDeleteMixin, BaseMutableModel):
    """User model.

    Fields:
        id, created_at, updated_at: from BaseMutableModel
        deleted_at: from SoftDeleteMixin
        email: Unique lowercased email (nullable)
        phone: Unique E.164 phone (nullable)
        password_hash: bcrypt hash (nullable)
        first_name, last_name: Profile names
        email_verified, phone_verified: Contact verification flags
        role: Role name embedded in access tokens
        social_ids: Provider user IDs keyed by login type
        avatar_url: Social profile picture
    """

    __tablename__ = "users"

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        index=True,
        comment="User email address (unique, lowercase)",
    )

    phone: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        unique=True,
        index=True,
        comment="E.164 phone number (unique)",
    )

    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hash, NULL for social-only accounts",
    )

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    phone_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="user",
        comment="Role name (admin, user)",
    )

    social_ids: Mapped[dict[str, str]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        comment="Provider user IDs keyed by login type",
    )

    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "email IS NOT NULL OR phone IS NOT NULL",
            name="ck_users_email_or_phone",
        ),
    )
