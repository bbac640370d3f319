"""Database models for persistence layer.

SQLAlchemy models that map to database tables. These are infrastructure
concerns and must not be imported by the domain layer.

Models Organization:
    - user.py: User model (users)
    - session.py: Session model (user_sessions)
    - otp_record.py: One-time code model (user_otps)
    - password_reset_token.py: Password reset token model

Note:
    Domain entities (dataclasses) live in src/domain/entities/
    Database models live here and are mapped by the repository layer.
"""

from src.infrastructure.persistence.models.otp_record import OtpRecord
from src.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from src.infrastructure.persistence.models.session import Session
from src.infrastructure.persistence.models.user import User

__all__ = [
    "OtpRecord",
    "PasswordResetToken",
    "Session",
    "User",
]
