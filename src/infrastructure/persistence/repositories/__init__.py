"""Repository implementations (SQLAlchemy adapters for domain ports)."""

from src.infrastructure.persistence.repositories.otp_repository import OtpRepository
from src.infrastructure.persistence.repositories.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from src.infrastructure.persistence.repositories.session_repository import (
    SessionRepository,
)
from src.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = [
    "OtpRepository",
    "PasswordResetTokenRepository",
    "SessionRepository",
    "UserRepository",
]
