"""Domain entities.

Entities carry identity and business rules, with no framework imports.
"""

from src.domain.entities.otp_record import OtpRecord
from src.domain.entities.password_reset_token import PasswordResetToken
from src.domain.entities.session import Session
from src.domain.entities.user import User

__all__ = [
    "OtpRecord",
    "PasswordResetToken",
    "Session",
    "User",
]
