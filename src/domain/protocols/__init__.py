"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

IMPORTANT: Re-exports are ONLY for protocols defined in this package.

Usage:
    from src.domain.protocols import PasswordHashingProtocol, SessionRepository
"""

# Service protocols
from src.domain.protocols.clock_protocol import ClockProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.message_delivery_protocol import (
    EmailServiceProtocol,
    SmsServiceProtocol,
)
from src.domain.protocols.password_hashing_protocol import (
    PasswordHashingProtocol,
    TokenDigestProtocol,
)
from src.domain.protocols.social_identity_verifier import SocialIdentityVerifier
from src.domain.protocols.token_issuer_protocol import TokenIssuerProtocol

# Repository protocols
from src.domain.protocols.otp_repository import OtpRepository
from src.domain.protocols.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from src.domain.protocols.session_repository import SessionRepository
from src.domain.protocols.user_repository import (
    UserAlreadyExistsError,
    UserRepository,
)

__all__ = [
    # Service protocols
    "ClockProtocol",
    "EmailServiceProtocol",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "SmsServiceProtocol",
    "SocialIdentityVerifier",
    "TokenDigestProtocol",
    "TokenIssuerProtocol",
    # Repository protocols
    "OtpRepository",
    "PasswordResetTokenRepository",
    "SessionRepository",
    "UserAlreadyExistsError",
    "UserRepository",
]
