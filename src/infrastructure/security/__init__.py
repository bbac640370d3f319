"""Security infrastructure adapters.

This package contains security-related infrastructure implementations:
- Password hashing (bcrypt)
- Keyed digests for stored tokens and codes (HMAC-SHA256)
- JWT access/refresh token issuing and validation
- One-time code and reset token generation
"""

from src.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from src.infrastructure.security.jwt_service import JWTService
from src.infrastructure.security.one_time_secret_generator import (
    OneTimeSecretGenerator,
)
from src.infrastructure.security.token_digest_service import HmacTokenDigestService

__all__ = [
    "BcryptPasswordService",
    "HmacTokenDigestService",
    "JWTService",
    "OneTimeSecretGenerator",
]
