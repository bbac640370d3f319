"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Settings (pydantic-settings, validated once)
- Logging (structlog console/JSON)
- Database (PostgreSQL)
- Password hashing (bcrypt) and token digests (HMAC-SHA256)
- Token issuing (JWT)
- Clock (rate-limit timezone)
- Email (stub) and SMS (Twilio or stub)
- Social identity verifiers (Google, Apple, Facebook)
"""

from functools import lru_cache
from typing import TYPE_CHECKING, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from src.domain.protocols import (
        ClockProtocol,
        EmailServiceProtocol,
        LoggerProtocol,
        PasswordHashingProtocol,
        SmsServiceProtocol,
        TokenDigestProtocol,
        TokenIssuerProtocol,
    )
    from src.infrastructure.security import OneTimeSecretGenerator
    from src.infrastructure.social import SocialVerifierRegistry


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development/production: ConsoleAdapter (human-readable)
    - testing/ci: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging import ConsoleAdapter

    settings = get_settings()
    level = "DEBUG" if settings.debug else settings.log_level
    return ConsoleAdapter(use_json=settings.is_testing, level=level)


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Returns Database instance with connection pool.
    Use get_db_session() for per-request sessions.

    Returns:
        Database manager instance.
    """
    settings = get_settings()
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Creates new session per request with automatic transaction management:
        - Commits on success
        - Rolls back on exception
        - Always closes session

    Yields:
        Database session for request duration.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


# ============================================================================
# Security Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped).

    Returns BcryptPasswordService with the configured cost factor.
    """
    from src.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_digest() -> "TokenDigestProtocol":
    """Get keyed digest service for tokens and one-time codes (app-scoped)."""
    from src.infrastructure.security import HmacTokenDigestService

    return HmacTokenDigestService(secret_key=get_settings().token_hash_secret)


@lru_cache()
def get_token_service() -> "TokenIssuerProtocol":
    """Get JWT token service singleton (app-scoped).

    Access and refresh tokens are signed with separate secrets.
    """
    from src.infrastructure.security import JWTService

    settings = get_settings()
    return JWTService(
        secret_key=settings.jwt_secret,
        refresh_secret_key=settings.jwt_refresh_secret,
        access_expiration_minutes=settings.access_token_expire_minutes,
        refresh_expiration_minutes=settings.refresh_token_expire_minutes,
        algorithm=settings.jwt_algorithm,
        clock=get_clock(),
    )


@lru_cache()
def get_secret_generator() -> "OneTimeSecretGenerator":
    """Get generator for OTP codes and reset tokens (app-scoped)."""
    from src.infrastructure.security import OneTimeSecretGenerator

    return OneTimeSecretGenerator(code_length=get_settings().otp_code_length)


@lru_cache()
def get_clock() -> "ClockProtocol":
    """Get clock bound to the rate-limit timezone (app-scoped)."""
    from src.infrastructure.time import ZonedClock

    return ZonedClock(timezone=get_settings().rate_limit_timezone)


# ============================================================================
# Message Delivery (Application-Scoped)
# ============================================================================


@lru_cache()
def get_email_service() -> "EmailServiceProtocol":
    """Get email service singleton (app-scoped).

    Mail goes through StubEmailService, which logs instead of sending.
    """
    from src.infrastructure.email import StubEmailService

    return StubEmailService(logger=get_logger())


@lru_cache()
def get_sms_service() -> "SmsServiceProtocol":
    """Get SMS service singleton (app-scoped).

    Container owns factory logic - decides which adapter based on settings:
        - Twilio credentials present: TwilioSmsService
        - otherwise: StubSmsService (logs to console)
    """
    settings = get_settings()
    if settings.twilio_configured:
        from src.infrastructure.sms import TwilioSmsService

        return TwilioSmsService(
            account_sid=settings.twilio_account_sid or "",
            auth_token=settings.twilio_auth_token or "",
            from_number=settings.twilio_from_number or "",
            logger=get_logger(),
            base_url=settings.twilio_base_url,
            timeout=settings.social_http_timeout,
        )

    from src.infrastructure.sms import StubSmsService

    return StubSmsService(logger=get_logger())


# ============================================================================
# Social Login (Application-Scoped)
# ============================================================================


def build_social_registry(settings: Settings, logger: "LoggerProtocol") -> "SocialVerifierRegistry":
    """Build the login type -> verifier table from settings."""
    from src.core.constants import APPLE_JWKS_URL, GOOGLE_JWKS_URL
    from src.infrastructure.social import (
        AppleIdentityVerifier,
        FacebookIdentityVerifier,
        GoogleIdentityVerifier,
        JwksKeySource,
        SocialVerifierRegistry,
    )

    google_keys = JwksKeySource(
        url=GOOGLE_JWKS_URL,
        provider_name="google",
        logger=logger,
        ttl_seconds=settings.jwks_cache_ttl_seconds,
        timeout=settings.social_http_timeout,
    )
    apple_keys = JwksKeySource(
        url=APPLE_JWKS_URL,
        provider_name="apple",
        logger=logger,
        ttl_seconds=settings.jwks_cache_ttl_seconds,
        timeout=settings.social_http_timeout,
    )
    return SocialVerifierRegistry(
        [
            GoogleIdentityVerifier(
                client_ids=settings.google_client_id_list,
                key_source=google_keys,
                logger=logger,
            ),
            AppleIdentityVerifier(
                key_source=apple_keys,
                logger=logger,
                client_id=settings.apple_client_id,
            ),
            FacebookIdentityVerifier(
                logger=logger,
                graph_url=settings.facebook_graph_url,
                timeout=settings.social_http_timeout,
            ),
        ]
    )


@lru_cache()
def get_social_registry() -> "SocialVerifierRegistry":
    """Get the social verifier registry (app-scoped).

    Built once so the JWKS caches live for the whole process.
    """
    return build_social_registry(get_settings(), get_logger())
