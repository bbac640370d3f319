"""Repository dependency factories.

Request-scoped repository instances for domain entity persistence.
Each request gets fresh repository instances with shared session.
Repository scopes (async context managers) serve the sweep jobs, which
run outside any request.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.container.infrastructure import get_database, get_db_session

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import (
        OtpRepository,
        PasswordResetTokenRepository,
        SessionRepository,
        UserRepository,
    )


# ============================================================================
# Repository Factories (Request-Scoped)
# ============================================================================


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "UserRepository":
    """Get user repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).

    Returns:
        UserRepository instance.

    Usage:
        # Presentation Layer (FastAPI Depends)
        @router.get("/users/me")
        async def me(user_repo: UserRepository = Depends(get_user_repository)):
            ...
    """
    from src.infrastructure.persistence.repositories import UserRepository

    return UserRepository(session=session)


async def get_session_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "SessionRepository":
    """Get session repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import SessionRepository

    return SessionRepository(session=session)


async def get_otp_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "OtpRepository":
    """Get OTP record repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import OtpRepository

    return OtpRepository(session=session)


async def get_password_reset_token_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "PasswordResetTokenRepository":
    """Get password reset token repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import (
        PasswordResetTokenRepository,
    )

    return PasswordResetTokenRepository(session=session)


# ============================================================================
# Repository Scopes (Background Jobs)
# ============================================================================


@asynccontextmanager
async def session_repository_scope() -> AsyncIterator["SessionRepository"]:
    """Session repository on its own database session."""
    from src.infrastructure.persistence.repositories import SessionRepository

    async with get_database().get_session() as session:
        yield SessionRepository(session=session)


@asynccontextmanager
async def otp_repository_scope() -> AsyncIterator["OtpRepository"]:
    """OTP repository on its own database session."""
    from src.infrastructure.persistence.repositories import OtpRepository

    async with get_database().get_session() as session:
        yield OtpRepository(session=session)


@asynccontextmanager
async def password_reset_token_repository_scope() -> AsyncIterator[
    "PasswordResetTokenRepository"
]:
    """Password reset token repository on its own database session."""
    from src.infrastructure.persistence.repositories import (
        PasswordResetTokenRepository,
    )

    async with get_database().get_session() as session:
        yield PasswordResetTokenRepository(session=session)
