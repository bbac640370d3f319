"""Cleanup sweeps for expired credentials.

Every sweep deletes in fixed-size batches and loops until a batch comes back
short, so one tick never holds a long scan. Re-running a sweep on clean data
deletes nothing.

Jobs:
- session_sweep: sessions whose refresh token expired (hourly)
- otp_expired_sweep: OTP records past expiry (hourly)
- password_reset_token_sweep: reset tokens past expiry (hourly)
- otp_used_sweep: redeemed or burned OTP records (daily)
"""

from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import TypeAlias, TypeVar

from src.core.enums import ErrorCode
from src.core.errors import DomainError, InternalError
from src.core.result import Failure, Result, Success
from src.domain.protocols import (
    ClockProtocol,
    LoggerProtocol,
    OtpRepository,
    PasswordResetTokenRepository,
    SessionRepository,
)
from src.infrastructure.jobs.scheduler import (
    DailySchedule,
    IntervalSchedule,
    PeriodicJob,
)

R = TypeVar("R")

RepositoryScope: TypeAlias = Callable[[], AbstractAsyncContextManager[R]]
"""Opens a repository bound to a fresh database session."""


async def drain(delete_batch: Callable[[int], Awaitable[int]], batch_size: int) -> int:
    """Call ``delete_batch`` until it removes fewer than ``batch_size`` rows.

    Returns:
        Total rows removed.
    """
    total = 0
    while True:
        removed = await delete_batch(batch_size)
        total += removed
        if removed < batch_size:
            return total


class SweepJobs:
    """The cleanup sweeps and their schedules."""

    def __init__(
        self,
        *,
        session_repos: RepositoryScope[SessionRepository],
        otp_repos: RepositoryScope[OtpRepository],
        reset_token_repos: RepositoryScope[PasswordResetTokenRepository],
        clock: ClockProtocol,
        logger: LoggerProtocol,
        batch_size: int = 100,
    ) -> None:
        if batch_size < 1:
            raise ValueError("Sweep batch size must be at least 1")
        self._session_repos = session_repos
        self._otp_repos = otp_repos
        self._reset_token_repos = reset_token_repos
        self._clock = clock
        self._logger = logger
        self._batch_size = batch_size

    async def sweep_expired_sessions(self) -> Result[int, DomainError]:
        """Hard-delete sessions whose refresh token expired."""
        try:
            async with self._session_repos() as repo:
                now = self._clock.now()
                removed = await drain(
                    lambda limit: repo.delete_expired_batch(now, limit), self._batch_size
                )
        except Exception as e:
            return self._failed("session_sweep", e)
        self._logger.info("session_sweep_completed", removed_count=removed)
        return Success(value=removed)

    async def sweep_expired_otps(self) -> Result[int, DomainError]:
        """Delete OTP records past their expiry, used or not."""
        try:
            async with self._otp_repos() as repo:
                now = self._clock.now()
                removed = await drain(
                    lambda limit: repo.delete_expired_batch(now, limit), self._batch_size
                )
        except Exception as e:
            return self._failed("otp_expired_sweep", e)
        self._logger.info("otp_expired_sweep_completed", removed_count=removed)
        return Success(value=removed)

    async def sweep_used_otps(self) -> Result[int, DomainError]:
        """Delete OTP records that were redeemed or burned."""
        try:
            async with self._otp_repos() as repo:
                removed = await drain(repo.delete_used_batch, self._batch_size)
        except Exception as e:
            return self._failed("otp_used_sweep", e)
        self._logger.info("otp_used_sweep_completed", removed_count=removed)
        return Success(value=removed)

    async def sweep_expired_reset_tokens(self) -> Result[int, DomainError]:
        """Delete password reset tokens past their expiry."""
        try:
            async with self._reset_token_repos() as repo:
                now = self._clock.now()
                removed = await drain(
                    lambda limit: repo.delete_expired_batch(now, limit), self._batch_size
                )
        except Exception as e:
            return self._failed("password_reset_token_sweep", e)
        self._logger.info("password_reset_token_sweep_completed", removed_count=removed)
        return Success(value=removed)

    def periodic_jobs(
        self,
        *,
        interval_seconds: float = 3600,
        daily_hour: int = 0,
        timezone: str = "America/Los_Angeles",
    ) -> list[PeriodicJob]:
        """The four sweeps with their schedules."""
        hourly = IntervalSchedule(seconds=interval_seconds)
        daily = DailySchedule(hour=daily_hour, timezone=timezone)
        return [
            PeriodicJob("session_sweep", self.sweep_expired_sessions, hourly),
            PeriodicJob("otp_expired_sweep", self.sweep_expired_otps, hourly),
            PeriodicJob(
                "password_reset_token_sweep", self.sweep_expired_reset_tokens, hourly
            ),
            PeriodicJob("otp_used_sweep", self.sweep_used_otps, daily),
        ]

    def _failed(self, job: str, error: Exception) -> Failure[InternalError]:
        self._logger.error(f"{job}_failed", error=error)
        return Failure(
            error=InternalError(
                code=ErrorCode.DATABASE_ERROR,
                message="Cleanup sweep failed",
            )
        )
