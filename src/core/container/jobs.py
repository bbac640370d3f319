"""Background job factories.

The sweep jobs and their scheduler are application-scoped: one scheduler per
process, started and stopped by the FastAPI lifespan.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.container.infrastructure import get_clock, get_logger
from src.core.container.repositories import (
    otp_repository_scope,
    password_reset_token_repository_scope,
    session_repository_scope,
)

if TYPE_CHECKING:
    from src.infrastructure.jobs import JobScheduler, SweepJobs


@lru_cache()
def get_sweep_jobs() -> "SweepJobs":
    """Get the cleanup sweeps (app-scoped)."""
    from src.infrastructure.jobs import SweepJobs

    return SweepJobs(
        session_repos=session_repository_scope,
        otp_repos=otp_repository_scope,
        reset_token_repos=password_reset_token_repository_scope,
        clock=get_clock(),
        logger=get_logger(),
        batch_size=get_settings().sweep_batch_size,
    )


@lru_cache()
def get_job_scheduler() -> "JobScheduler":
    """Get the scheduler driving the sweeps (app-scoped)."""
    from src.infrastructure.jobs import JobScheduler

    settings = get_settings()
    jobs = get_sweep_jobs().periodic_jobs(
        interval_seconds=settings.sweep_interval_seconds,
        daily_hour=settings.daily_sweep_hour,
        timezone=settings.rate_limit_timezone,
    )
    return JobScheduler(jobs=jobs, logger=get_logger())
