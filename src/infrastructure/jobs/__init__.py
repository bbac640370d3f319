"""Background jobs: periodic cleanup sweeps and their scheduler.

Usage:
    from src.core.container import get_job_scheduler

    scheduler = get_job_scheduler()
    scheduler.start()
"""

from src.infrastructure.jobs.scheduler import (
    DailySchedule,
    IntervalSchedule,
    JobScheduler,
    PeriodicJob,
)
from src.infrastructure.jobs.sweep_jobs import SweepJobs, drain

__all__ = [
    "DailySchedule",
    "IntervalSchedule",
    "JobScheduler",
    "PeriodicJob",
    "SweepJobs",
    "drain",
]
