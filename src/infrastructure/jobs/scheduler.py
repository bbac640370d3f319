"""In-process periodic job scheduler.

Each job runs in its own asyncio task that sleeps until the next tick and
then starts a run. Runs are single-flight: a tick that finds the previous
run of the same job still active is skipped and logged, never queued.

Schedules:
- IntervalSchedule: every N seconds (hourly sweeps)
- DailySchedule: once a day at a wall-clock time in a named timezone

Usage:
    scheduler = JobScheduler(jobs=sweeps.periodic_jobs(), logger=logger)
    scheduler.start()
    ...
    await scheduler.stop()
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from src.core.errors import DomainError, unexpected_error
from src.core.result import Failure, Result
from src.domain.protocols import LoggerProtocol

JobAction = Callable[[], Awaitable[Result[int, DomainError]]]
"""A job body returns the number of rows it processed."""


class Schedule(Protocol):
    """Computes the wait before the next tick."""

    def seconds_until_next(self, now: datetime) -> float:
        """Seconds from ``now`` (UTC) to the next tick."""
        ...


@dataclass(frozen=True, slots=True)
class IntervalSchedule:
    """Tick every ``seconds``."""

    seconds: float

    def __post_init__(self) -> None:
        if self.seconds <= 0:
            raise ValueError("Interval must be positive")

    def seconds_until_next(self, now: datetime) -> float:
        return self.seconds


@dataclass(frozen=True, slots=True)
class DailySchedule:
    """Tick once a day at ``hour:minute`` local time in ``timezone``."""

    hour: int = 0
    minute: int = 0
    timezone: str = "America/Los_Angeles"

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise ValueError("Daily schedule needs 0 <= hour <= 23 and 0 <= minute <= 59")
        ZoneInfo(self.timezone)

    def seconds_until_next(self, now: datetime) -> float:
        local_now = now.astimezone(ZoneInfo(self.timezone))
        target = local_now.replace(
            hour=self.hour, minute=self.minute, second=0, microsecond=0
        )
        if target <= local_now:
            # Re-anchor on the calendar date so DST shifts keep the wall-clock time
            next_day = (local_now + timedelta(days=1)).date()
            target = datetime(
                next_day.year,
                next_day.month,
                next_day.day,
                self.hour,
                self.minute,
                tzinfo=local_now.tzinfo,
            )
        return (target.astimezone(UTC) - now.astimezone(UTC)).total_seconds()


class PeriodicJob:
    """Named job body plus its schedule and single-flight guard."""

    def __init__(self, name: str, action: JobAction, schedule: Schedule) -> None:
        self.name = name
        self.schedule = schedule
        self._action = action
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run_once(
        self, logger: LoggerProtocol
    ) -> Result[int, DomainError] | None:
        """Run the job unless a previous run is still active.

        Returns:
            The job's Result, or None when the run was skipped.
        """
        if self._lock.locked():
            logger.warning("job_run_skipped", job=self.name, reason="previous_run_active")
            return None

        async with self._lock:
            started = time.monotonic()
            logger.debug("job_run_started", job=self.name)
            try:
                result = await self._action()
            except Exception as e:
                logger.error("job_run_crashed", job=self.name, error=e)
                return Failure(error=unexpected_error())

            duration_ms = round((time.monotonic() - started) * 1000, 1)
            if isinstance(result, Failure):
                logger.error(
                    "job_run_failed",
                    job=self.name,
                    error_code=result.error.code.value,
                    duration_ms=duration_ms,
                )
            else:
                logger.info(
                    "job_run_completed",
                    job=self.name,
                    processed=result.value,
                    duration_ms=duration_ms,
                )
            return result


class JobScheduler:
    """Drives a set of PeriodicJobs on the running event loop."""

    def __init__(
        self,
        jobs: Iterable[PeriodicJob],
        logger: LoggerProtocol,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._jobs = list(jobs)
        self._logger = logger
        self._now = now
        self._loops: list[asyncio.Task[None]] = []
        self._runs: set[asyncio.Task[Result[int, DomainError] | None]] = set()

    @property
    def jobs(self) -> list[PeriodicJob]:
        return list(self._jobs)

    @property
    def is_running(self) -> bool:
        return bool(self._loops)

    def start(self) -> None:
        """Start one loop task per job. Calling start twice is a no-op."""
        if self._loops:
            return
        for job in self._jobs:
            self._loops.append(asyncio.create_task(self._loop(job), name=f"job:{job.name}"))
        self._logger.info("job_scheduler_started", jobs=[job.name for job in self._jobs])

    async def stop(self) -> None:
        """Cancel the loops and any run still in flight."""
        tasks = [*self._loops, *self._runs]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loops.clear()
        self._runs.clear()
        self._logger.info("job_scheduler_stopped")

    async def _loop(self, job: PeriodicJob) -> None:
        while True:
            await asyncio.sleep(max(job.schedule.seconds_until_next(self._now()), 0.0))
            # The tick does not wait for the run, so a slow run meets the next
            # tick and is skipped there
            run = asyncio.create_task(job.run_once(self._logger))
            self._runs.add(run)
            run.add_done_callback(self._runs.discard)
