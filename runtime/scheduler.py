"""
Daily schedules for scheduled functions.

Understands the ``every day HH:MM`` form with a time zone, which is all the
cleanup job needs. The scheduler is driven from outside: call
``run_pending`` on a timer (the CLI does this in a loop) or ``run`` to fire
a job by hand.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from shared.clock import Clock, utc_now

logger = logging.getLogger("scheduler")

_DAILY = re.compile(r"^every day (\d{1,2}):(\d{2})$")


def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


@dataclass(frozen=True)
class DailySchedule:
    """Fires once a day at ``hour:minute`` local time in ``tz``."""
    hour: int
    minute: int
    tz: tzinfo = timezone.utc

    @classmethod
    def parse(cls, expression: str, time_zone: str = "UTC") -> "DailySchedule":
        """
        Parse an ``every day HH:MM`` expression.

        Raises:
            ValueError: On any other form or an out-of-range time
        """
        match = _DAILY.match(expression.strip())
        if not match:
            raise ValueError(f"Unsupported schedule: {expression!r}")
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise ValueError(f"Invalid time of day in schedule: {expression!r}")
        return cls(hour=hour, minute=minute, tz=_zone(time_zone))

    def next_run(self, after: datetime) -> datetime:
        """First firing time strictly after ``after``, in UTC."""
        local = after.astimezone(self.tz)
        candidate = local.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= local:
            candidate = (candidate + timedelta(days=1)).replace(hour=self.hour, minute=self.minute)
        return candidate.astimezone(timezone.utc)

    def __str__(self) -> str:
        return f"every day {self.hour:02d}:{self.minute:02d} ({self.tz})"


@dataclass
class ScheduleContext:
    """Passed to a scheduled function on each run."""
    job_name: str
    scheduled_time: datetime


ScheduledHandler = Callable[[ScheduleContext], Any]


@dataclass
class ScheduledJob:
    name: str
    schedule: DailySchedule
    handler: ScheduledHandler
    next_run: Optional[datetime] = None
    last_result: Any = field(default=None, repr=False)


class Scheduler:
    """Keeps track of scheduled jobs and runs the ones that are due."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now
        self._jobs: dict[str, ScheduledJob] = {}

    def register(self, name: str, schedule: DailySchedule, handler: ScheduledHandler) -> ScheduledJob:
        job = ScheduledJob(name=name, schedule=schedule, handler=handler)
        job.next_run = schedule.next_run(self.clock())
        self._jobs[name] = job
        logger.info(f"Scheduled {name}: {schedule}, next run {job.next_run.isoformat()}")
        return job

    @property
    def jobs(self) -> list[ScheduledJob]:
        return list(self._jobs.values())

    def get(self, name: str) -> Optional[ScheduledJob]:
        return self._jobs.get(name)

    def run(self, name: str) -> Any:
        """
        Run a job now, regardless of its schedule.

        Raises:
            KeyError: If no job is registered under ``name``
        """
        job = self._jobs[name]
        return self._execute(job, self.clock())

    def run_pending(self, now: Optional[datetime] = None) -> dict[str, Any]:
        """Run every job whose next run time has passed; returns results by job name."""
        now = now or self.clock()
        results = {}
        for job in self._jobs.values():
            if job.next_run is not None and job.next_run <= now:
                results[job.name] = self._execute(job, job.next_run)
                job.next_run = job.schedule.next_run(now)
        return results

    def run_forever(self, poll_seconds: float = 30.0, iterations: Optional[int] = None) -> None:
        """Poll ``run_pending``; stops after ``iterations`` polls if given."""
        count = 0
        while iterations is None or count < iterations:
            self.run_pending()
            count += 1
            if iterations is None or count < iterations:
                time.sleep(poll_seconds)

    def _execute(self, job: ScheduledJob, scheduled_time: datetime) -> Any:
        logger.info(f"Running scheduled job {job.name}")
        job.last_result = job.handler(ScheduleContext(job_name=job.name, scheduled_time=scheduled_time))
        logger.info(f"Scheduled job {job.name} finished: {job.last_result}")
        return job.last_result
