"""Cron scheduler: polls registered jobs and fires the ones that are due.

The scheduler owns the polling loop and the job registry. Jobs live in memory
only: they are rebuilt from configuration every time the process starts.
"""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

from croniter import croniter

logger = logging.getLogger(__name__)

JobAction = Callable[[], Awaitable[Any]]
StartupHook = Callable[[], Awaitable[Any] | Any]


def is_valid_cron(expression: str) -> bool:
    """Check a cron expression.

    Accepts standard 5-field expressions and 6-field expressions with the
    seconds field first (``"0 0 8 * * *"`` is 08:00:00 every day).
    """
    if not expression or not expression.strip():
        return False
    try:
        croniter(expression, second_at_beginning=True)
    except (ValueError, KeyError):
        return False
    return True


def next_fire_time(expression: str, base: datetime) -> datetime:
    """Get the first occurrence of ``expression`` strictly after ``base``.

    ``base`` must be timezone-aware; the result is in the same timezone.
    """
    return croniter(expression, base, second_at_beginning=True).get_next(datetime)


@dataclass
class ScheduledJob:
    """A registered cron job."""

    name: str
    cron: str
    action: JobAction
    kind: str = "job"
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    next_run: datetime | None = None
    last_run: datetime | None = None
    run_count: int = 0

    def is_due(self, now: datetime) -> bool:
        return self.next_run is not None and now >= self.next_run


class CronScheduler:
    """Fires registered jobs on their cron schedule.

    Cron expressions are evaluated in the scheduler's timezone, so
    ``"0 0 8 * * *"`` means 08:00 local time regardless of DST.

    Example:
        scheduler = CronScheduler(timezone="Asia/Shanghai")

        async def greet():
            ...

        scheduler.add_job("greet", "0 0 8 * * *", greet)
        await scheduler.start()
    """

    def __init__(self, timezone: str = "UTC", poll_interval: float = 1.0):
        self._timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._poll_interval = poll_interval
        self._jobs: dict[str, ScheduledJob] = {}
        self._startup_hooks: list[StartupHook] = []
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def timezone(self) -> str:
        return self._timezone

    @property
    def running(self) -> bool:
        return self._running

    def now(self) -> datetime:
        return datetime.now(UTC).astimezone(self._tz)

    def add_job(
        self,
        name: str,
        cron: str,
        action: JobAction,
        *,
        kind: str = "job",
        now: datetime | None = None,
    ) -> ScheduledJob:
        """Register a job.

        Raises:
            ValueError: If the cron expression is invalid.
        """
        if not is_valid_cron(cron):
            raise ValueError(f"Invalid cron expression: {cron!r}")

        base = (now or self.now()).astimezone(self._tz)
        job = ScheduledJob(name=name, cron=cron, action=action, kind=kind)
        job.next_run = next_fire_time(cron, base)
        self._jobs[job.id] = job
        logger.debug(
            f"Registered job {job.id} ({kind}) '{name}' cron='{cron}', "
            f"next_run={job.next_run.isoformat()}"
        )
        return job

    def remove_job(self, job_id: str) -> bool:
        return self._jobs.pop(job_id, None) is not None

    def list_jobs(self) -> list[ScheduledJob]:
        return list(self._jobs.values())

    def on_startup(self, hook: StartupHook) -> StartupHook:
        """Decorator to register a hook that runs once when the scheduler starts."""
        self._startup_hooks.append(hook)
        return hook

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        for hook in self._startup_hooks:
            result = hook()
            if asyncio.iscoroutine(result):
                await result
        logger.info(
            "cron_scheduler_started",
            extra={"schedule.timezone": self._timezone, "jobs": len(self._jobs)},
        )
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.check()
            except Exception as e:
                logger.error("cron_check_error", extra={"error.message": str(e)})
            await asyncio.sleep(self._poll_interval)

    async def check(self, now: datetime | None = None) -> list[ScheduledJob]:
        """Fire every due job once and schedule its next run.

        A job that fell behind (process suspended, slow handler) fires once and
        is rescheduled from ``now``; missed occurrences are not replayed.

        Returns:
            The jobs that fired.
        """
        current = (now or self.now()).astimezone(self._tz)
        due = [job for job in self._jobs.values() if job.is_due(current)]
        for job in due:
            logger.info(
                "cron_job_triggered",
                extra={"schedule.job_id": job.id, "schedule.kind": job.kind},
            )
            try:
                await job.action()
            except Exception:
                logger.exception(f"Cron job '{job.name}' ({job.id}) failed")

            job.last_run = current
            job.run_count += 1
            job.next_run = next_fire_time(job.cron, current)
        return due
