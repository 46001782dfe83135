"""
Interval timer driving the orchestrator.

Each tick starts the cycle as its own task and returns at once, so a cycle
that overruns the interval is still in flight when the next tick fires. That
tick then hits the orchestrator's ``is_running`` guard and is dropped.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

import structlog
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .models import CycleReport

logger = structlog.get_logger(__name__)

CycleFn = Callable[[], Awaitable[CycleReport]]

JOB_ID = "dispatch_cycle"


class CycleScheduler:
    """Fires ``run_cycle`` after a start delay and then every interval."""

    def __init__(
        self,
        run_cycle: CycleFn,
        interval_seconds: float = 5400.0,
        start_delay_seconds: float = 10.0
    ) -> None:
        self.run_cycle = run_cycle
        self.interval_seconds = interval_seconds
        self.start_delay_seconds = start_delay_seconds
        self.tick_count = 0
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._job: Optional[Job] = None
        self._cycle_tasks: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> Job:
        """Start the timer on the running loop."""
        if self.running:
            return self._job

        first_run = datetime.now(timezone.utc) + timedelta(seconds=self.start_delay_seconds)
        self._scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop(), timezone=timezone.utc)
        self._job = self._scheduler.add_job(
            self._tick,
            IntervalTrigger(seconds=self.interval_seconds, start_date=first_run, timezone=timezone.utc),
            id=JOB_ID,
            name="Signal dispatch cycle",
            next_run_time=first_run,
            coalesce=True,
            misfire_grace_time=None,
        )
        self._scheduler.start()

        logger.info(
            "Scheduler started",
            interval_seconds=self.interval_seconds,
            start_delay_seconds=self.start_delay_seconds
        )
        return self._job

    async def stop(self) -> None:
        """Shut the timer down and cancel any cycle still in flight."""
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._job = None

        tasks = list(self._cycle_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Scheduler stopped")

    def trigger(self) -> asyncio.Task:
        """Fire one tick now without waiting for it."""
        self.tick_count += 1
        task = asyncio.get_running_loop().create_task(self.run_cycle())
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_done)
        return task

    async def _tick(self) -> None:
        self.trigger()

    def _cycle_done(self, task: asyncio.Task) -> None:
        self._cycle_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Cycle task failed", error=str(error))
            return
        report = task.result()
        logger.info("Cycle ended", status=report.status.value, dispatched=len(report.dispatched))
