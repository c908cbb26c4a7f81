"""
Periodic Overdue Sweep Use Case.

Runs the lifecycle service's overdue sweep immediately and then on a fixed
interval until stopped. A failing sweep is logged and the loop keeps going.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime

from src.application.dto.results import SweepReport
from src.application.use_cases.reminder_lifecycle import ReminderLifecycleService
from src.config import get_logger

logger = get_logger(__name__)


@dataclass
class SweepRunnerStatus:
    """Snapshot of the runner's state."""

    running: bool
    interval_seconds: float
    runs: int
    total_transitioned: int
    last_run_at: datetime | None = None
    last_error: str | None = None


class OverdueSweepRunner:
    """Background asyncio task driving ReminderLifecycleService.sweep."""

    def __init__(
        self,
        service: ReminderLifecycleService,
        interval_seconds: float = 60.0,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = service
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._runs = 0
        self._total_transitioned = 0
        self._last_run_at: datetime | None = None
        self._last_error: str | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        """Start the loop on the running event loop. Idempotent."""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self._run(), name="overdue-sweep")
        logger.info("overdue_sweep_started", interval_seconds=self._interval)
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        logger.info("overdue_sweep_stopped", runs=self._runs)

    async def run_once(self) -> SweepReport:
        """Run a single sweep and record its outcome."""
        report = await self._service.sweep()
        self._runs += 1
        self._last_run_at = datetime.now()
        self._total_transitioned += report.transitioned
        self._last_error = None if report.success else report.message
        if report.transitioned:
            logger.info("overdue_sweep_completed", transitioned=report.transitioned)
        return report

    def status(self) -> SweepRunnerStatus:
        return SweepRunnerStatus(
            running=self.is_running,
            interval_seconds=self._interval,
            runs=self._runs,
            total_transitioned=self._total_transitioned,
            last_run_at=self._last_run_at,
            last_error=self._last_error,
        )

    async def _run(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._last_error = str(e)
                logger.warning("overdue_sweep_failed", error=str(e), exc_info=True)
            await asyncio.sleep(self._interval)
