"""Timer and manual triggers for sync runs, with at most one run in flight."""

import asyncio
import enum
from typing import Awaitable, Callable, Optional

import structlog

from .config import Config
from .models import SyncRun
from .sync import run_sync

logger = structlog.get_logger(__name__)


class SchedulerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class SyncScheduler:
    """Drives sync runs from a repeating timer and from manual triggers.

    A trigger that arrives while a run is in progress does not start a
    second run. It is remembered instead, and however many such triggers
    arrive, exactly one follow-up run starts when the current one ends.

    Args:
        config_provider: Returns the current configuration. Called once at
            the start of every run; the run keeps that snapshot throughout.
        runner: Coroutine function that performs one run.
        interval: Seconds between timer-driven runs.
    """

    def __init__(
        self,
        config_provider: Callable[[], Config],
        runner: Callable[[Config], Awaitable[SyncRun]] = run_sync,
        interval: float = 3600.0,
    ):
        self._config_provider = config_provider
        self._runner = runner
        self.interval = interval
        self._state = SchedulerState.IDLE
        self._pending = False
        self._run_task: Optional[asyncio.Task] = None
        self._timer_task: Optional[asyncio.Task] = None
        self.runs_completed = 0
        self.last_run: Optional[SyncRun] = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._pending

    def trigger(self, source: str = "manual") -> bool:
        """Request a sync run.

        Returns True if a run was started, False if one is already running
        (in which case a single follow-up run is queued).
        """
        if self._state is SchedulerState.RUNNING:
            if not self._pending:
                logger.info("sync_trigger_queued", source=source)
            self._pending = True
            return False

        self._state = SchedulerState.RUNNING
        self._run_task = asyncio.get_running_loop().create_task(self._drain(source))
        return True

    async def _drain(self, source: str) -> None:
        try:
            while True:
                self._pending = False
                await self._run_once(source)
                if not self._pending:
                    break
                source = "queued"
        finally:
            self._state = SchedulerState.IDLE
            self._pending = False
            self._run_task = None

    async def _run_once(self, source: str) -> None:
        logger.info("sync_run_started", source=source)
        try:
            config = self._config_provider()
            self.last_run = await self._runner(config)
        except Exception:
            logger.exception("sync_run_crashed", source=source)
        finally:
            self.runs_completed += 1

    async def wait_idle(self) -> None:
        """Wait until no run is in progress or queued."""
        while self._run_task is not None:
            await asyncio.shield(self._run_task)

    def start(self, run_immediately: bool = True) -> None:
        """Start the interval timer, optionally kicking off a run right away."""
        if self._timer_task is not None:
            return
        if run_immediately:
            self.trigger("startup")
        self._timer_task = asyncio.get_running_loop().create_task(self._tick())
        logger.info("sync_timer_started", interval=self.interval)

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.trigger("timer")

    async def stop(self, wait: bool = False) -> None:
        """Cancel the timer. An in-flight run is left to finish on its own."""
        if self._timer_task is not None:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None
            logger.info("sync_timer_stopped")
        if wait:
            await self.wait_idle()
