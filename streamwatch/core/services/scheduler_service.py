"""
Stream check scheduling for StreamWatch.

Recurring polling on top of a one-shot scheduler: every fire (or missed
signal) runs one poll cycle, and the job is always re-armed one base
interval ahead afterwards, whatever the cycle did.
"""

import asyncio
from typing import Callable, Optional

from ..interfaces import OneShotScheduler
from .poll_service import CycleReport, PollCycleEngine
from streamwatch.utils import (
    get_logger,
    now_ms,
    from_ms,
    minutes_ms,
    POLL_INTERVAL_MINUTES,
    STREAM_JOB_TAG,
    STREAM_JOB_RESOURCE_ID,
)

logger = get_logger("scheduler")


class StreamCheckScheduler:
    """
    Adapter between the one-shot scheduler and the poll engine.

    Args:
        scheduler: One-shot "run at time T" primitive
        engine: Poll cycle engine
        clock: Returns the current time in epoch milliseconds
        interval_minutes: Delay between a finished cycle and the next one
    """

    def __init__(
        self,
        scheduler: OneShotScheduler,
        engine: PollCycleEngine,
        clock: Callable[[], int] = now_ms,
        interval_minutes: float = POLL_INTERVAL_MINUTES,
    ):
        self.scheduler = scheduler
        self.engine = engine
        self.clock = clock
        self.interval_ms = minutes_ms(interval_minutes)
        self._lock = asyncio.Lock()
        self._attached = False

    def attach(self):
        """Subscribe to the scheduler's fire and missed signals (idempotent)."""
        if self._attached:
            return
        self.scheduler.on_fire(self._on_fire)
        self.scheduler.on_missed(self._on_missed)
        self._attached = True

    async def arm(self, delay_ms: Optional[int] = None):
        """Schedule the next stream check delay_ms from now (default: one interval)."""
        if delay_ms is None:
            delay_ms = self.interval_ms
        start = from_ms(self.clock() + delay_ms)
        await self.scheduler.create(STREAM_JOB_RESOURCE_ID, STREAM_JOB_TAG, start)
        logger.debug(f"Next stream check at {start.isoformat()}")

    async def run_now(self) -> Optional[CycleReport]:
        """
        Run one poll cycle, then re-arm unconditionally.

        Returns:
            CycleReport, or None if the cycle failed
        """
        async with self._lock:
            try:
                return await self.engine.run_cycle()
            except Exception:
                logger.exception("Stream check cycle failed")
                return None
            finally:
                try:
                    await self.arm()
                except Exception:
                    logger.exception("Failed to re-arm stream check")

    async def _on_fire(self, tag: str):
        if tag != STREAM_JOB_TAG:
            return
        await self.run_now()

    async def _on_missed(self, tag: str):
        if tag != STREAM_JOB_TAG:
            return
        logger.info("Stream check was missed; running catch-up cycle")
        await self.run_now()
