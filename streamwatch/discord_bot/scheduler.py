"""
One-shot job scheduler on the bot's event loop.

Pending jobs are persisted under "jobs:<resourceId>" so that a restart can
tell an overdue job (reported as missed) from one still in the future
(re-armed).
"""

import asyncio
from datetime import datetime
from typing import Callable, Dict, List

from streamwatch.core.interfaces import JobCallback, KeyValueStore, OneShotScheduler, StoreError
from streamwatch.utils import get_logger, loads_or, dumps, now_ms, to_ms

logger = get_logger("jobs")

JOBS_PREFIX = "jobs:"


class AsyncioJobScheduler(OneShotScheduler):
    """
    OneShotScheduler backed by asyncio tasks.

    Args:
        store: Key-value store for pending jobs
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self._tasks: Dict[str, asyncio.Task] = {}
        self._fire_callbacks: List[JobCallback] = []
        self._missed_callbacks: List[JobCallback] = []

    def on_fire(self, callback: JobCallback) -> None:
        self._fire_callbacks.append(callback)

    def on_missed(self, callback: JobCallback) -> None:
        self._missed_callbacks.append(callback)

    async def create(self, resource_id: str, tag: str, start: datetime) -> None:
        start_ms = to_ms(start)
        try:
            await self.store.set(JOBS_PREFIX + resource_id, dumps({"tag": tag, "start": start_ms}))
        except StoreError:
            # The task below still runs; only restart recovery is lost
            logger.warning(f"Could not persist job {resource_id}", exc_info=True)
        self._arm(resource_id, tag, start_ms)

    async def start(self) -> List[str]:
        """
        Restore persisted jobs.

        Overdue jobs are removed and reported to the missed listeners;
        future jobs are re-armed.

        Returns:
            Resource ids of the jobs that are pending or were caught up
        """
        restored = []
        for key in await self.store.keys(JOBS_PREFIX):
            resource_id = key[len(JOBS_PREFIX):]
            job = loads_or(await self.store.get(key), None)
            if not isinstance(job, dict) or "tag" not in job:
                await self.store.delete(key)
                continue

            restored.append(resource_id)
            start_ms = int(job.get("start") or 0)
            if start_ms <= self.clock():
                logger.info(f"Job {resource_id} ({job['tag']}) was missed")
                await self.store.delete(key)
                await self._dispatch(self._missed_callbacks, job["tag"])
            else:
                self._arm(resource_id, job["tag"], start_ms)
        return restored

    async def stop(self):
        """Cancel all pending tasks (persisted jobs are kept)."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def pending(self) -> List[str]:
        return list(self._tasks)

    def _arm(self, resource_id: str, tag: str, start_ms: int):
        existing = self._tasks.pop(resource_id, None)
        if existing is not None and existing is not asyncio.current_task():
            existing.cancel()
        self._tasks[resource_id] = asyncio.create_task(
            self._run(resource_id, tag, start_ms), name=f"job:{resource_id}"
        )

    async def _run(self, resource_id: str, tag: str, start_ms: int):
        delay = max(0, start_ms - self.clock()) / 1000
        await asyncio.sleep(delay)

        if self._tasks.get(resource_id) is asyncio.current_task():
            del self._tasks[resource_id]
        try:
            await self.store.delete(JOBS_PREFIX + resource_id)
        except StoreError:
            logger.warning(f"Could not remove persisted job {resource_id}", exc_info=True)
        await self._dispatch(self._fire_callbacks, tag)

    @staticmethod
    async def _dispatch(callbacks: List[JobCallback], tag: str):
        for callback in callbacks:
            try:
                await callback(tag)
            except Exception:
                logger.exception(f"Job listener failed for {tag}")
