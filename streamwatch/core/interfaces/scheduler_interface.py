"""
Abstract one-shot scheduler interface for StreamWatch.

The scheduler only knows how to run a job once at a given time. Recurring
polling is built on top of it by re-arming after every run.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable

JobCallback = Callable[[str], Awaitable[None]]


class OneShotScheduler(ABC):
    """
    Runs tagged jobs once at a requested time.

    Listeners receive the job tag. A job whose start time had already
    passed when the scheduler (re)started is reported as missed instead of fired.
    """

    @abstractmethod
    async def create(self, resource_id: str, tag: str, start: datetime) -> None:
        """
        Schedule (or replace) the job identified by resource_id.

        Args:
            resource_id: Stable job identity; a new create replaces the pending job
            tag: Tag delivered to listeners when the job fires
            start: When to fire (aware datetime)
        """
        pass

    @abstractmethod
    def on_fire(self, callback: JobCallback) -> None:
        """Register a listener for fired jobs."""
        pass

    @abstractmethod
    def on_missed(self, callback: JobCallback) -> None:
        """Register a listener for overdue jobs."""
        pass
