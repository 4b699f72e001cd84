"""
YouTube quota marker repository.

Holds the process-wide "blocked until" marker set when the YouTube Data API
reports quota exhaustion. The marker survives restarts through the store
and is mirrored in memory so hot-path checks avoid a store read.
"""

from typing import Callable, Optional

from streamwatch.core.interfaces import KeyValueStore
from streamwatch.utils import get_logger, now_ms, next_utc_midnight_ms, from_ms

logger = get_logger("quota")

QUOTA_KEY = "quota:youtube:blockedUntil"


class QuotaRepository:
    """
    YouTube quota block marker.

    Args:
        store: Backing key-value store
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self._blocked_until: Optional[int] = None
        self._loaded = False

    async def get_blocked_until(self) -> Optional[int]:
        """
        Get the active block boundary.

        Returns:
            Epoch milliseconds the block lasts until, or None if not blocked.
            An expired marker is deleted.
        """
        if not self._loaded:
            raw = await self.store.get(QUOTA_KEY)
            try:
                self._blocked_until = int(raw) if raw else None
            except ValueError:
                self._blocked_until = None
            self._loaded = True

        if self._blocked_until is not None and self.clock() >= self._blocked_until:
            self._blocked_until = None
            await self.store.delete(QUOTA_KEY)
            logger.info("YouTube quota block expired")
        return self._blocked_until

    async def is_blocked(self) -> bool:
        return await self.get_blocked_until() is not None

    async def block_until_next_midnight(self) -> int:
        """
        Block YouTube credentialed calls until the next UTC midnight.

        Logs once per block; repeated signals within a block only keep it.

        Returns:
            The block boundary in epoch milliseconds
        """
        already = await self.get_blocked_until()
        until = next_utc_midnight_ms(self.clock())
        if already is not None and already >= until:
            return already

        self._blocked_until = until
        await self.store.set(QUOTA_KEY, str(until))
        if already is None:
            logger.error(f"YouTube API quota exceeded; content checks paused until {from_ms(until).isoformat()}")
        return until
