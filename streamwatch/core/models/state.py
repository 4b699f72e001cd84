"""
Per-channel polling state for StreamWatch.

One ChannelState exists per (guild, platform, externalId). It is created
lazily on first poll and carried across cycles; all timestamps are UNIX
epoch milliseconds.
"""

from dataclasses import dataclass, fields, replace
from typing import Optional


@dataclass
class ChannelState:
    """
    Persisted state machine for one tracked channel in one guild.

    Attributes:
        last_live: Whether the last live probe saw the channel live
        last_stream_id: Stream/video id of the last observed live session
        last_video_id: Id of the last announced YouTube video
        last_premiere_id: Id of the last announced YouTube premiere
        last_content_check_at: When the YouTube content probe last ran
        pending_scheduled_start_at: Start time of a known upcoming premiere
        next_live_check_at: Earliest time the live probe may run again
    """
    last_live: bool = False
    last_stream_id: Optional[str] = None
    last_video_id: Optional[str] = None
    last_premiere_id: Optional[str] = None
    last_content_check_at: Optional[int] = None
    pending_scheduled_start_at: Optional[int] = None
    next_live_check_at: Optional[int] = None

    _KEYS = {
        'last_live': 'lastLive',
        'last_stream_id': 'lastStreamId',
        'last_video_id': 'lastVideoId',
        'last_premiere_id': 'lastPremiereId',
        'last_content_check_at': 'lastContentCheckAt',
        'pending_scheduled_start_at': 'pendingScheduledStartAt',
        'next_live_check_at': 'nextLiveCheckAt',
    }

    def copy(self) -> 'ChannelState':
        return replace(self)

    def to_dict(self) -> dict:
        """Convert state to its stored dictionary, omitting unset fields."""
        data = {'lastLive': self.last_live}
        for f in fields(self):
            if f.name == 'last_live':
                continue
            value = getattr(self, f.name)
            if value is not None:
                data[self._KEYS[f.name]] = value
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'ChannelState':
        """Create state from a stored dictionary (missing keys take defaults)."""
        if not data:
            return cls()
        kwargs = {
            name: data.get(key)
            for name, key in cls._KEYS.items()
            if data.get(key) is not None
        }
        kwargs['last_live'] = bool(data.get('lastLive', False))
        return cls(**kwargs)
