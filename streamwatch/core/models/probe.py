"""
Probe result models for StreamWatch.

Probes never raise: failures come back as results tagged
ProbeOutcome.ERROR (or SKIPPED) with a reason, and read as not-live /
no-content to callers that only look at is_live / kind.
"""

from dataclasses import dataclass
from typing import Optional

from .enums import ContentKind, ProbeOutcome


@dataclass(frozen=True)
class LiveStatus:
    """
    Result of a live probe.

    Attributes:
        outcome: LIVE, NOT_LIVE, SKIPPED or ERROR
        url: Watch URL of the live session
        title: Stream title
        stream_id: Platform id of the session (YouTube video id / Twitch stream id)
        reason: Why the probe was skipped or failed
    """
    outcome: ProbeOutcome
    url: Optional[str] = None
    title: Optional[str] = None
    stream_id: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return self.outcome is ProbeOutcome.LIVE

    @classmethod
    def live(cls, stream_id: str, url: str, title: Optional[str] = None) -> 'LiveStatus':
        return cls(ProbeOutcome.LIVE, url=url, title=title, stream_id=stream_id)

    @classmethod
    def not_live(cls) -> 'LiveStatus':
        return cls(ProbeOutcome.NOT_LIVE)

    @classmethod
    def error(cls, reason: str) -> 'LiveStatus':
        return cls(ProbeOutcome.ERROR, reason=reason)

    @classmethod
    def skipped(cls, reason: str) -> 'LiveStatus':
        return cls(ProbeOutcome.SKIPPED, reason=reason)


@dataclass(frozen=True)
class ContentStatus:
    """
    Result of a YouTube latest-content probe.

    Attributes:
        outcome: CONTENT, NO_CONTENT, SKIPPED or ERROR
        kind: VIDEO, PREMIERE or NONE
        video_id: Id of the selected upload
        url: Watch URL
        title: Upload title
        scheduled_start_at: Premiere start time in epoch milliseconds
        reason: Why the probe was skipped or failed
    """
    outcome: ProbeOutcome
    kind: ContentKind = ContentKind.NONE
    video_id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    scheduled_start_at: Optional[int] = None
    reason: Optional[str] = None

    @property
    def ran(self) -> bool:
        """Whether the probe actually ran (it was not skipped)."""
        return self.outcome is not ProbeOutcome.SKIPPED

    @classmethod
    def none(cls) -> 'ContentStatus':
        return cls(ProbeOutcome.NO_CONTENT)

    @classmethod
    def error(cls, reason: str) -> 'ContentStatus':
        return cls(ProbeOutcome.ERROR, reason=reason)

    @classmethod
    def skipped(cls, reason: str) -> 'ContentStatus':
        return cls(ProbeOutcome.SKIPPED, reason=reason)
