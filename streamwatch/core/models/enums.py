"""
Core enums for StreamWatch.

This module defines enumerations for platforms, content kinds and the
tagged outcomes returned by probes and the identifier resolver.
"""

from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Supported streaming platforms."""
    YOUTUBE = "youtube"
    TWITCH = "twitch"

    @property
    def label(self) -> str:
        """Human-readable platform name used in notifications."""
        return "YouTube" if self is Platform.YOUTUBE else "Twitch"

    @classmethod
    def from_string(cls, value: str) -> Optional['Platform']:
        """Convert string to Platform enum (case-insensitive)."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class ContentKind(str, Enum):
    """Kind of the most recent YouTube upload."""
    VIDEO = "video"
    PREMIERE = "premiere"
    NONE = "none"


class ProbeOutcome(str, Enum):
    """
    Tagged result of a probe call.

    Every probe failure is treated as "not live" / "no content" by the poll
    cycle, but the cause stays observable through this tag.
    """
    LIVE = "live"
    NOT_LIVE = "not_live"
    CONTENT = "content"
    NO_CONTENT = "no_content"
    SKIPPED = "skipped"          # quota blocked or credentials missing
    ERROR = "error"


class ResolveStatus(str, Enum):
    """Outcome of resolving admin input to a platform channel."""
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"  # no platform had usable credentials
