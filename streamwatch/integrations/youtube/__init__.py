"""
YouTube integration.

- client: Data API calls and the public live page fetch
- probes: live/content probes and their response heuristics
"""

from .client import YouTubeClient, YouTubeQuotaError
from .probes import (
    YouTubeLiveProbe,
    YouTubeContentProbe,
    parse_live_page,
    select_latest_content,
)

__all__ = [
    'YouTubeClient',
    'YouTubeQuotaError',
    'YouTubeLiveProbe',
    'YouTubeContentProbe',
    'parse_live_page',
    'select_latest_content',
]
