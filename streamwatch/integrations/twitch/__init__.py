"""
Twitch integration.

- client: app token provider and Helix calls
- probes: live probe
"""

from .client import TwitchClient, TwitchTokenProvider
from .probes import TwitchLiveProbe

__all__ = [
    'TwitchClient',
    'TwitchTokenProvider',
    'TwitchLiveProbe',
]
