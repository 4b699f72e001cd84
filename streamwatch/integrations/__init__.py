"""
External integrations for StreamWatch.

This package contains clients and probes for the streaming platforms:
- youtube: Data API client, live page and content probes
- twitch: Helix client, app token provider and live probe
- http: shared aiohttp helpers
"""

from .http import create_session

__all__ = ['create_session']
