"""
Identifier Resolver for StreamWatch.

Turns free-form admin input (a URL, a platform id, a name, optionally with
a "yt:"/"tw:" hint) into a canonical (platform, externalId, displayName).
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..interfaces import ChannelLookup, ProbeError, ProbeUnavailableError
from ..models import Platform, ResolvedChannel, ResolveResult, ResolveStatus
from streamwatch.utils import get_logger

logger = get_logger("resolver")

PREFIX_HINTS: Dict[str, Platform] = {
    "yt": Platform.YOUTUBE,
    "youtube": Platform.YOUTUBE,
    "tw": Platform.TWITCH,
    "twitch": Platform.TWITCH,
}

_HINT = re.compile(r"^(youtube|yt|twitch|tw):\s*", re.IGNORECASE)
_YOUTUBE_URL = re.compile(r"youtube\.com/channel/(UC[\w-]{22})", re.IGNORECASE)
_TWITCH_URL = re.compile(r"twitch\.tv/([a-zA-Z0-9_]+)", re.IGNORECASE)
_YOUTUBE_CHANNEL_ID = re.compile(r"^UC[\w-]{22}$")
_TWITCH_LOGIN = re.compile(r"^[a-zA-Z0-9_]{3,25}$")
_NUMERIC_ID = re.compile(r"[0-9]+")


@dataclass
class _Attempt:
    """Outcome of one platform lookup."""
    platform: Platform
    channel: Optional[ResolvedChannel] = None
    unavailable: bool = False


def split_hint(raw: str) -> Tuple[Optional[Platform], str]:
    """
    Strip a leading platform hint.

    Returns:
        (hinted platform or None, remaining text)
    """
    text = raw.strip()
    match = _HINT.match(text)
    if not match:
        return None, text
    return PREFIX_HINTS[match.group(1).lower()], text[match.end():].strip()


def match_platform_url(text: str) -> Optional[Tuple[Platform, str]]:
    """Extract (platform, id/login) from a known channel URL shape."""
    match = _YOUTUBE_URL.search(text)
    if match:
        return Platform.YOUTUBE, match.group(1)
    match = _TWITCH_URL.search(text)
    if match:
        return Platform.TWITCH, match.group(1)
    return None


class IdentifierResolver:
    """
    Resolves admin input against the configured platform lookups.

    Resolution order:
    1. strip a "yt:"/"youtube:"/"tw:"/"twitch:" hint
    2. a recognised channel URL decides the platform (overrides the hint)
    3. a known platform is the only one queried
    4. a UC... channel id goes to YouTube
    5. an all-digit input goes to Twitch by numeric id
    6. otherwise both are searched by name; a tie goes to Twitch when the
       input is a valid Twitch login, else to YouTube

    A platform without credentials is a non-match, never an error. The
    result is UNAVAILABLE when no queried platform could be asked at all.
    """

    def __init__(self, youtube: ChannelLookup, twitch: ChannelLookup):
        self.lookups: Dict[Platform, ChannelLookup] = {
            Platform.YOUTUBE: youtube,
            Platform.TWITCH: twitch,
        }

    async def resolve(self, raw_input: str) -> ResolveResult:
        """
        Resolve free-form input.

        Args:
            raw_input: Admin input

        Returns:
            ResolveResult (never raises for lookup failures)
        """
        hint, text = split_hint(raw_input or "")
        if not text:
            return ResolveResult(ResolveStatus.NOT_FOUND)

        platform = hint
        url_match = match_platform_url(text)
        if url_match:
            platform, text = url_match

        if platform is not None:
            attempts = [await self._lookup(platform, text)]
        elif _YOUTUBE_CHANNEL_ID.match(text):
            attempts = [await self._lookup(Platform.YOUTUBE, text, by_id=True)]
        elif _NUMERIC_ID.fullmatch(text):
            attempts = [await self._lookup(Platform.TWITCH, text, by_id=True)]
        else:
            attempts = list(await asyncio.gather(
                self._lookup(Platform.YOUTUBE, text),
                self._lookup(Platform.TWITCH, text),
            ))

        return self._decide(text, attempts)

    async def _lookup(self, platform: Platform, query: str, by_id: Optional[bool] = None) -> _Attempt:
        lookup = self.lookups[platform]
        if not lookup.available:
            return _Attempt(platform, unavailable=True)

        if by_id is None:
            if platform is Platform.YOUTUBE:
                by_id = bool(_YOUTUBE_CHANNEL_ID.match(query))
            else:
                by_id = bool(_NUMERIC_ID.fullmatch(query))

        try:
            if by_id:
                channel = await lookup.find_by_id(query)
            else:
                channel = await lookup.find_by_name(query)
        except ProbeUnavailableError as e:
            logger.info(f"{platform.label} lookup unavailable for '{query}': {e}")
            return _Attempt(platform, unavailable=True)
        except ProbeError as e:
            logger.warning(f"{platform.label} lookup failed for '{query}': {e}")
            return _Attempt(platform)
        return _Attempt(platform, channel=channel)

    @staticmethod
    def _decide(text: str, attempts: List[_Attempt]) -> ResolveResult:
        unavailable = [a.platform for a in attempts if a.unavailable]
        matches = {a.platform: a.channel for a in attempts if a.channel is not None}

        if len(matches) == 1:
            channel = next(iter(matches.values()))
            return ResolveResult(ResolveStatus.RESOLVED, channel, unavailable)
        if len(matches) > 1:
            preferred = Platform.TWITCH if _TWITCH_LOGIN.match(text) else Platform.YOUTUBE
            return ResolveResult(ResolveStatus.RESOLVED, matches[preferred], unavailable)

        if unavailable and len(unavailable) == len(attempts):
            return ResolveResult(ResolveStatus.UNAVAILABLE, unavailable=unavailable)
        return ResolveResult(ResolveStatus.NOT_FOUND, unavailable=unavailable)
