"""
YouTube Data API v3 client.

Credentialed calls need an API key and are refused while the quota
repository holds an active block. A response body reporting
"quotaExceeded" sets the block until the next UTC midnight.
"""

from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from streamwatch.core.interfaces import (
    ChannelLookup,
    ProbeConnectionError,
    ProbeError,
    ProbeUnavailableError,
)
from streamwatch.core.models import Platform, ResolvedChannel
from streamwatch.core.repositories import QuotaRepository
from streamwatch.integrations.http import fetch_json, fetch_page
from streamwatch.utils import get_logger

logger = get_logger("youtube")

API_BASE = "https://www.googleapis.com/youtube/v3"
LIVE_PAGE_URL = "https://www.youtube.com/channel/{channel_id}/live"


class YouTubeQuotaError(ProbeUnavailableError):
    """Raised when the Data API quota is exhausted or a block is active."""
    pass


class YouTubeClient(ChannelLookup):
    """
    Thin async client for the endpoints the bot uses.

    Args:
        session: Shared aiohttp session
        api_key: Data API key (None disables credentialed calls)
        quota: Process-wide quota block marker
    """

    platform = Platform.YOUTUBE

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str],
        quota: QuotaRepository,
    ):
        self.session = session
        self.api_key = api_key
        self.quota = quota

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def api_get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a Data API endpoint.

        Args:
            endpoint: Endpoint name such as "channels"
            params: Query parameters (the key is added here)

        Returns:
            Decoded JSON object

        Raises:
            YouTubeQuotaError: If quota is blocked or was just exhausted
            ProbeError: On any other failure
        """
        if not self.api_key:
            raise ProbeUnavailableError("YouTube API key is not configured")
        if await self.quota.is_blocked():
            raise YouTubeQuotaError("YouTube API quota is blocked")

        try:
            data = await fetch_json(
                self.session, f"{API_BASE}/{endpoint}", params={**params, "key": self.api_key}
            )
        except ProbeConnectionError as e:
            if "quotaExceeded" in e.body:
                await self.quota.block_until_next_midnight()
                raise YouTubeQuotaError("YouTube API quota exceeded") from e
            logger.warning(f"YouTube API error on {endpoint}: {e} {e.body[:200]}")
            raise
        if not isinstance(data, dict):
            raise ProbeError(f"Unexpected YouTube {endpoint} response")
        return data

    # ==================== Lookups ====================

    async def find_by_id(self, channel_id: str) -> Optional[ResolvedChannel]:
        """Look up a channel by its UC... id."""
        data = await self.api_get("channels", {"part": "snippet", "id": channel_id})
        items = data.get("items") or []
        if not items:
            return None
        item = items[0]
        title = (item.get("snippet") or {}).get("title") or channel_id
        return ResolvedChannel(Platform.YOUTUBE, item.get("id") or channel_id, title)

    async def find_by_name(self, query: str) -> Optional[ResolvedChannel]:
        """Find the best-matching channel for a free-text name."""
        data = await self.api_get("search", {
            "part": "snippet",
            "type": "channel",
            "maxResults": 1,
            "q": query,
        })
        items = data.get("items") or []
        if not items:
            return None
        item = items[0]
        channel_id = (item.get("id") or {}).get("channelId")
        if not channel_id:
            return None
        snippet = item.get("snippet") or {}
        title = snippet.get("channelTitle") or snippet.get("title") or query
        return ResolvedChannel(Platform.YOUTUBE, channel_id, title)

    # ==================== Content ====================

    async def get_uploads_playlist_id(self, channel_id: str) -> Optional[str]:
        data = await self.api_get("channels", {"part": "contentDetails", "id": channel_id})
        items = data.get("items") or []
        if not items:
            return None
        related = (items[0].get("contentDetails") or {}).get("relatedPlaylists") or {}
        return related.get("uploads")

    async def get_playlist_video_ids(self, playlist_id: str, max_results: int = 5) -> List[str]:
        data = await self.api_get("playlistItems", {
            "part": "contentDetails",
            "playlistId": playlist_id,
            "maxResults": max_results,
        })
        ids = []
        for item in data.get("items") or []:
            video_id = (item.get("contentDetails") or {}).get("videoId")
            if video_id:
                ids.append(video_id)
        return ids

    async def get_videos(self, video_ids: List[str]) -> List[Dict[str, Any]]:
        """Get snippet and live streaming details for videos, in API order."""
        if not video_ids:
            return []
        data = await self.api_get("videos", {
            "part": "snippet,liveStreamingDetails",
            "id": ",".join(video_ids),
        })
        return list(data.get("items") or [])

    # ==================== Public pages ====================

    async def fetch_live_page(self, channel_id: str) -> Tuple[str, str]:
        """
        Fetch the public "channel live" page (no credentials, no quota).

        Returns:
            (final_url, html) after redirects
        """
        return await fetch_page(self.session, LIVE_PAGE_URL.format(channel_id=channel_id))
