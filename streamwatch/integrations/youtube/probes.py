"""
YouTube live and latest-content probes.

Live detection scrapes the public live page and never spends quota.
Content detection uses three Data API calls (uploads playlist, latest
items, item details) and is skipped while the quota block is active.
"""

import html as html_lib
import re
from typing import Any, Dict, List

from streamwatch.core.interfaces import ContentProbe, LiveProbe, ProbeError
from streamwatch.core.models import (
    ContentKind,
    ContentStatus,
    LiveStatus,
    Platform,
    ProbeOutcome,
)
from streamwatch.utils import get_logger, parse_iso_ms
from .client import YouTubeClient, YouTubeQuotaError

logger = get_logger("youtube")

_URL_VIDEO_ID = re.compile(r"[?&]v=([\w-]{11})")
_HTML_VIDEO_ID = re.compile(r'"videoId":"([\w-]{11})"')
_OG_TITLE = re.compile(r'<meta property="og:title" content="([^"]+)"')
_TITLE = re.compile(r"<title>(.*?)</title>", re.DOTALL)


def watch_url(video_id: str) -> str:
    return f"https://youtube.com/watch?v={video_id}"


def parse_live_page(final_url: str, page: str) -> LiveStatus:
    """
    Decide liveness from the public live page.

    The channel is live when the page says "isLiveNow":true, or shows the
    LIVE_NOW badge without an explicit "isLiveNow":false. A video id must
    be present in the final URL or the page body.

    Args:
        final_url: URL after redirects
        page: Page HTML

    Returns:
        LIVE or NOT_LIVE status
    """
    match = _URL_VIDEO_ID.search(final_url) or _HTML_VIDEO_ID.search(page)
    video_id = match.group(1) if match else None

    live_now = '"isLiveNow":true' in page or (
        'BADGE_STYLE_TYPE_LIVE_NOW' in page and '"isLiveNow":false' not in page
    )
    if not video_id or not live_now:
        return LiveStatus.not_live()

    title_match = _OG_TITLE.search(page) or _TITLE.search(page)
    title = html_lib.unescape(title_match.group(1)).strip() if title_match else None
    return LiveStatus.live(video_id, watch_url(video_id), title or None)


def select_latest_content(videos: List[Dict[str, Any]]) -> ContentStatus:
    """
    Pick the latest non-live upload.

    The first item whose liveBroadcastContent is not "live" decides:
    "upcoming" is a premiere (with its scheduled start), anything else a video.

    Args:
        videos: Video resources in upload order (newest first)

    Returns:
        CONTENT status, or NO_CONTENT when every item is live or the list is empty
    """
    for video in videos:
        snippet = video.get("snippet") or {}
        broadcast = snippet.get("liveBroadcastContent") or "none"
        if broadcast == "live":
            continue
        video_id = video.get("id")
        if not video_id:
            continue

        if broadcast == "upcoming":
            details = video.get("liveStreamingDetails") or {}
            return ContentStatus(
                ProbeOutcome.CONTENT,
                kind=ContentKind.PREMIERE,
                video_id=video_id,
                url=watch_url(video_id),
                title=snippet.get("title"),
                scheduled_start_at=parse_iso_ms(details.get("scheduledStartTime")),
            )
        return ContentStatus(
            ProbeOutcome.CONTENT,
            kind=ContentKind.VIDEO,
            video_id=video_id,
            url=watch_url(video_id),
            title=snippet.get("title"),
        )
    return ContentStatus.none()


class YouTubeLiveProbe(LiveProbe):
    """Live probe backed by the public live page."""

    platform = Platform.YOUTUBE

    def __init__(self, client: YouTubeClient):
        self.client = client

    async def check_live(self, external_id: str) -> LiveStatus:
        try:
            final_url, page = await self.client.fetch_live_page(external_id)
        except ProbeError as e:
            logger.warning(f"YouTube live page fetch failed for {external_id}: {e}")
            return LiveStatus.error(str(e))
        return parse_live_page(final_url, page)


class YouTubeContentProbe(ContentProbe):
    """Latest-upload probe backed by the Data API."""

    def __init__(self, client: YouTubeClient):
        self.client = client

    @property
    def available(self) -> bool:
        return self.client.available

    async def check_latest_content(self, external_id: str) -> ContentStatus:
        if not self.available:
            return ContentStatus.skipped("YouTube API key is not configured")
        if await self.client.quota.is_blocked():
            return ContentStatus.skipped("YouTube API quota is blocked")

        try:
            playlist_id = await self.client.get_uploads_playlist_id(external_id)
            if not playlist_id:
                return ContentStatus.none()
            video_ids = await self.client.get_playlist_video_ids(playlist_id)
            videos = await self.client.get_videos(video_ids)
        except YouTubeQuotaError as e:
            return ContentStatus.error(str(e))
        except ProbeError as e:
            logger.warning(f"YouTube content check failed for {external_id}: {e}")
            return ContentStatus.error(str(e))
        return select_latest_content(videos)
