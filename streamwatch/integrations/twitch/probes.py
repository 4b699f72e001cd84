"""
Twitch live probe.
"""

from streamwatch.core.interfaces import LiveProbe, ProbeError, ProbeUnavailableError
from streamwatch.core.models import LiveStatus, Platform
from streamwatch.utils import get_logger
from .client import TwitchClient

logger = get_logger("twitch")


class TwitchLiveProbe(LiveProbe):
    """Live probe backed by Helix /streams."""

    platform = Platform.TWITCH

    def __init__(self, client: TwitchClient):
        self.client = client

    @property
    def available(self) -> bool:
        return self.client.available

    async def check_live(self, external_id: str) -> LiveStatus:
        if not self.available:
            return LiveStatus.skipped("Twitch credentials are not configured")
        if not await self.client.tokens.get_token():
            return LiveStatus.skipped("Twitch app token is unavailable")

        try:
            stream = await self.client.get_stream(external_id)
        except ProbeUnavailableError as e:
            return LiveStatus.skipped(str(e))
        except ProbeError as e:
            logger.warning(f"Twitch live check failed for {external_id}: {e}")
            return LiveStatus.error(str(e))

        if stream is None:
            logger.debug(f"No live Twitch stream for {external_id}")
            return LiveStatus.not_live()
        login = stream.get("user_name") or stream.get("user_login") or external_id
        return LiveStatus.live(
            str(stream["id"]),
            f"https://twitch.tv/{login}",
            stream.get("title") or None,
        )
