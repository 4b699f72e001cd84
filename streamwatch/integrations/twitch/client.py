"""
Twitch Helix client with a memoized app access token.
"""

import asyncio
import re
from typing import Any, Callable, Dict, Optional

import aiohttp

from streamwatch.core.interfaces import (
    ChannelLookup,
    ProbeConnectionError,
    ProbeError,
    ProbeUnavailableError,
)
from streamwatch.core.models import Platform, ResolvedChannel
from streamwatch.integrations.http import fetch_json
from streamwatch.utils import get_logger, now_ms

logger = get_logger("twitch")

NUMERIC_ID = re.compile(r"[0-9]+")

TOKEN_URL = "https://id.twitch.tv/oauth2/token"
HELIX_BASE = "https://api.twitch.tv/helix"

# Token is treated as expired this long before Twitch says it is
TOKEN_EXPIRY_MARGIN_MS = 60 * 1000


class TwitchTokenProvider:
    """
    Client-credentials app token, fetched lazily and memoized.

    The cached token is dropped expires_in - 60s after it was issued, or
    when invalidate() is called after a 401 from Helix.

    Args:
        session: Shared aiohttp session
        client_id: Twitch application client id
        client_secret: Twitch application client secret
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        client_id: Optional[str],
        client_secret: Optional[str],
        clock: Callable[[], int] = now_ms,
    ):
        self.session = session
        self.client_id = client_id
        self.client_secret = client_secret
        self.clock = clock
        self._token: Optional[str] = None
        self._expires_at: Optional[int] = None
        self._lock = asyncio.Lock()

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def invalidate(self):
        self._token = None
        self._expires_at = None

    async def get_token(self) -> Optional[str]:
        """
        Get a valid app token, requesting one if needed.

        Returns:
            Access token, or None when credentials are missing or the request failed
        """
        if not self.has_credentials:
            return None
        async with self._lock:
            if self._token and (self._expires_at is None or self.clock() < self._expires_at):
                return self._token

            self.invalidate()
            try:
                data = await fetch_json(self.session, TOKEN_URL, method="POST", params={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                })
            except ProbeError as e:
                logger.warning(f"Failed to obtain Twitch app token: {e}")
                return None

            token = data.get("access_token") if isinstance(data, dict) else None
            if not token:
                logger.warning("Twitch token response had no access_token")
                return None

            self._token = token
            expires_in = data.get("expires_in")
            if isinstance(expires_in, (int, float)) and expires_in > 0:
                self._expires_at = self.clock() + int(expires_in * 1000) - TOKEN_EXPIRY_MARGIN_MS
            logger.info("Obtained Twitch app token")
            return token


class TwitchClient(ChannelLookup):
    """Helix calls used for resolution and live checks."""

    platform = Platform.TWITCH

    def __init__(self, session: aiohttp.ClientSession, tokens: TwitchTokenProvider):
        self.session = session
        self.tokens = tokens

    @property
    def available(self) -> bool:
        return self.tokens.has_credentials

    async def helix_get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a Helix endpoint, retrying once with a fresh token after a 401.

        Raises:
            ProbeError: If no token is available or the call fails
        """
        for attempt in range(2):
            token = await self.tokens.get_token()
            if not token:
                raise ProbeUnavailableError("Twitch app token is unavailable")
            headers = {
                "Client-Id": self.tokens.client_id,
                "Authorization": f"Bearer {token}",
            }
            try:
                data = await fetch_json(self.session, f"{HELIX_BASE}/{endpoint}",
                                        params=params, headers=headers)
            except ProbeConnectionError as e:
                if e.status == 401 and attempt == 0:
                    logger.info("Twitch token rejected; refreshing")
                    self.tokens.invalidate()
                    continue
                raise
            if not isinstance(data, dict):
                raise ProbeError(f"Unexpected Twitch {endpoint} response")
            return data
        raise ProbeError("Twitch token rejected twice")

    @staticmethod
    def user_param(user: str, numeric_key: str, login_key: str) -> Dict[str, str]:
        """Query by numeric id when the value is all ASCII digits, else by login."""
        if NUMERIC_ID.fullmatch(user):
            return {numeric_key: user}
        return {login_key: user.lower()}

    async def find_by_id(self, external_id: str) -> Optional[ResolvedChannel]:
        return await self.get_user(external_id)

    async def find_by_name(self, name: str) -> Optional[ResolvedChannel]:
        return await self.get_user(name)

    async def get_user(self, query: str) -> Optional[ResolvedChannel]:
        """Look up a user by numeric id or login."""
        data = await self.helix_get("users", self.user_param(query, "id", "login"))
        users = data.get("data") or []
        if not users:
            return None
        user = users[0]
        user_id = user.get("id")
        if not user_id:
            return None
        name = user.get("display_name") or user.get("login") or query
        return ResolvedChannel(Platform.TWITCH, str(user_id), name)

    async def get_stream(self, user: str) -> Optional[Dict[str, Any]]:
        """Get the current stream of a user, or None when offline."""
        data = await self.helix_get("streams", self.user_param(user, "user_id", "user_login"))
        streams = data.get("data") or []
        if not streams or not streams[0].get("id"):
            return None
        return streams[0]
