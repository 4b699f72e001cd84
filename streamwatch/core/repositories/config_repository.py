"""
Per-guild configuration repository.

Handles notification overrides (channel, mention role, custom message)
and the guild's notification language.
"""

from typing import List, Optional

from streamwatch.core.interfaces import KeyValueStore
from streamwatch.core.models import StreamOverrides
from streamwatch.utils import get_logger, loads_or, dumps, SUPPORTED_LOCALES

logger = get_logger("config")

OVERRIDES_PREFIX = "overrides:"
LANGUAGE_PREFIX = "language:"


class ConfigRepository:
    """Guild overrides and language over a KeyValueStore."""

    def __init__(self, store: KeyValueStore, default_language: str = "en"):
        self.store = store
        self.default_language = default_language

    # ==================== Overrides ====================

    async def get_overrides(self, guild_id: str) -> StreamOverrides:
        """Get a guild's overrides (empty overrides when unset)."""
        data = loads_or(await self.store.get(OVERRIDES_PREFIX + guild_id), {})
        return StreamOverrides.from_dict(data if isinstance(data, dict) else {})

    async def save_overrides(self, guild_id: str, overrides: StreamOverrides):
        await self.store.set(OVERRIDES_PREFIX + guild_id, dumps(overrides.to_dict()))

    async def set_channel(self, guild_id: str, channel_id: Optional[str]) -> StreamOverrides:
        """Set (or clear) the notification channel."""
        overrides = await self.get_overrides(guild_id)
        overrides.channel_id = channel_id
        await self.save_overrides(guild_id, overrides)
        logger.info(f"Set notification channel for guild {guild_id}: {channel_id}")
        return overrides

    async def set_mention_role(self, guild_id: str, role_id: Optional[str]) -> StreamOverrides:
        """Set (or clear) the role mentioned with notifications."""
        overrides = await self.get_overrides(guild_id)
        overrides.mention_role_id = role_id
        await self.save_overrides(guild_id, overrides)
        return overrides

    async def set_message_template(self, guild_id: str, template: Optional[str]) -> StreamOverrides:
        """Set (or clear) the custom live message template."""
        overrides = await self.get_overrides(guild_id)
        overrides.message_template = template or None
        await self.save_overrides(guild_id, overrides)
        return overrides

    async def reset_overrides(self, guild_id: str) -> bool:
        """Remove all overrides for a guild."""
        return await self.store.delete(OVERRIDES_PREFIX + guild_id)

    async def get_configured_guilds(self) -> List[str]:
        """
        Get guilds that have a notification channel configured.

        Returns:
            Guild IDs in key order
        """
        guilds = []
        for key in await self.store.keys(OVERRIDES_PREFIX):
            guild_id = key[len(OVERRIDES_PREFIX):]
            if (await self.get_overrides(guild_id)).channel_id:
                guilds.append(guild_id)
        return guilds

    # ==================== Language ====================

    async def get_language(self, guild_id: Optional[str]) -> str:
        """Get a guild's locale, falling back to the default locale."""
        if guild_id:
            value = loads_or(await self.store.get(LANGUAGE_PREFIX + guild_id), None)
            if value in SUPPORTED_LOCALES:
                return value
        return self.default_language

    async def set_language(self, guild_id: str, language: str) -> bool:
        """
        Set a guild's locale.

        Returns:
            False if the locale is not supported
        """
        language = language.strip().lower()
        if language not in SUPPORTED_LOCALES:
            return False
        await self.store.set(LANGUAGE_PREFIX + guild_id, dumps(language))
        return True
