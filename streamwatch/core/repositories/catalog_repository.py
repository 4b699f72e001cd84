"""
Catalog and subscription repository.

The catalog is global: one entry per (platform, normalized externalId),
shared by every guild. Each guild owns an ordered subscription list of
catalog ids; list order defines the 1-based index used by removals.
"""

from typing import List, Optional, Tuple

from streamwatch.core.interfaces import KeyValueStore
from streamwatch.core.models import CatalogEntry, Platform, make_catalog_id
from streamwatch.utils import get_logger, loads_or, dumps

logger = get_logger("catalog")

CATALOG_PREFIX = "catalog:"
SUBS_PREFIX = "subs:"
LEGACY_PREFIX = "legacy:streamers:"


class CatalogRepository:
    """
    Catalog/subscription storage over a KeyValueStore.

    Keys:
        catalog:<platform>:<normalizedExternalId> -> entry
        subs:<guildId> -> [entryId, ...]
        legacy:streamers:<guildId> -> pre-catalog flat list (migrated on first access)
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    # ==================== Catalog ====================

    async def get_entry(self, entry_id: str) -> Optional[CatalogEntry]:
        """
        Get a catalog entry by its canonical id.

        Args:
            entry_id: Canonical id ("<platform>:<normalizedExternalId>")

        Returns:
            CatalogEntry or None
        """
        data = loads_or(await self.store.get(CATALOG_PREFIX + entry_id), None)
        if not isinstance(data, dict):
            return None
        try:
            return CatalogEntry.from_dict(data)
        except (KeyError, ValueError):
            logger.warning(f"Ignoring malformed catalog entry {entry_id}")
            return None

    async def upsert(
        self,
        platform: Platform,
        external_id: str,
        display_name: Optional[str] = None,
    ) -> Tuple[CatalogEntry, bool]:
        """
        Create a catalog entry or refresh its display name.

        Args:
            platform: Channel platform
            external_id: Platform channel id
            display_name: Name to show; keeps the stored one when empty

        Returns:
            (entry, is_new)
        """
        platform = Platform(platform)
        external_id = external_id.strip()
        entry_id = make_catalog_id(platform, external_id)
        name = (display_name or "").strip()

        existing = await self.get_entry(entry_id)
        if existing is not None:
            if name and name != existing.display_name:
                existing.display_name = name
                await self._write_entry(existing)
                logger.debug(f"Renamed catalog entry {entry_id} to {name}")
            return existing, False

        entry = CatalogEntry(platform, external_id, name or external_id)
        await self._write_entry(entry)
        logger.info(f"Added catalog entry {entry_id} ({entry.display_name})")
        return entry, True

    async def _write_entry(self, entry: CatalogEntry):
        await self.store.set(CATALOG_PREFIX + entry.id, dumps(entry.to_dict()))

    # ==================== Subscriptions ====================

    async def get_subscription_ids(self, guild_id: str) -> List[str]:
        """Get a guild's subscribed entry ids in subscription order."""
        await self.migrate_legacy(guild_id)
        ids = loads_or(await self.store.get(SUBS_PREFIX + guild_id), [])
        if not isinstance(ids, list):
            return []
        return [i for i in ids if isinstance(i, str)]

    async def _write_subscription_ids(self, guild_id: str, ids: List[str]):
        await self.store.set(SUBS_PREFIX + guild_id, dumps(ids))

    async def subscribe(self, guild_id: str, entry_id: str) -> bool:
        """
        Append an entry to a guild's subscriptions.

        Returns:
            False if the guild was already subscribed (no-op)
        """
        ids = await self.get_subscription_ids(guild_id)
        if entry_id in ids:
            return False
        ids.append(entry_id)
        await self._write_subscription_ids(guild_id, ids)
        return True

    async def unsubscribe_by_index(self, guild_id: str, index: int) -> Optional[CatalogEntry]:
        """
        Remove the subscription at a 1-based position.

        Args:
            guild_id: Guild ID
            index: 1-based position as shown by list_for_tenant

        Returns:
            The removed entry, or None when the index is out of range
        """
        ids = await self.get_subscription_ids(guild_id)
        if index < 1 or index > len(ids):
            return None
        entry_id = ids.pop(index - 1)
        await self._write_subscription_ids(guild_id, ids)
        entry = await self.get_entry(entry_id)
        if entry is None:
            # Dangling id; still report what was removed
            platform, _, external_id = entry_id.partition(":")
            entry = CatalogEntry(Platform(platform), external_id, external_id)
        return entry

    async def list_for_tenant(self, guild_id: str) -> List[CatalogEntry]:
        """Get a guild's subscribed catalog entries in subscription order."""
        entries = []
        for entry_id in await self.get_subscription_ids(guild_id):
            entry = await self.get_entry(entry_id)
            if entry is not None:
                entries.append(entry)
        return entries

    # ==================== Legacy migration ====================

    async def migrate_legacy(self, guild_id: str) -> bool:
        """
        Convert a guild's legacy flat streamer list into catalog entries.

        Runs only when the guild has no subscription list yet. Afterwards
        the subscription key always exists, so repeated calls are no-ops.

        Returns:
            True if a legacy list was migrated
        """
        if await self.store.get(SUBS_PREFIX + guild_id) is not None:
            return False

        legacy_key = LEGACY_PREFIX + guild_id
        legacy = loads_or(await self.store.get(legacy_key), None)
        if not isinstance(legacy, list):
            await self._write_subscription_ids(guild_id, [])
            return False

        ids: List[str] = []
        for item in legacy:
            if not isinstance(item, dict):
                continue
            platform = Platform.from_string(str(item.get('platform', '')))
            external_id = str(item.get('externalId') or item.get('id') or '').strip()
            if platform is None or not external_id:
                continue
            entry, _ = await self.upsert(
                platform, external_id, item.get('displayName') or item.get('name')
            )
            if entry.id not in ids:
                ids.append(entry.id)

        await self._write_subscription_ids(guild_id, ids)
        await self.store.delete(legacy_key)
        logger.info(f"Migrated {len(ids)} legacy streamer(s) for guild {guild_id}")
        return True
