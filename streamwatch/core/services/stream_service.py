"""
Stream Service for StreamWatch.

Facade used by the command layer: resolve and subscribe channels, list and
remove subscriptions, on-demand live listing and test notifications.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..interfaces import LiveProbe
from ..models import (
    CatalogEntry,
    LiveStatus,
    Platform,
    ProbeOutcome,
    ResolveResult,
)
from ..repositories import CatalogRepository, ConfigRepository
from .notification_service import NotificationService, NotificationTarget
from .resolver_service import IdentifierResolver
from streamwatch.utils import get_logger

logger = get_logger("streams")


@dataclass
class AddResult:
    """Outcome of adding a streamer from free-form input."""
    resolution: ResolveResult
    entry: Optional[CatalogEntry] = None
    subscribed: bool = False


@dataclass
class LiveListing:
    """On-demand live status of a guild's subscriptions."""
    live: List[Tuple[CatalogEntry, LiveStatus]] = field(default_factory=list)
    unavailable: List[Platform] = field(default_factory=list)
    total: int = 0


class StreamService:
    """
    Service for guild-facing stream operations.

    Responsibilities:
    - Resolve input and maintain the catalog and subscriptions
    - Report who is live right now
    - Send test notifications
    """

    def __init__(
        self,
        resolver: IdentifierResolver,
        catalog: CatalogRepository,
        config: ConfigRepository,
        live_probes: Dict[Platform, LiveProbe],
        notifications: NotificationService,
    ):
        self.resolver = resolver
        self.catalog = catalog
        self.config = config
        self.live_probes = live_probes
        self.notifications = notifications

    # ==================== Catalog ====================

    async def resolve_streamer_input(self, query: str) -> ResolveResult:
        return await self.resolver.resolve(query)

    async def upsert_catalog_entry(
        self,
        platform: Platform,
        external_id: str,
        display_name: Optional[str] = None,
    ) -> Tuple[CatalogEntry, bool]:
        return await self.catalog.upsert(platform, external_id, display_name)

    async def subscribe_catalog_entry(self, guild_id: str, entry_id: str) -> bool:
        return await self.catalog.subscribe(guild_id, entry_id)

    async def unsubscribe_by_index(self, guild_id: str, index: int) -> Optional[CatalogEntry]:
        removed = await self.catalog.unsubscribe_by_index(guild_id, index)
        if removed:
            logger.info(f"Guild {guild_id} removed {removed.id}")
        return removed

    async def get_tenant_catalog_entries(self, guild_id: str) -> List[CatalogEntry]:
        return await self.catalog.list_for_tenant(guild_id)

    async def add_streamer(self, guild_id: str, query: str) -> AddResult:
        """
        Resolve input, add it to the catalog and subscribe the guild.

        Args:
            guild_id: Guild ID
            query: Free-form input (URL, id, name, optional hint)

        Returns:
            AddResult; subscribed is False when already subscribed or unresolved
        """
        resolution = await self.resolve_streamer_input(query)
        if not resolution.ok:
            return AddResult(resolution)

        channel = resolution.channel
        entry, _ = await self.upsert_catalog_entry(
            channel.platform, channel.external_id, channel.display_name
        )
        subscribed = await self.subscribe_catalog_entry(guild_id, entry.id)
        return AddResult(resolution, entry, subscribed)

    # ==================== Live status ====================

    async def check_live(self, platform: Platform, external_id: str) -> LiveStatus:
        """On-demand live check for one channel (YouTube page or Twitch Helix)."""
        probe = self.live_probes.get(platform)
        if probe is None:
            return LiveStatus.skipped(f"No probe for {platform.value}")
        return await probe.check_live(external_id)

    async def check_youtube_live(self, external_id: str) -> LiveStatus:
        return await self.check_live(Platform.YOUTUBE, external_id)

    async def check_twitch_live(self, external_id: str) -> LiveStatus:
        return await self.check_live(Platform.TWITCH, external_id)

    async def get_live_listing(self, guild_id: str) -> LiveListing:
        """
        Check every subscription of a guild right now.

        Platforms whose probe could not run (missing credentials or token)
        are reported in LiveListing.unavailable.
        """
        entries = await self.get_tenant_catalog_entries(guild_id)
        listing = LiveListing(total=len(entries))
        for entry in entries:
            status = await self.check_live(entry.platform, entry.external_id)
            if status.outcome is ProbeOutcome.SKIPPED:
                if entry.platform not in listing.unavailable:
                    listing.unavailable.append(entry.platform)
            elif status.is_live:
                listing.live.append((entry, status))
        return listing

    # ==================== Test ====================

    async def trigger_test(self, guild_id: str) -> bool:
        """
        Post a synthetic notification to the guild's notification channel.

        Returns:
            False if no channel is configured or the post failed
        """
        overrides = await self.config.get_overrides(guild_id)
        if not overrides.channel_id:
            return False
        target = NotificationTarget(
            guild_id=guild_id,
            overrides=overrides,
            locale=await self.config.get_language(guild_id),
        )
        return await self.notifications.send_test(target)
