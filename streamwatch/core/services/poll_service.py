"""
Poll Cycle Engine for StreamWatch.

One cycle walks every subscription of every guild that has a notification
channel, probes each channel, compares the result with the persisted
ChannelState, notifies on transitions and decides when the channel's live
probe may run next.

Cadence for YouTube live probing (quota-free, but still rate-bound):
- live: every base interval (5 min)
- not live, premiere scheduled ahead: at the scheduled start
- not live, scheduled start already passed: every 2 min
- otherwise: every 30 min
The content probe (Data API quota) runs at most every 20 min per channel.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..interfaces import ContentProbe, LiveProbe, StoreError
from ..models import (
    CatalogEntry,
    ChannelState,
    ContentKind,
    LiveStatus,
    Platform,
    ProbeOutcome,
)
from ..repositories import CatalogRepository, ConfigRepository, StateRepository
from .notification_service import NotificationService, NotificationTarget
from streamwatch.utils import (
    get_logger,
    now_ms,
    minutes_ms,
    POLL_INTERVAL_MINUTES,
    CONTENT_CHECK_INTERVAL_MINUTES,
    LIVE_RECHECK_WHEN_LATE_MINUTES,
    LIVE_FALLBACK_CHECK_MINUTES,
    MAX_SCHEDULE_AHEAD_MS,
)

logger = get_logger("poll")


@dataclass
class GuildCycleResult:
    """What one cycle did for one guild."""
    guild_id: str
    checked: int = 0
    notifications: int = 0
    failed_posts: int = 0
    errors: int = 0
    state_written: bool = False


@dataclass
class CycleReport:
    """Summary of a full poll cycle."""
    started_at: int
    guilds: List[GuildCycleResult] = field(default_factory=list)

    @property
    def notifications(self) -> int:
        return sum(g.notifications for g in self.guilds)

    @property
    def checked(self) -> int:
        return sum(g.checked for g in self.guilds)


class PollCycleEngine:
    """
    Runs poll cycles over all configured guilds.

    Entities are processed one at a time in subscription order. A failing
    probe never stops the cycle; an unexpected error on one entity is
    logged and that entity keeps its previous state. Store failures
    propagate and abort the cycle.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        states: StateRepository,
        config: ConfigRepository,
        live_probes: Dict[Platform, LiveProbe],
        content_probe: Optional[ContentProbe],
        notifications: NotificationService,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize the engine.

        Args:
            catalog: Catalog/subscription repository
            states: Per-guild state repository
            config: Overrides/language repository
            live_probes: Live probe per platform
            content_probe: YouTube latest-content probe (None disables content checks)
            notifications: Notification service
            clock: Returns the current time in epoch milliseconds
        """
        self.catalog = catalog
        self.states = states
        self.config = config
        self.live_probes = live_probes
        self.content_probe = content_probe
        self.notifications = notifications
        self.clock = clock

    async def run_cycle(self) -> CycleReport:
        """
        Run one pass over every configured guild.

        Returns:
            CycleReport

        Raises:
            StoreError: If persistence fails (the cycle is aborted)
        """
        report = CycleReport(started_at=self.clock())
        for guild_id in await self.config.get_configured_guilds():
            report.guilds.append(await self.run_for_guild(guild_id))

        logger.info(
            f"Stream check finished: {len(report.guilds)} guild(s), "
            f"{report.checked} channel(s), {report.notifications} notification(s)"
        )
        return report

    async def run_for_guild(self, guild_id: str) -> GuildCycleResult:
        """
        Poll every subscription of one guild.

        The guild's state map is read once and written once, only if
        anything changed.
        """
        result = GuildCycleResult(guild_id)
        overrides = await self.config.get_overrides(guild_id)
        if not overrides.channel_id:
            return result

        target = NotificationTarget(
            guild_id=guild_id,
            overrides=overrides,
            locale=await self.config.get_language(guild_id),
        )
        entries = await self.catalog.list_for_tenant(guild_id)
        if not entries:
            return result

        state_map = await self.states.load(guild_id)
        changed = False

        for entry in entries:
            previous = state_map.get(entry.state_key) or ChannelState()
            state = previous.copy()
            try:
                if entry.platform is Platform.YOUTUBE:
                    await self._process_youtube(target, entry, state, result)
                elif entry.platform is Platform.TWITCH:
                    await self._process_twitch(target, entry, state, result)
            except StoreError:
                raise
            except Exception:
                result.errors += 1
                logger.exception(f"Error checking {entry.platform.value}/{entry.external_id}")
                continue

            result.checked += 1
            if state != previous:
                state_map[entry.state_key] = state
                changed = True

        if changed:
            await self.states.save(guild_id, state_map)
            result.state_written = True
        return result

    @staticmethod
    def _count(sent: bool, result: GuildCycleResult):
        if sent:
            result.notifications += 1
        else:
            result.failed_posts += 1

    @staticmethod
    def _went_live(state: ChannelState, live: LiveStatus) -> bool:
        """Rising edge of a session not announced before."""
        if not live.is_live or state.last_live:
            return False
        return not (live.stream_id and live.stream_id == state.last_stream_id)

    @staticmethod
    def _apply_live(state: ChannelState, live: LiveStatus):
        # A failed check counts as not live but keeps the session id, so a
        # session seen again after a transient error is not announced twice
        state.last_live = live.is_live
        if live.outcome is not ProbeOutcome.ERROR:
            state.last_stream_id = live.stream_id

    # ==================== YouTube ====================

    async def _process_youtube(
        self,
        target: NotificationTarget,
        entry: CatalogEntry,
        state: ChannelState,
        result: GuildCycleResult,
    ):
        now = self.clock()
        live = None

        if state.next_live_check_at is None or now >= state.next_live_check_at:
            live = await self.live_probes[Platform.YOUTUBE].check_live(entry.external_id)
            if live.outcome is ProbeOutcome.ERROR:
                logger.debug(f"YouTube live probe error for {entry.external_id}: {live.reason}")
            if self._went_live(state, live):
                self._count(await self.notifications.announce_live(target, entry, live), result)

        if self._content_due(state, now):
            await self._check_content(target, entry, state, result, now)

        if live is not None:
            self._apply_live(state, live)
            state.next_live_check_at = self._next_live_check(state, live.is_live, now)
            if live.is_live:
                state.pending_scheduled_start_at = None

    def _content_due(self, state: ChannelState, now: int) -> bool:
        if self.content_probe is None or not self.content_probe.available:
            return False
        if state.last_content_check_at is None:
            return True
        return now - state.last_content_check_at >= minutes_ms(CONTENT_CHECK_INTERVAL_MINUTES)

    async def _check_content(
        self,
        target: NotificationTarget,
        entry: CatalogEntry,
        state: ChannelState,
        result: GuildCycleResult,
        now: int,
    ):
        content = await self.content_probe.check_latest_content(entry.external_id)
        if not content.ran:
            logger.debug(f"Content check skipped for {entry.external_id}: {content.reason}")
            return

        if content.kind is ContentKind.VIDEO and content.video_id and content.video_id != state.last_video_id:
            self._count(await self.notifications.announce_content(target, entry, content), result)
            state.last_video_id = content.video_id

        if content.kind is ContentKind.PREMIERE and content.video_id and content.video_id != state.last_premiere_id:
            self._count(await self.notifications.announce_content(target, entry, content), result)
            state.last_premiere_id = content.video_id

        if content.kind is ContentKind.PREMIERE and content.scheduled_start_at:
            ahead = content.scheduled_start_at - now
            if 0 < ahead <= MAX_SCHEDULE_AHEAD_MS:
                if state.pending_scheduled_start_at != content.scheduled_start_at:
                    state.pending_scheduled_start_at = content.scheduled_start_at
                    state.next_live_check_at = content.scheduled_start_at
            elif ahead > MAX_SCHEDULE_AHEAD_MS and state.pending_scheduled_start_at:
                state.pending_scheduled_start_at = None

        state.last_content_check_at = now

    @staticmethod
    def _next_live_check(state: ChannelState, is_live: bool, now: int) -> int:
        """Decide when the YouTube live probe may run again."""
        if is_live:
            return now + minutes_ms(POLL_INTERVAL_MINUTES)
        pending = state.pending_scheduled_start_at
        if pending:
            if now >= pending:
                return now + minutes_ms(LIVE_RECHECK_WHEN_LATE_MINUTES)
            return pending
        return now + minutes_ms(LIVE_FALLBACK_CHECK_MINUTES)

    # ==================== Twitch ====================

    async def _process_twitch(
        self,
        target: NotificationTarget,
        entry: CatalogEntry,
        state: ChannelState,
        result: GuildCycleResult,
    ):
        probe = self.live_probes.get(Platform.TWITCH)
        if probe is None or not probe.available:
            return

        live = await probe.check_live(entry.external_id)
        if live.outcome is ProbeOutcome.SKIPPED:
            logger.debug(f"Twitch live check skipped for {entry.external_id}: {live.reason}")
            return
        if self._went_live(state, live):
            self._count(await self.notifications.announce_live(target, entry, live), result)

        self._apply_live(state, live)
