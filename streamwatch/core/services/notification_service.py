"""
Notification Service for StreamWatch.

Renders stream notifications for a guild and posts them. Posting is
at-most-once: a failed post is logged and reported as False, and callers
keep the state transition that triggered it.
"""

from dataclasses import dataclass, field

from ..interfaces import MessageFormatter, Notifier, NotifierError
from ..models import CatalogEntry, ContentStatus, LiveStatus, StreamOverrides
from streamwatch.utils import get_logger

logger = get_logger("notifications")

TEST_PREFIX = "[TEST] "
TEST_PLATFORM = "TestPlatform"
TEST_NAME = "TestStreamer"
TEST_URL = "https://example.com/live"
TEST_TITLE = "This is a test stream notification!"


@dataclass
class NotificationTarget:
    """Where a guild's notifications go and how they read."""
    guild_id: str
    overrides: StreamOverrides = field(default_factory=StreamOverrides)
    locale: str = "en"

    @property
    def channel_id(self):
        return self.overrides.channel_id


class NotificationService:
    """
    Service for composing and posting stream notifications.

    Responsibilities:
    - Render live/content/test messages through the formatter
    - Post to the guild's configured channel
    - Turn post failures into a logged False
    """

    def __init__(self, notifier: Notifier, formatter: MessageFormatter):
        """
        Initialize the NotificationService.

        Args:
            notifier: Message poster
            formatter: Localized message renderer
        """
        self.notifier = notifier
        self.formatter = formatter

    async def post(self, target: NotificationTarget, content: str) -> bool:
        """
        Post a message to the target's channel.

        Returns:
            True if the message was posted
        """
        if not target.channel_id:
            logger.debug(f"Guild {target.guild_id} has no notification channel")
            return False
        try:
            await self.notifier.post(target.channel_id, content)
        except NotifierError:
            logger.exception(f"Failed to post notification for guild {target.guild_id}")
            return False
        return True

    def render_live(self, target: NotificationTarget, entry: CatalogEntry, status: LiveStatus) -> str:
        return self.formatter.live_message(
            target.locale,
            entry.platform.label,
            entry.display_name,
            status.url or entry.default_url,
            status.title,
            target.overrides.mention,
            target.overrides.message_template,
        )

    async def announce_live(self, target: NotificationTarget, entry: CatalogEntry, status: LiveStatus) -> bool:
        """Announce that a channel went live."""
        logger.info(f"{entry.display_name} ({entry.platform.value}) went live; notifying guild {target.guild_id}")
        return await self.post(target, self.render_live(target, entry, status))

    async def announce_content(self, target: NotificationTarget, entry: CatalogEntry, content: ContentStatus) -> bool:
        """Announce a new video or premiere (always the localized default text)."""
        text = self.formatter.content_message(
            target.locale,
            content.kind,
            entry.display_name,
            content.url or entry.default_url,
            content.title,
            target.overrides.mention,
        )
        logger.info(f"New {content.kind.value} {content.video_id} from {entry.display_name}; notifying guild {target.guild_id}")
        return await self.post(target, text)

    async def send_test(self, target: NotificationTarget) -> bool:
        """Post a synthetic live notification using the guild's settings."""
        text = self.formatter.live_message(
            target.locale,
            TEST_PLATFORM,
            TEST_NAME,
            TEST_URL,
            TEST_TITLE,
            target.overrides.mention,
            target.overrides.message_template,
        )
        return await self.post(target, TEST_PREFIX + text)
