"""
Tests for the Discord presentation layer (message texts and formatting).
"""

import pytest

from streamwatch.core.models import CatalogEntry, ContentKind, LiveStatus, Platform
from streamwatch.discord_bot.formatters import (
    MESSAGES,
    t,
    substitute,
    format_stream_message,
    format_content_message,
    format_streamer_list,
    format_live_listing,
    format_stream_info,
)

UC_ID = "UC" + "z" * 22


# =============================================================================
# Message Catalogue Tests
# =============================================================================

class TestMessages:
    """Tests for the localized message catalogue."""

    def test_locales_define_same_keys(self):
        assert set(MESSAGES["en"]) == set(MESSAGES["pt"])

    def test_lookup_and_fallback(self):
        assert t("pt", "cmdLiveNone") == "Ninguém está online no momento."
        assert t("de", "cmdLiveNone") == "No one is online at the moment."
        assert t(None, "cmdRemoved", name="A", platform="twitch") == "Removed: **A** (twitch)."
        assert t("en", "noSuchKey") == "noSuchKey"

    def test_substitute_leaves_unknown_placeholders(self):
        assert substitute("{name} {other}", name="x") == "x {other}"
        assert substitute("{title}", title=None) == ""


# =============================================================================
# Notification Formatting Tests
# =============================================================================

class TestNotificationFormatting:
    """Tests for live and content notifications."""

    def test_default_live_message(self):
        text = format_stream_message(
            "en", "Twitch", "Shroud", "https://twitch.tv/shroud", "Ranked grind", "<@&1>",
        )

        assert text == (
            "🔴 **Shroud** is live on Twitch!\n"
            "https://twitch.tv/shroud\n"
            "\n*Ranked grind*\n"
            "<@&1>"
        )

    def test_default_live_message_minimal(self):
        text = format_stream_message("pt", "YouTube", "Canal", "https://youtube.com/watch?v=x")

        assert text == "🔴 **Canal** está ao vivo no YouTube!\nhttps://youtube.com/watch?v=x"

    def test_custom_template(self):
        text = format_stream_message(
            "en", "Twitch", "Shroud", "https://twitch.tv/shroud", None, "<@&1>",
            "{name} went live on {platform} {url} {title}",
        )

        assert text == "<@&1> Shroud went live on Twitch https://twitch.tv/shroud "

    def test_content_messages(self):
        video = format_content_message("en", ContentKind.VIDEO, "Tuber", "https://youtube.com/watch?v=v")
        premiere = format_content_message(
            "en", ContentKind.PREMIERE, "Tuber", "https://youtube.com/watch?v=p", "Big one", "<@&2>",
        )

        assert video == "📺 **Tuber** uploaded a new video!\nhttps://youtube.com/watch?v=v"
        assert premiere.startswith("⏰ **Tuber** scheduled a premiere!\n")
        assert premiere.endswith("*Big one*\n<@&2>")


# =============================================================================
# Command Reply Formatting Tests
# =============================================================================

class TestCommandReplies:
    """Tests for list, live listing and info replies."""

    @pytest.fixture
    def entries(self):
        return [
            CatalogEntry(Platform.YOUTUBE, UC_ID, "Real Title"),
            CatalogEntry(Platform.TWITCH, "shroud", "Shroud"),
        ]

    def test_streamer_list(self, entries):
        text = format_streamer_list("en", entries)

        assert text.splitlines() == [
            "**Streamers:**",
            f"1. **Real Title** (youtube) - `{UC_ID}`",
            "2. **Shroud** (twitch) - `shroud`",
        ]

    def test_empty_streamer_list(self):
        assert format_streamer_list("en", []) == t("en", "cmdNoStreamers")

    def test_live_listing(self, entries):
        status = LiveStatus.live("abc", "https://twitch.tv/Shroud", "hi")

        text = format_live_listing("en", [(entries[1], status)], [Platform.YOUTUBE])

        assert text.splitlines() == [
            "**Currently Online Streamers:**",
            "- **Shroud** (twitch): https://twitch.tv/Shroud",
            "Service unavailable for: YouTube",
        ]

    def test_live_listing_nobody_live(self):
        assert format_live_listing("pt", [], []) == "Ninguém está online no momento."

    def test_stream_info(self):
        text = format_stream_info("en", "100", None, None)

        assert "• Channel: <#100>" in text
        assert "• Role: ---" in text
        assert "• Message: ---" in text
