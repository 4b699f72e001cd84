"""
Tests for the key-value store and the repositories layered on it.
"""

import pytest

from streamwatch.core.models import ChannelState, Platform, StreamOverrides
from streamwatch.core.repositories import QUOTA_KEY, QuotaRepository
from streamwatch.core.repositories.catalog_repository import LEGACY_PREFIX, SUBS_PREFIX
from streamwatch.utils import dumps, loads_or

from conftest import START_MS

# 2025-01-16 00:00:00 UTC
NEXT_MIDNIGHT_MS = 1736985600000


# =============================================================================
# Key-Value Store Tests
# =============================================================================

class TestKeyValueStore:
    """Tests for SQLiteKeyValueStore."""

    @pytest.mark.asyncio
    async def test_get_set_delete(self, kv_store):
        assert await kv_store.get("missing") is None

        await kv_store.set("a", "1")
        await kv_store.set("a", "2")
        assert await kv_store.get("a") == "2"

        assert await kv_store.delete("a") is True
        assert await kv_store.delete("a") is False
        assert await kv_store.get("a") is None

    @pytest.mark.asyncio
    async def test_keys_by_prefix(self, kv_store):
        """Prefix matching is literal, so LIKE wildcards do not leak in."""
        await kv_store.set("overrides:2", "{}")
        await kv_store.set("overrides:1", "{}")
        await kv_store.set("overrides_x", "{}")
        await kv_store.set("subs:1", "[]")

        assert await kv_store.keys("overrides:") == ["overrides:1", "overrides:2"]
        assert len(await kv_store.keys()) == 4

    @pytest.mark.asyncio
    async def test_survives_reopen(self, tmp_path):
        """Values are on disk, not in the connection."""
        from streamwatch.core.repositories import SQLiteKeyValueStore

        path = str(tmp_path / "nested" / "data.db")
        first = SQLiteKeyValueStore(path)
        await first.initialize()
        await first.set("k", "v")

        second = SQLiteKeyValueStore(path)
        await second.initialize()
        assert await second.get("k") == "v"


# =============================================================================
# Catalog Repository Tests
# =============================================================================

class TestCatalogRepository:
    """Tests for the shared catalog and per-guild subscriptions."""

    @pytest.mark.asyncio
    async def test_upsert_is_idempotent(self, catalog):
        first, is_new = await catalog.upsert(Platform.TWITCH, "Shroud", "shroud")
        assert is_new is True
        assert first.id == "twitch:shroud"

        # Case and whitespace variants collide
        second, is_new = await catalog.upsert(Platform.TWITCH, "  shroud ", None)
        assert is_new is False
        assert second.id == first.id
        assert second.display_name == "shroud"

    @pytest.mark.asyncio
    async def test_upsert_refreshes_display_name(self, catalog):
        await catalog.upsert(Platform.YOUTUBE, "UCabc", "Old Name")
        entry, _ = await catalog.upsert(Platform.YOUTUBE, "UCabc", "New Name")
        assert entry.display_name == "New Name"

        stored = await catalog.get_entry("youtube:ucabc")
        assert stored.display_name == "New Name"
        # First-provided casing of the external id is kept
        assert stored.external_id == "UCabc"

    @pytest.mark.asyncio
    async def test_upsert_without_name_uses_external_id(self, catalog):
        entry, _ = await catalog.upsert(Platform.TWITCH, "12345", "")
        assert entry.display_name == "12345"

    @pytest.mark.asyncio
    async def test_subscribe_twice_is_noop(self, catalog):
        entry, _ = await catalog.upsert(Platform.TWITCH, "shroud", "shroud")
        assert await catalog.subscribe("g1", entry.id) is True
        assert await catalog.subscribe("g1", entry.id) is False
        assert await catalog.get_subscription_ids("g1") == [entry.id]

    @pytest.mark.asyncio
    async def test_remove_by_index_keeps_order(self, catalog):
        """Removing #2 from [A, B, C] removes B; #2 then refers to C."""
        for name in ("a_streamer", "b_streamer", "c_streamer"):
            entry, _ = await catalog.upsert(Platform.TWITCH, name, name)
            await catalog.subscribe("g1", entry.id)

        removed = await catalog.unsubscribe_by_index("g1", 2)
        assert removed.display_name == "b_streamer"
        assert [e.display_name for e in await catalog.list_for_tenant("g1")] == ["a_streamer", "c_streamer"]

        removed = await catalog.unsubscribe_by_index("g1", 2)
        assert removed.display_name == "c_streamer"

    @pytest.mark.asyncio
    async def test_remove_out_of_range(self, catalog):
        entry, _ = await catalog.upsert(Platform.TWITCH, "solo", "solo")
        await catalog.subscribe("g1", entry.id)

        assert await catalog.unsubscribe_by_index("g1", 0) is None
        assert await catalog.unsubscribe_by_index("g1", 2) is None
        assert len(await catalog.list_for_tenant("g1")) == 1

    @pytest.mark.asyncio
    async def test_removing_subscription_keeps_catalog_entry(self, catalog):
        entry, _ = await catalog.upsert(Platform.TWITCH, "shared", "Shared")
        await catalog.subscribe("g1", entry.id)
        await catalog.subscribe("g2", entry.id)

        await catalog.unsubscribe_by_index("g1", 1)

        assert await catalog.get_entry(entry.id) is not None
        assert await catalog.list_for_tenant("g1") == []
        assert [e.id for e in await catalog.list_for_tenant("g2")] == [entry.id]


# =============================================================================
# Legacy Migration Tests
# =============================================================================

class TestLegacyMigration:
    """Tests for converting pre-catalog streamer lists."""

    @pytest.mark.asyncio
    async def test_migrates_once(self, catalog, kv_store):
        await kv_store.set(LEGACY_PREFIX + "g1", dumps([
            {"platform": "twitch", "id": "Shroud", "name": "shroud"},
            {"platform": "YouTube", "externalId": "UCabc", "displayName": "Channel"},
            {"platform": "twitch", "id": "shroud"},
            {"platform": "myspace", "id": "nope"},
            "garbage",
        ]))

        entries = await catalog.list_for_tenant("g1")
        assert [e.id for e in entries] == ["twitch:shroud", "youtube:ucabc"]
        assert await kv_store.get(LEGACY_PREFIX + "g1") is None

        # A second access neither duplicates nor re-reads anything
        await kv_store.set(LEGACY_PREFIX + "g1", dumps([{"platform": "twitch", "id": "other"}]))
        assert await catalog.migrate_legacy("g1") is False
        assert [e.id for e in await catalog.list_for_tenant("g1")] == ["twitch:shroud", "youtube:ucabc"]

    @pytest.mark.asyncio
    async def test_guild_without_legacy_gets_empty_list(self, catalog, kv_store):
        assert await catalog.get_subscription_ids("fresh") == []
        assert loads_or(await kv_store.get(SUBS_PREFIX + "fresh"), None) == []


# =============================================================================
# State Repository Tests
# =============================================================================

class TestStateRepository:
    """Tests for per-guild channel state maps."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, states):
        state = ChannelState(last_live=True, last_stream_id="abc", next_live_check_at=START_MS)
        await states.save("g1", {"twitch:shroud": state})

        loaded = await states.load("g1")
        assert loaded == {"twitch:shroud": state}
        assert await states.load("g2") == {}

    @pytest.mark.asyncio
    async def test_tenants_share_entry_with_independent_state(self, catalog, states):
        entry, _ = await catalog.upsert(Platform.TWITCH, "shared", "Shared")
        await catalog.subscribe("g1", entry.id)
        await catalog.subscribe("g2", entry.id)

        await states.save("g1", {entry.state_key: ChannelState(last_live=True)})

        assert (await states.load("g1"))[entry.state_key].last_live is True
        assert entry.state_key not in await states.load("g2")

    def test_state_dict_uses_stored_names(self):
        state = ChannelState(last_live=False, last_video_id="v1", pending_scheduled_start_at=5)
        assert state.to_dict() == {
            "lastLive": False,
            "lastVideoId": "v1",
            "pendingScheduledStartAt": 5,
        }
        assert ChannelState.from_dict(state.to_dict()) == state
        assert ChannelState.from_dict(None) == ChannelState()


# =============================================================================
# Quota Repository Tests
# =============================================================================

class TestQuotaRepository:
    """Tests for the YouTube quota block marker."""

    @pytest.mark.asyncio
    async def test_block_until_next_utc_midnight(self, quota, kv_store):
        assert await quota.is_blocked() is False

        until = await quota.block_until_next_midnight()
        assert until == NEXT_MIDNIGHT_MS
        assert await quota.is_blocked() is True
        assert await kv_store.get(QUOTA_KEY) == str(NEXT_MIDNIGHT_MS)

    @pytest.mark.asyncio
    async def test_block_survives_restart(self, quota, kv_store, clock):
        await quota.block_until_next_midnight()

        restarted = QuotaRepository(kv_store, clock)
        assert await restarted.get_blocked_until() == NEXT_MIDNIGHT_MS

    @pytest.mark.asyncio
    async def test_expired_marker_is_deleted(self, quota, kv_store, clock):
        await quota.block_until_next_midnight()

        clock.now = NEXT_MIDNIGHT_MS
        assert await quota.is_blocked() is False
        assert await kv_store.get(QUOTA_KEY) is None

    @pytest.mark.asyncio
    async def test_logs_once_per_block(self, quota, caplog):
        with caplog.at_level("ERROR", logger="streamwatch.quota"):
            await quota.block_until_next_midnight()
            await quota.block_until_next_midnight()
        assert len([r for r in caplog.records if r.levelname == "ERROR"]) == 1


# =============================================================================
# Config Repository Tests
# =============================================================================

class TestConfigRepository:
    """Tests for guild overrides and language."""

    @pytest.mark.asyncio
    async def test_overrides_round_trip(self, config_repo):
        assert await config_repo.get_overrides("g1") == StreamOverrides()

        await config_repo.set_channel("g1", "100")
        await config_repo.set_mention_role("g1", "200")
        await config_repo.set_message_template("g1", "{name} is live")

        overrides = await config_repo.get_overrides("g1")
        assert overrides.channel_id == "100"
        assert overrides.mention == "<@&200>"
        assert overrides.message_template == "{name} is live"

    @pytest.mark.asyncio
    async def test_configured_guilds_need_a_channel(self, config_repo):
        await config_repo.set_channel("g1", "100")
        await config_repo.set_mention_role("g2", "200")
        await config_repo.set_channel("g3", "300")

        assert await config_repo.get_configured_guilds() == ["g1", "g3"]

        await config_repo.reset_overrides("g1")
        assert await config_repo.get_configured_guilds() == ["g3"]

    @pytest.mark.asyncio
    async def test_language(self, config_repo):
        assert await config_repo.get_language("g1") == "en"
        assert await config_repo.set_language("g1", " PT ") is True
        assert await config_repo.get_language("g1") == "pt"
        assert await config_repo.set_language("g1", "de") is False
        assert await config_repo.get_language("g1") == "pt"
        assert await config_repo.get_language(None) == "en"
