"""
Tests for the Discord-side adapters: job scheduler, notifier and command
helpers.
"""

import asyncio

import discord
import pytest
from discord.ext import commands

from streamwatch.core.interfaces import NotifierSendError, StoreError
from streamwatch.core.services import StreamCheckScheduler
from streamwatch.discord_bot import AsyncioJobScheduler, DiscordNotifier, JOBS_PREFIX
from streamwatch.discord_bot.commands import get_guild_id, split_message
from streamwatch.utils import STREAM_JOB_RESOURCE_ID, dumps, from_ms, loads_or

from conftest import FakeClock, START_MS


# =============================================================================
# Job Scheduler Tests
# =============================================================================

class TestAsyncioJobScheduler:
    """Tests for the persisted one-shot scheduler."""

    @pytest.fixture
    def clock(self):
        return FakeClock(START_MS)

    @pytest.fixture
    async def scheduler(self, kv_store, clock):
        scheduler = AsyncioJobScheduler(kv_store, clock)
        yield scheduler
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_create_persists_job(self, scheduler, kv_store, clock):
        await scheduler.create("job-1", "tag-a", from_ms(clock.now + 60_000))

        assert loads_or(await kv_store.get(JOBS_PREFIX + "job-1"), None) == {
            "tag": "tag-a",
            "start": clock.now + 60_000,
        }
        assert scheduler.pending() == ["job-1"]

    @pytest.mark.asyncio
    async def test_due_job_fires_and_is_removed(self, scheduler, kv_store, clock):
        fired = asyncio.Event()
        tags = []

        async def on_fire(tag):
            tags.append(tag)
            fired.set()

        scheduler.on_fire(on_fire)
        await scheduler.create("job-1", "tag-a", from_ms(clock.now))

        await asyncio.wait_for(fired.wait(), timeout=1)

        assert tags == ["tag-a"]
        assert await kv_store.get(JOBS_PREFIX + "job-1") is None
        assert scheduler.pending() == []

    @pytest.mark.asyncio
    async def test_listener_can_rearm_same_job(self, scheduler, clock):
        rearmed = asyncio.Event()

        async def on_fire(tag):
            await scheduler.create("job-1", tag, from_ms(clock.now + 300_000))
            rearmed.set()

        scheduler.on_fire(on_fire)
        await scheduler.create("job-1", "tag-a", from_ms(clock.now))

        await asyncio.wait_for(rearmed.wait(), timeout=1)

        assert scheduler.pending() == ["job-1"]

    @pytest.mark.asyncio
    async def test_start_reports_overdue_jobs_as_missed(self, scheduler, kv_store, clock):
        await kv_store.set(JOBS_PREFIX + "old", dumps({"tag": "tag-a", "start": clock.now - 1}))
        missed = []

        async def on_missed(tag):
            missed.append(tag)

        scheduler.on_missed(on_missed)
        restored = await scheduler.start()

        assert restored == ["old"]
        assert missed == ["tag-a"]
        assert await kv_store.get(JOBS_PREFIX + "old") is None

    @pytest.mark.asyncio
    async def test_start_rearms_future_jobs(self, scheduler, kv_store, clock):
        await kv_store.set(JOBS_PREFIX + "later", dumps({"tag": "tag-a", "start": clock.now + 60_000}))
        await kv_store.set(JOBS_PREFIX + "broken", "not json")

        restored = await scheduler.start()

        assert restored == ["later"]
        assert scheduler.pending() == ["later"]
        assert await kv_store.get(JOBS_PREFIX + "broken") is None

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_stop_others(self, scheduler, clock):
        done = asyncio.Event()

        async def broken(tag):
            raise RuntimeError("listener failed")

        async def healthy(tag):
            done.set()

        scheduler.on_fire(broken)
        scheduler.on_fire(healthy)
        await scheduler.create("job-1", "tag-a", from_ms(clock.now))

        await asyncio.wait_for(done.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_stop_keeps_persisted_jobs(self, scheduler, kv_store, clock):
        await scheduler.create("job-1", "tag-a", from_ms(clock.now + 60_000))

        await scheduler.stop()

        assert scheduler.pending() == []
        assert await kv_store.get(JOBS_PREFIX + "job-1") is not None


class FlakyStore:
    """Wraps a store and fails the next job writes or deletes."""

    def __init__(self, store, failing_sets=0, failing_deletes=0):
        self.store = store
        self.failing_sets = failing_sets
        self.failing_deletes = failing_deletes

    async def get(self, key):
        return await self.store.get(key)

    async def keys(self, prefix=""):
        return await self.store.keys(prefix)

    async def set(self, key, value):
        if key.startswith(JOBS_PREFIX) and self.failing_sets:
            self.failing_sets -= 1
            raise StoreError("database is locked")
        await self.store.set(key, value)

    async def delete(self, key):
        if key.startswith(JOBS_PREFIX) and self.failing_deletes:
            self.failing_deletes -= 1
            raise StoreError("database is locked")
        await self.store.delete(key)


class CountingEngine:
    def __init__(self):
        self.runs = 0

    async def run_cycle(self):
        self.runs += 1


class TestJobSchedulerStoreFailures:
    """A failing store must never leave the job unarmed."""

    @pytest.fixture
    def clock(self):
        return FakeClock(START_MS)

    @pytest.mark.asyncio
    async def test_create_arms_when_persist_fails(self, kv_store, clock):
        scheduler = AsyncioJobScheduler(FlakyStore(kv_store, failing_sets=1), clock)

        await scheduler.create("job-1", "tag-a", from_ms(clock.now + 60_000))

        assert scheduler.pending() == ["job-1"]
        assert await kv_store.get(JOBS_PREFIX + "job-1") is None
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_fire_dispatches_when_delete_fails(self, kv_store, clock):
        scheduler = AsyncioJobScheduler(FlakyStore(kv_store, failing_deletes=1), clock)
        fired = asyncio.Event()
        tags = []

        async def on_fire(tag):
            tags.append(tag)
            fired.set()

        scheduler.on_fire(on_fire)
        await scheduler.create("job-1", "tag-a", from_ms(clock.now))

        await asyncio.wait_for(fired.wait(), timeout=1)

        assert tags == ["tag-a"]
        assert scheduler.pending() == []
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stream_check_rearms_through_store_error(self, kv_store, clock):
        jobs = AsyncioJobScheduler(FlakyStore(kv_store, failing_sets=1), clock)
        engine = CountingEngine()
        checks = StreamCheckScheduler(jobs, engine, clock)

        await checks.run_now()

        assert engine.runs == 1
        assert jobs.pending() == [STREAM_JOB_RESOURCE_ID]

        # The next re-arm persists again once the store recovers
        await checks.arm()
        assert await kv_store.get(JOBS_PREFIX + STREAM_JOB_RESOURCE_ID) is not None
        await jobs.stop()


# =============================================================================
# Notifier Tests
# =============================================================================

class FakeMessage:
    def __init__(self, message_id):
        self.id = message_id


class FakeChannel(discord.abc.Messageable):
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def _get_channel(self):
        return self

    async def send(self, content=None, **kwargs):
        if self.fail:
            raise discord.HTTPException(FakeResponse(), "Missing Access")
        self.sent.append((content, kwargs))
        return FakeMessage(555)


class FakeResponse:
    status = 403
    reason = "Forbidden"


class FakeBot:
    def __init__(self, channels):
        self.channels = channels

    def get_channel(self, channel_id):
        return self.channels.get(channel_id)

    async def fetch_channel(self, channel_id):
        raise discord.HTTPException(FakeResponse(), "Unknown Channel")


class TestDiscordNotifier:
    """Tests for posting to Discord channels."""

    @pytest.mark.asyncio
    async def test_post(self):
        channel = FakeChannel()
        notifier = DiscordNotifier(FakeBot({100: channel}))

        message_id = await notifier.post("100", "hello <@&1>")

        assert message_id == "555"
        content, kwargs = channel.sent[0]
        assert content == "hello <@&1>"
        assert kwargs["allowed_mentions"].everyone is False

    @pytest.mark.asyncio
    async def test_invalid_channel_id(self):
        with pytest.raises(NotifierSendError):
            await DiscordNotifier(FakeBot({})).post("not-a-number", "hello")

    @pytest.mark.asyncio
    async def test_unknown_channel(self):
        with pytest.raises(NotifierSendError):
            await DiscordNotifier(FakeBot({})).post("100", "hello")

    @pytest.mark.asyncio
    async def test_send_failure(self):
        notifier = DiscordNotifier(FakeBot({100: FakeChannel(fail=True)}))

        with pytest.raises(NotifierSendError):
            await notifier.post("100", "hello")


# =============================================================================
# Command Helper Tests
# =============================================================================

class TestCommandHelpers:
    """Tests for reply splitting and guild lookup."""

    def test_split_message_on_lines(self):
        lines = [f"{i}. " + "x" * 90 for i in range(50)]

        chunks = split_message("\n".join(lines))

        assert len(chunks) > 1
        assert all(len(chunk) <= 2000 for chunk in chunks)
        assert "\n".join(chunks).splitlines() == lines

    def test_split_message_short(self):
        assert split_message("hello") == ["hello"]

    def test_split_message_long_line(self):
        chunks = split_message("y" * 4500)

        assert [len(c) for c in chunks] == [2000, 2000, 500]

    def test_get_guild_id(self):
        class Guild:
            id = 123

        class Ctx:
            guild = Guild()

        class DirectCtx:
            guild = None

        assert get_guild_id(Ctx()) == "123"
        with pytest.raises(commands.NoPrivateMessage):
            get_guild_id(DirectCtx())
