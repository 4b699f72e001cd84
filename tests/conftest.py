"""
Pytest configuration and shared fixtures for testing.

This file contains the fakes (clock, notifier, probes, lookups, scheduler,
HTTP session) shared across the test files.
"""

import json
from collections import defaultdict, deque
from typing import Dict, List, Optional

import pytest

from streamwatch.core.interfaces import (
    ChannelLookup,
    ContentProbe,
    LiveProbe,
    Notifier,
    NotifierSendError,
    OneShotScheduler,
    ProbeUnavailableError,
)
from streamwatch.core.models import ContentStatus, LiveStatus, Platform, ResolvedChannel
from streamwatch.core.repositories import (
    SQLiteKeyValueStore,
    CatalogRepository,
    StateRepository,
    QuotaRepository,
    ConfigRepository,
)
from streamwatch.utils import MINUTE_MS, to_ms

# 2025-01-15 12:00:00 UTC
START_MS = 1736942400000


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, minutes: float = 0, ms: int = 0):
        self.now += int(minutes * MINUTE_MS) + ms


class FakeNotifier(Notifier):
    """Records posted messages; fails every post while fail is set."""

    def __init__(self):
        self.posts: List[tuple] = []
        self.attempts = 0
        self.fail = False

    async def post(self, channel_id: str, content: str) -> str:
        self.attempts += 1
        if self.fail:
            raise NotifierSendError("channel is gone")
        self.posts.append((channel_id, content))
        return str(len(self.posts))


class FakeLiveProbe(LiveProbe):
    """
    Live probe answering from per-channel scripts.

    Each check pops the next scripted status for the channel; once the
    script is exhausted the last status repeats.
    """

    def __init__(self, platform: Platform, available: bool = True):
        self.platform = platform
        self._available = available
        self.scripts: Dict[str, deque] = defaultdict(deque)
        self.last: Dict[str, LiveStatus] = {}
        self.calls: List[str] = []

    @property
    def available(self) -> bool:
        return self._available

    def script(self, external_id: str, *statuses: LiveStatus):
        self.scripts[external_id].extend(statuses)

    async def check_live(self, external_id: str) -> LiveStatus:
        self.calls.append(external_id)
        queue = self.scripts[external_id]
        if queue:
            self.last[external_id] = queue.popleft()
        return self.last.get(external_id, LiveStatus.not_live())


class FakeContentProbe(ContentProbe):
    """Content probe returning a settable result."""

    def __init__(self, available: bool = True):
        self._available = available
        self.result = ContentStatus.none()
        self.calls: List[str] = []

    @property
    def available(self) -> bool:
        return self._available

    async def check_latest_content(self, external_id: str) -> ContentStatus:
        self.calls.append(external_id)
        return self.result


class FakeLookup(ChannelLookup):
    """Channel lookup backed by dictionaries."""

    def __init__(self, platform: Platform, available: bool = True):
        self.platform = platform
        self._available = available
        self.by_id: Dict[str, ResolvedChannel] = {}
        self.by_name: Dict[str, ResolvedChannel] = {}
        self.calls: List[tuple] = []
        self.unavailable_error = False

    @property
    def available(self) -> bool:
        return self._available

    def add(self, external_id: str, name: str, *aliases: str) -> ResolvedChannel:
        channel = ResolvedChannel(self.platform, external_id, name)
        self.by_id[external_id] = channel
        for alias in (name, *aliases):
            self.by_name[alias.lower()] = channel
        return channel

    async def find_by_id(self, external_id: str) -> Optional[ResolvedChannel]:
        self.calls.append(("id", external_id))
        if self.unavailable_error:
            raise ProbeUnavailableError("quota blocked")
        return self.by_id.get(external_id)

    async def find_by_name(self, name: str) -> Optional[ResolvedChannel]:
        self.calls.append(("name", name))
        if self.unavailable_error:
            raise ProbeUnavailableError("quota blocked")
        return self.by_name.get(name.lower())


class FakeScheduler(OneShotScheduler):
    """Records created jobs and lets tests fire or miss them by hand."""

    def __init__(self):
        self.created: List[tuple] = []
        self.fire_callbacks = []
        self.missed_callbacks = []

    async def create(self, resource_id, tag, start) -> None:
        self.created.append((resource_id, tag, to_ms(start)))

    def on_fire(self, callback) -> None:
        self.fire_callbacks.append(callback)

    def on_missed(self, callback) -> None:
        self.missed_callbacks.append(callback)

    async def fire(self, tag: str):
        for callback in self.fire_callbacks:
            await callback(tag)

    async def miss(self, tag: str):
        for callback in self.missed_callbacks:
            await callback(tag)


class FakeResponse:
    """Minimal aiohttp response stand-in used as an async context manager."""

    def __init__(self, status: int, body: str, url: str):
        self.status = status
        self.url = url
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """
    Routes session.request() calls to queued responses by (method, url).

    Responses are (status, body) or (status, body, final_url); bodies that
    are not strings are JSON-encoded. The last queued response repeats.
    """

    def __init__(self):
        self.routes: Dict[tuple, deque] = defaultdict(deque)
        self.last: Dict[tuple, tuple] = {}
        self.requests: List[dict] = []

    def add(self, method: str, url: str, *responses):
        self.routes[(method, url)].extend(responses)

    def count(self, method: str, url: str) -> int:
        return sum(1 for r in self.requests if r["method"] == method and r["url"] == url)

    def request(self, method, url, params=None, headers=None, allow_redirects=True):
        self.requests.append({"method": method, "url": url, "params": params, "headers": headers})
        key = (method, url)
        if self.routes[key]:
            self.last[key] = self.routes[key].popleft()
        if key not in self.last:
            raise AssertionError(f"Unexpected request: {method} {url}")
        status, body, *rest = self.last[key]
        if not isinstance(body, str):
            body = json.dumps(body)
        return FakeResponse(status, body, rest[0] if rest else url)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def kv_store(tmp_path):
    """SQLite key-value store in a temporary directory."""
    store = SQLiteKeyValueStore(str(tmp_path / "test.db"))
    await store.initialize()
    return store


@pytest.fixture
def catalog(kv_store):
    return CatalogRepository(kv_store)


@pytest.fixture
def states(kv_store):
    return StateRepository(kv_store)


@pytest.fixture
def config_repo(kv_store):
    return ConfigRepository(kv_store)


@pytest.fixture
def quota(kv_store, clock):
    return QuotaRepository(kv_store, clock)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def session():
    return FakeSession()
