"""
Core package for StreamWatch.

This package contains the presence-detection and notification logic:
- models: Domain entities (CatalogEntry, ChannelState, probe results)
- interfaces: Abstract base classes (store, probes, notifier, scheduler)
- repositories: Key-value store and the repositories built on it
- services: Resolver, poll cycle engine, scheduling and facade services
"""

from .models import (
    # Enums
    Platform,
    ContentKind,
    ProbeOutcome,
    ResolveStatus,
    # Models
    CatalogEntry,
    ChannelState,
    LiveStatus,
    ContentStatus,
    StreamOverrides,
)

from .interfaces import (
    KeyValueStore,
    StoreError,
    LiveProbe,
    ContentProbe,
    ChannelLookup,
    ProbeError,
    Notifier,
    NotifierError,
    MessageFormatter,
    OneShotScheduler,
)

from .repositories import (
    SQLiteKeyValueStore,
    CatalogRepository,
    StateRepository,
    QuotaRepository,
    ConfigRepository,
)

from .services import (
    IdentifierResolver,
    NotificationService,
    PollCycleEngine,
    StreamCheckScheduler,
    StreamService,
)

__all__ = [
    # Models
    'Platform',
    'ContentKind',
    'ProbeOutcome',
    'ResolveStatus',
    'CatalogEntry',
    'ChannelState',
    'LiveStatus',
    'ContentStatus',
    'StreamOverrides',
    # Interfaces
    'KeyValueStore',
    'StoreError',
    'LiveProbe',
    'ContentProbe',
    'ChannelLookup',
    'ProbeError',
    'Notifier',
    'NotifierError',
    'MessageFormatter',
    'OneShotScheduler',
    # Repositories
    'SQLiteKeyValueStore',
    'CatalogRepository',
    'StateRepository',
    'QuotaRepository',
    'ConfigRepository',
    # Services
    'IdentifierResolver',
    'NotificationService',
    'PollCycleEngine',
    'StreamCheckScheduler',
    'StreamService',
]
