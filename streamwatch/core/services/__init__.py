"""
Core services package for StreamWatch.

This package contains business logic services:
- IdentifierResolver: Free-form input to canonical channels
- NotificationService: Rendering and posting notifications
- PollCycleEngine: Per-channel state machine run every cycle
- StreamCheckScheduler: Recurring polling over a one-shot scheduler
- StreamService: Facade for the command layer
"""

from .resolver_service import (
    IdentifierResolver,
    split_hint,
    match_platform_url,
)

from .notification_service import (
    NotificationService,
    NotificationTarget,
)

from .poll_service import (
    PollCycleEngine,
    CycleReport,
    GuildCycleResult,
)

from .scheduler_service import StreamCheckScheduler

from .stream_service import (
    StreamService,
    AddResult,
    LiveListing,
)

__all__ = [
    # Resolver
    'IdentifierResolver',
    'split_hint',
    'match_platform_url',
    # Notifications
    'NotificationService',
    'NotificationTarget',
    # Poll cycle
    'PollCycleEngine',
    'CycleReport',
    'GuildCycleResult',
    # Scheduling
    'StreamCheckScheduler',
    # Facade
    'StreamService',
    'AddResult',
    'LiveListing',
]
