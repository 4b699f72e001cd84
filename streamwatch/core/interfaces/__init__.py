"""
Core interfaces package for StreamWatch.

This package contains abstract interfaces for the capabilities the poll
engine consumes: persistence, platform probes, message posting and one-shot
scheduling.
"""

from .database_interface import (
    KeyValueStore,
    StoreError,
)
from .probe_interface import (
    LiveProbe,
    ContentProbe,
    ProbeError,
    ProbeConnectionError,
    ProbeParseError,
    ProbeUnavailableError,
    ChannelLookup,
)
from .notifier_interface import (
    Notifier,
    NotifierError,
    NotifierSendError,
    MessageFormatter,
)
from .scheduler_interface import (
    OneShotScheduler,
    JobCallback,
)

__all__ = [
    # Persistence
    'KeyValueStore',
    'StoreError',
    # Probes
    'LiveProbe',
    'ContentProbe',
    'ProbeError',
    'ProbeConnectionError',
    'ProbeParseError',
    'ProbeUnavailableError',
    'ChannelLookup',
    # Notifier
    'Notifier',
    'NotifierError',
    'NotifierSendError',
    'MessageFormatter',
    # Scheduler
    'OneShotScheduler',
    'JobCallback',
]
