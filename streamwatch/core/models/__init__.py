"""
Core models package for StreamWatch.

This package contains domain models (entities) used throughout the application.
"""

from .enums import (
    Platform,
    ContentKind,
    ProbeOutcome,
    ResolveStatus,
)
from .catalog import (
    CatalogEntry,
    ResolvedChannel,
    ResolveResult,
    make_catalog_id,
    normalize_external_id,
)
from .state import ChannelState
from .probe import LiveStatus, ContentStatus
from .overrides import StreamOverrides

__all__ = [
    # Enums
    'Platform',
    'ContentKind',
    'ProbeOutcome',
    'ResolveStatus',
    # Models
    'CatalogEntry',
    'ResolvedChannel',
    'ResolveResult',
    'ChannelState',
    'LiveStatus',
    'ContentStatus',
    'StreamOverrides',
    # Helpers
    'make_catalog_id',
    'normalize_external_id',
]
