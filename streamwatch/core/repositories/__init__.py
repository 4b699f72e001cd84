"""
Repository implementations package for StreamWatch.

This package contains the SQLite key-value store and the repositories
layered on top of it.
"""

from .base import BaseRepository
from .kv_repository import SQLiteKeyValueStore
from .catalog_repository import CatalogRepository
from .state_repository import StateRepository
from .quota_repository import QuotaRepository, QUOTA_KEY
from .config_repository import ConfigRepository

__all__ = [
    'BaseRepository',
    'SQLiteKeyValueStore',
    'CatalogRepository',
    'StateRepository',
    'QuotaRepository',
    'QUOTA_KEY',
    'ConfigRepository',
]
