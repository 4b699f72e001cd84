"""
SQLite implementation of the key-value store.

Values are opaque strings; the repositories built on top of this store
JSON-encode their records.
"""

from typing import List, Optional

from streamwatch.core.interfaces import KeyValueStore
from .base import BaseRepository


class SQLiteKeyValueStore(BaseRepository, KeyValueStore):
    """SQLite implementation of KeyValueStore."""

    def __init__(self, db_path: str = "streamwatch_data.db"):
        super().__init__(db_path)

    async def initialize(self):
        """Initialize the database schema."""
        async with self.get_connection() as conn:
            await conn.execute('''
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            ''')
            await conn.commit()

    async def get(self, key: str) -> Optional[str]:
        row = await self.fetch_one(
            "SELECT value FROM kv_store WHERE key = ?",
            (key,)
        )
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        await self.execute(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, value)
        )

    async def delete(self, key: str) -> bool:
        return await self.execute("DELETE FROM kv_store WHERE key = ?", (key,)) > 0

    async def keys(self, prefix: str = "") -> List[str]:
        # substr comparison avoids LIKE wildcard escaping for ':' and '_' in keys
        rows = await self.fetch_all(
            "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix)
        )
        return [row[0] for row in rows]
