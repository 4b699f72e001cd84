"""
Base repository class with common database utilities.

This module provides a base class for SQLite repositories with
connection management, WAL mode, and common utilities.
"""

import aiosqlite
import os
from typing import Optional, List
from contextlib import asynccontextmanager

from streamwatch.core.interfaces import StoreError


class BaseRepository:
    """
    Base class for SQLite repositories.

    Provides common database utilities and connection management.
    aiosqlite errors surface as StoreError.
    """

    def __init__(self, db_path: str):
        """
        Initialize the repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._ensure_directory()

    def _ensure_directory(self):
        """Ensure the directory for the database file exists."""
        directory = os.path.dirname(self.db_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)

    @asynccontextmanager
    async def get_connection(self):
        """
        Get an async database connection with optimal settings.

        Usage:
            async with self.get_connection() as conn:
                await conn.execute(...)

        Yields:
            aiosqlite.Connection: Database connection
        """
        try:
            conn = await aiosqlite.connect(self.db_path)
        except aiosqlite.Error as e:
            raise StoreError(f"Cannot open database {self.db_path}: {e}") from e
        try:
            # Enable WAL mode for better concurrency
            await conn.execute("PRAGMA journal_mode=WAL")
            # Balance between safety and performance
            await conn.execute("PRAGMA synchronous=NORMAL")
            yield conn
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e
        finally:
            await conn.close()

    async def execute(self, query: str, params: tuple = ()) -> int:
        """
        Execute a query and return the number of rows affected.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            Rows affected
        """
        async with self.get_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.rowcount

    async def fetch_one(self, query: str, params: tuple = ()) -> Optional[tuple]:
        """
        Fetch a single row.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            Single row tuple or None
        """
        async with self.get_connection() as conn:
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchone()

    async def fetch_all(self, query: str, params: tuple = ()) -> List[tuple]:
        """
        Fetch all rows.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            List of row tuples
        """
        async with self.get_connection() as conn:
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchall()
