"""
Abstract persistence interface for StreamWatch.

All state lives behind a small key-value contract with opaque string
values; repositories above it own the JSON encoding.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class StoreError(Exception):
    """Raised when the persistence backend fails."""
    pass


class KeyValueStore(ABC):
    """Abstract interface for key-value persistence."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored string or None if absent

        Raises:
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Raises:
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if a value was removed

        Raises:
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    async def keys(self, prefix: str = "") -> List[str]:
        """
        List keys starting with a prefix, in lexical order.

        Raises:
            StoreError: If the backend fails
        """
        pass
