"""
Abstract probe interfaces for StreamWatch.

A probe is a stateless query against one platform for the current live or
content status of a channel. Implementations convert every failure into a
tagged result; the errors below are raised only inside integration clients.
"""

from abc import ABC, abstractmethod
from typing import Optional

from streamwatch.core.models import ContentStatus, LiveStatus, Platform, ResolvedChannel


class ProbeError(Exception):
    """Base exception for platform query failures."""
    pass


class ProbeConnectionError(ProbeError):
    """Raised when a platform cannot be reached or answers with an HTTP error."""

    def __init__(self, message: str, status: int = 0, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(message)


class ProbeParseError(ProbeError):
    """Raised when a platform response cannot be interpreted."""
    pass


class LiveProbe(ABC):
    """Queries one platform for whether a channel is live right now."""

    platform: Platform

    @property
    def available(self) -> bool:
        """Whether the probe has what it needs (credentials) to run."""
        return True

    @abstractmethod
    async def check_live(self, external_id: str) -> LiveStatus:
        """
        Check whether a channel is live.

        Args:
            external_id: Platform channel id

        Returns:
            LiveStatus (never raises)
        """
        pass


class ContentProbe(ABC):
    """Queries a platform for a channel's most recent published content."""

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def check_latest_content(self, external_id: str) -> ContentStatus:
        """
        Get the latest upload of a channel.

        Args:
            external_id: Platform channel id

        Returns:
            ContentStatus (never raises)
        """
        pass


class ProbeUnavailableError(ProbeError):
    """Raised when a platform cannot be queried right now (quota blocked, no token)."""
    pass


class ChannelLookup(ABC):
    """Finds a platform channel by id or by name for the identifier resolver."""

    platform: Platform

    @property
    def available(self) -> bool:
        """Whether credentials for lookups are configured."""
        return True

    @abstractmethod
    async def find_by_id(self, external_id: str) -> Optional[ResolvedChannel]:
        """
        Look up a channel by its platform id.

        Returns:
            ResolvedChannel or None if not found

        Raises:
            ProbeUnavailableError: If the platform cannot be queried right now
            ProbeError: On other failures
        """
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[ResolvedChannel]:
        """Look up a channel by name or login (same contract as find_by_id)."""
        pass
