"""
Catalog entity models for StreamWatch.

A catalog entry identifies one trackable streaming channel and is shared by
every guild that subscribes to it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .enums import Platform, ResolveStatus


def normalize_external_id(external_id: str) -> str:
    """Normalize an external id for catalog identity (trimmed, lowercase)."""
    return external_id.strip().lower()


def make_catalog_id(platform: Platform, external_id: str) -> str:
    """
    Build the canonical catalog id for a channel.

    Equivalent inputs (case, surrounding whitespace) always collide.

    Args:
        platform: Platform of the channel
        external_id: YouTube channel id or Twitch user id/login

    Returns:
        Catalog id such as "youtube:ucabc..."
    """
    return f"{Platform(platform).value}:{normalize_external_id(external_id)}"


@dataclass
class CatalogEntry:
    """
    Globally shared record for one streaming channel.

    Attributes:
        platform: Platform the channel lives on
        external_id: Platform id, stored as first provided
        display_name: Name shown in lists and notifications
    """
    platform: Platform
    external_id: str
    display_name: str

    @property
    def id(self) -> str:
        return make_catalog_id(self.platform, self.external_id)

    @property
    def state_key(self) -> str:
        """Key of this channel in a guild's state map."""
        return f"{self.platform.value}:{self.external_id}"

    @property
    def default_url(self) -> str:
        if self.platform is Platform.YOUTUBE:
            return f"https://youtube.com/channel/{self.external_id}"
        return f"https://twitch.tv/{self.external_id}"

    def to_dict(self) -> dict:
        """Convert entry to dictionary for storage."""
        return {
            'platform': self.platform.value,
            'externalId': self.external_id,
            'displayName': self.display_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CatalogEntry':
        """Create an entry from its stored dictionary."""
        return cls(
            platform=Platform(data['platform']),
            external_id=data['externalId'],
            display_name=data.get('displayName') or data['externalId'],
        )


@dataclass(frozen=True)
class ResolvedChannel:
    """Canonical (platform, externalId, displayName) produced by the resolver."""
    platform: Platform
    external_id: str
    display_name: str


@dataclass
class ResolveResult:
    """
    Result of resolving free-form input.

    Attributes:
        status: RESOLVED, NOT_FOUND or UNAVAILABLE
        channel: The resolved channel when status is RESOLVED
        unavailable: Platforms that could not be queried (missing credentials)
    """
    status: ResolveStatus
    channel: Optional[ResolvedChannel] = None
    unavailable: List[Platform] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is ResolveStatus.RESOLVED
