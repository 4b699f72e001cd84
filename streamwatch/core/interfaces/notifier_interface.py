"""
Abstract notifier interface for StreamWatch.

This module defines the abstract base class for message delivery, keeping
the poll cycle independent of Discord.
"""

from abc import ABC, abstractmethod
from typing import Optional

from streamwatch.core.models import ContentKind


class NotifierError(Exception):
    """Base exception for notifier errors."""
    pass


class NotifierSendError(NotifierError):
    """Raised when a message cannot be posted."""
    pass


class Notifier(ABC):
    """Posts plain-text messages to a channel."""

    @abstractmethod
    async def post(self, channel_id: str, content: str) -> str:
        """
        Post a message to a channel.

        Args:
            channel_id: Target channel ID
            content: Message text

        Returns:
            ID of the created message

        Raises:
            NotifierSendError: If the message could not be posted
        """
        pass


class MessageFormatter(ABC):
    """Renders notification texts for a locale."""

    @abstractmethod
    def live_message(
        self,
        locale: str,
        platform: str,
        name: str,
        url: str,
        title: Optional[str] = None,
        mention: str = "",
        template: Optional[str] = None,
    ) -> str:
        """
        Render a "went live" notification.

        Args:
            locale: Locale code
            platform: Platform label shown to users
            name: Channel display name
            url: Watch URL
            title: Stream title
            mention: Role mention, empty for none
            template: Custom template with {name} {platform} {url} {title}

        Returns:
            Message text
        """
        pass

    @abstractmethod
    def content_message(
        self,
        locale: str,
        kind: ContentKind,
        name: str,
        url: str,
        title: Optional[str] = None,
        mention: str = "",
    ) -> str:
        """Render a new video / premiere notification."""
        pass
