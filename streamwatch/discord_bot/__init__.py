"""
Discord Bot package for StreamWatch.

This package contains the Discord presentation layer:
- formatters: Localized message texts and formatting
- commands: Bot command implementations
- handlers: Event handlers
- notifier: Posting to Discord channels
- scheduler: One-shot job scheduler on the bot's event loop
"""

from .formatters import (
    MESSAGES,
    t,
    format_stream_message,
    format_content_message,
    DiscordMessageFormatter,
    format_streamer_list,
    format_live_listing,
)

from .notifier import DiscordNotifier
from .scheduler import AsyncioJobScheduler, JOBS_PREFIX


__all__ = [
    # Formatters
    'MESSAGES',
    't',
    'format_stream_message',
    'format_content_message',
    'DiscordMessageFormatter',
    'format_streamer_list',
    'format_live_listing',
    # Adapters
    'DiscordNotifier',
    'AsyncioJobScheduler',
    'JOBS_PREFIX',
]
