"""
Discord formatting utilities for StreamWatch.

This package provides:
- messages: Localized notification and command reply texts
"""

from .messages import (
    MESSAGES,
    t,
    substitute,
    format_stream_message,
    format_content_message,
    DiscordMessageFormatter,
    format_streamer_line,
    format_streamer_list,
    format_live_listing,
    format_unavailable,
    format_stream_info,
)

__all__ = [
    'MESSAGES',
    't',
    'substitute',
    'format_stream_message',
    'format_content_message',
    'DiscordMessageFormatter',
    'format_streamer_line',
    'format_streamer_list',
    'format_live_listing',
    'format_unavailable',
    'format_stream_info',
]
