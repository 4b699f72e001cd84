"""
StreamWatch - Discord live-stream notification bot

Polls YouTube and Twitch for channels that guilds subscribe to and posts a
notification when a channel goes live or publishes new content.

Package structure:
- core/: Presence-detection logic (models, interfaces, repositories, services)
- integrations/: YouTube and Twitch clients and probes
- discord_bot/: Discord-specific code (commands, formatters, notifier, scheduler, handlers)
- utils/: Shared utilities (logging, time helpers, constants)
- config.py: Settings loaded from the environment
- app.py: Application wiring

Usage:
    from streamwatch.config import Settings
    from streamwatch.app import StreamWatchApp
"""

__version__ = "1.0.0"

from streamwatch.core.models import Platform, CatalogEntry, ChannelState
from streamwatch.utils import setup_logging, get_logger, BOT_VERSION

__all__ = [
    '__version__',
    'Platform',
    'CatalogEntry',
    'ChannelState',
    'setup_logging',
    'get_logger',
    'BOT_VERSION',
]
