"""
Discord bot commands module.

Commands are registered through setup functions that receive their
dependencies (services and repositories) explicitly.
"""

from typing import Any, Dict

from discord.ext import commands

from .base import (
    MAX_MESSAGE_LENGTH,
    admin_only,
    get_guild_id,
    split_message,
    send_long,
)
from .stream_commands import setup_stream_commands


def setup_all_commands(
    bot: commands.Bot,
    *,
    stream_service=None,
    config_repo=None,
) -> Dict[str, Any]:
    """
    Set up all commands for the bot.

    Args:
        bot: The bot instance
        stream_service: StreamService instance
        config_repo: ConfigRepository instance

    Returns:
        Dictionary of command name -> command
    """
    all_commands = {}

    # Stream commands (require the facade and config)
    if stream_service and config_repo:
        all_commands.update(setup_stream_commands(bot, stream_service, config_repo))

    return all_commands


__all__ = [
    # Base utilities
    'MAX_MESSAGE_LENGTH',
    'admin_only',
    'get_guild_id',
    'split_message',
    'send_long',
    # Setup functions
    'setup_stream_commands',
    'setup_all_commands',
]
