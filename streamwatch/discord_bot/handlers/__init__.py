"""
Discord event handlers module.

This module provides event handler classes for Discord bot events:
- Error handling (command errors)
- Ready handling (startup callbacks, status updates)
"""

from typing import Optional, Callable, Dict, List
from abc import ABC, abstractmethod
import asyncio
import discord
from discord.ext import commands

from streamwatch.utils import get_logger

logger = get_logger("handlers")


class BaseHandler(ABC):
    """Abstract base class for Discord event handlers."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @abstractmethod
    async def setup(self) -> None:
        """Register this handler with the bot."""
        pass


class ErrorHandler(BaseHandler):
    """
    Handles command errors gracefully.

    Replies with a short message and logs anything unexpected.
    """

    async def setup(self) -> None:
        """Register error handlers with the bot."""
        self.bot.add_listener(self.on_command_error, 'on_command_error')

    async def on_command_error(
        self,
        ctx: commands.Context,
        error: commands.CommandError,
    ) -> None:
        """Handle command errors."""
        # Ignore commands that have their own error handlers
        if ctx.command is not None and ctx.command.has_error_handler():
            return

        # Get the original error if wrapped
        error = getattr(error, 'original', error)

        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.NoPrivateMessage):
            await ctx.send("This command only works in a server.")
            return

        if isinstance(error, commands.MissingRequiredArgument):
            await ctx.send(
                f"Missing required argument: `{error.param.name}`\n"
                f"Usage: `{ctx.prefix}{ctx.command.qualified_name} {ctx.command.signature}`"
            )
            return

        if isinstance(error, commands.BadArgument):
            await ctx.send(f"Invalid argument: {error}")
            return

        if isinstance(error, commands.CheckFailure):
            await ctx.send("You need the Manage Server permission to use this command.")
            return

        if isinstance(error, discord.Forbidden):
            await ctx.send("I don't have permission to do that.")
            return

        if isinstance(error, discord.HTTPException):
            await ctx.send(f"Discord API error: {error}")
            return

        logger.error(
            f"Unexpected error in command {ctx.command}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )
        await ctx.send("An unexpected error occurred. The error has been logged.")


class ReadyHandler(BaseHandler):
    """
    Handles the bot ready event.

    Startup callbacks run once, on the first ready event; reconnects only
    refresh the status.
    """

    def __init__(
        self,
        bot: commands.Bot,
        startup_callbacks: Optional[List[Callable]] = None,
        status_message: Optional[str] = None,
    ):
        super().__init__(bot)
        self.startup_callbacks = startup_callbacks or []
        self.status_message = status_message
        self._started = False

    async def setup(self) -> None:
        """Register ready handler with the bot."""
        self.bot.add_listener(self.on_ready, 'on_ready')

    async def on_ready(self) -> None:
        """Handle bot ready event."""
        logger.info(f"Logged in as {self.bot.user} (ID: {self.bot.user.id})")

        if self.status_message:
            await self.bot.change_presence(
                activity=discord.Activity(
                    type=discord.ActivityType.watching,
                    name=self.status_message,
                )
            )

        if self._started:
            return
        self._started = True

        for callback in self.startup_callbacks:
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(self.bot)
                else:
                    callback(self.bot)
            except Exception:
                logger.exception("Startup callback failed")

        logger.info("Bot is ready!")


def setup_handlers(
    bot: commands.Bot,
    *,
    startup_callbacks: Optional[List[Callable]] = None,
    status_message: Optional[str] = None,
) -> Dict[str, BaseHandler]:
    """
    Set up all handlers for the bot.

    Args:
        bot: The Discord bot instance
        startup_callbacks: Functions to call when the bot is first ready
        status_message: Bot status message to display

    Returns:
        Dictionary of handler name -> handler instance
    """
    return {
        'error': ErrorHandler(bot),
        'ready': ReadyHandler(bot, startup_callbacks, status_message),
    }


async def register_handlers(handlers: Dict[str, BaseHandler]) -> None:
    """Register all handlers with the bot."""
    for name, handler in handlers.items():
        try:
            await handler.setup()
            logger.info(f"Registered {name} handler")
        except Exception:
            logger.exception(f"Failed to register {name} handler")


__all__ = [
    'BaseHandler',
    'ErrorHandler',
    'ReadyHandler',
    'setup_handlers',
    'register_handlers',
]
