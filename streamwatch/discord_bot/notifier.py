"""
Discord implementation of the Notifier interface.
"""

import discord
from discord.ext import commands

from streamwatch.core.interfaces import Notifier, NotifierSendError
from streamwatch.utils import get_logger

logger = get_logger("notifier")


class DiscordNotifier(Notifier):
    """Posts notifications to Discord text channels."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def post(self, channel_id: str, content: str) -> str:
        try:
            channel_int = int(channel_id)
        except (TypeError, ValueError) as e:
            raise NotifierSendError(f"Invalid channel id: {channel_id!r}") from e

        try:
            channel = self.bot.get_channel(channel_int)
            if channel is None:
                channel = await self.bot.fetch_channel(channel_int)
            if not isinstance(channel, discord.abc.Messageable):
                raise NotifierSendError(f"Channel {channel_id} cannot receive messages")
            message = await channel.send(
                content,
                allowed_mentions=discord.AllowedMentions(roles=True, everyone=False),
            )
        except discord.HTTPException as e:
            # NotFound and Forbidden are HTTPException subclasses
            raise NotifierSendError(f"Failed to post to channel {channel_id}: {e}") from e

        logger.debug(f"Posted message {message.id} to channel {channel_id}")
        return str(message.id)
