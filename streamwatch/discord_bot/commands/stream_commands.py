"""
Stream commands for StreamWatch.

This module contains the `stream` command group:
- add / list / remove: Manage the guild's subscriptions
- live: On-demand "who's live" listing
- channel / role / message / info / reset: Notification settings
- test: Post a synthetic notification
- language: Notification language
"""

import discord
from discord.ext import commands

from .base import admin_only, get_guild_id, send_long
from streamwatch.core.models import ResolveStatus
from streamwatch.core.repositories import ConfigRepository
from streamwatch.core.services import StreamService
from streamwatch.discord_bot.formatters import (
    t,
    format_streamer_list,
    format_live_listing,
    format_unavailable,
    format_stream_info,
)
from streamwatch.utils import get_logger

logger = get_logger("commands")


def setup_stream_commands(
    bot: commands.Bot,
    stream_service: StreamService,
    config_repo: ConfigRepository,
):
    """
    Register stream commands with the bot.

    Args:
        bot: The bot instance
        stream_service: Stream facade service
        config_repo: Config repository instance
    """

    async def locale_for(ctx: commands.Context) -> str:
        return await config_repo.get_language(str(ctx.guild.id) if ctx.guild else None)

    @bot.group(name="stream", invoke_without_command=True)
    @commands.guild_only()
    async def stream(ctx: commands.Context):
        """
        Stream notification commands.
        Usage: !stream <add|list|remove|live|channel|role|message|info|test|reset|language>
        """
        await ctx.send(t(await locale_for(ctx), "cmdStreamUsage"))

    @stream.command(name="help")
    async def stream_help(ctx: commands.Context):
        await ctx.send(t(await locale_for(ctx), "cmdStreamUsage"))

    @stream.command(name="add")
    @admin_only()
    async def stream_add(ctx: commands.Context, *, query: str):
        """
        Adds a YouTube or Twitch channel.
        Usage: !stream add <url | UC... id | twitch login | numeric id | name>
        """
        guild_id = get_guild_id(ctx)
        locale = await locale_for(ctx)

        async with ctx.typing():
            result = await stream_service.add_streamer(guild_id, query)

        resolution = result.resolution
        if resolution.status is ResolveStatus.UNAVAILABLE:
            await ctx.send(format_unavailable(locale, resolution.unavailable))
            return
        if result.entry is None:
            await ctx.send(t(locale, "cmdNotFound", query=query))
            return
        if not result.subscribed:
            await ctx.send(t(locale, "cmdAlreadyInList"))
            return

        logger.info(f"Guild {guild_id} subscribed to {result.entry.id}")
        await ctx.send(t(
            locale, "cmdAdded",
            name=result.entry.display_name,
            platform=result.entry.platform.value,
        ))

    @stream.command(name="list")
    async def stream_list(ctx: commands.Context):
        """
        Lists the guild's streamers.
        Usage: !stream list
        """
        entries = await stream_service.get_tenant_catalog_entries(get_guild_id(ctx))
        await send_long(ctx, format_streamer_list(await locale_for(ctx), entries))

    @stream.command(name="remove")
    @admin_only()
    async def stream_remove(ctx: commands.Context, index: int):
        """
        Removes a streamer by its number in `!stream list`.
        Usage: !stream remove <number>
        """
        locale = await locale_for(ctx)
        removed = await stream_service.unsubscribe_by_index(get_guild_id(ctx), index)
        if removed is None:
            await ctx.send(t(locale, "cmdInvalidIndex"))
            return
        await ctx.send(t(locale, "cmdRemoved", name=removed.display_name, platform=removed.platform.value))

    @stream.command(name="live")
    async def stream_live(ctx: commands.Context):
        """
        Shows who is live right now.
        Usage: !stream live
        """
        guild_id = get_guild_id(ctx)
        locale = await locale_for(ctx)

        async with ctx.typing():
            listing = await stream_service.get_live_listing(guild_id)

        if listing.total == 0:
            await ctx.send(t(locale, "cmdNoStreamers"))
            return
        await send_long(ctx, format_live_listing(locale, listing.live, listing.unavailable))

    @stream.command(name="channel")
    @admin_only()
    async def stream_channel(ctx: commands.Context, channel: discord.TextChannel):
        """
        Sets the notification channel.
        Usage: !stream channel #channel
        """
        await config_repo.set_channel(get_guild_id(ctx), str(channel.id))
        await ctx.send(t(await locale_for(ctx), "cmdConfigSaved", type="channel"))

    @stream.command(name="role")
    @admin_only()
    async def stream_role(ctx: commands.Context, role: discord.Role):
        """
        Sets the role mentioned with notifications.
        Usage: !stream role @role
        """
        await config_repo.set_mention_role(get_guild_id(ctx), str(role.id))
        await ctx.send(t(await locale_for(ctx), "cmdConfigSaved", type="role"))

    @stream.command(name="message")
    @admin_only()
    async def stream_message(ctx: commands.Context, *, template: str):
        """
        Sets a custom live message. Placeholders: {name} {platform} {url} {title}
        Usage: !stream message <text>
        """
        await config_repo.set_message_template(get_guild_id(ctx), template.strip())
        await ctx.send(t(await locale_for(ctx), "cmdConfigSaved", type="message"))

    @stream.command(name="info")
    async def stream_info(ctx: commands.Context):
        """
        Shows the current notification settings.
        Usage: !stream info
        """
        overrides = await config_repo.get_overrides(get_guild_id(ctx))
        await ctx.send(format_stream_info(
            await locale_for(ctx),
            overrides.channel_id,
            overrides.mention_role_id,
            overrides.message_template,
        ))

    @stream.command(name="reset")
    @admin_only()
    async def stream_reset(ctx: commands.Context):
        """
        Clears the notification settings (subscriptions are kept).
        Usage: !stream reset
        """
        await config_repo.reset_overrides(get_guild_id(ctx))
        await ctx.send(t(await locale_for(ctx), "cmdConfigReset", type="stream"))

    @stream.command(name="test")
    @admin_only()
    async def stream_test(ctx: commands.Context):
        """
        Posts a test notification to the configured channel.
        Usage: !stream test
        """
        guild_id = get_guild_id(ctx)
        locale = await locale_for(ctx)
        overrides = await config_repo.get_overrides(guild_id)
        if not overrides.channel_id:
            await ctx.send(t(locale, "cmdNoChannel"))
            return

        await ctx.send(t(locale, "cmdConfigTestTriggered", type="stream"))
        if not await stream_service.trigger_test(guild_id):
            await ctx.send(t(locale, "cmdTestFailed"))

    @stream.command(name="language")
    @admin_only()
    async def stream_language(ctx: commands.Context, language: str):
        """
        Sets the notification language.
        Usage: !stream language <en|pt>
        """
        guild_id = get_guild_id(ctx)
        if not await config_repo.set_language(guild_id, language):
            await ctx.send(t(await locale_for(ctx), "languageInvalid"))
            return
        await ctx.send(t(language.strip().lower(), "languageSet", language=language.strip().lower()))

    return {
        "stream": stream,
        "stream_add": stream_add,
        "stream_list": stream_list,
        "stream_remove": stream_remove,
        "stream_live": stream_live,
        "stream_channel": stream_channel,
        "stream_role": stream_role,
        "stream_message": stream_message,
        "stream_info": stream_info,
        "stream_reset": stream_reset,
        "stream_test": stream_test,
        "stream_language": stream_language,
    }
