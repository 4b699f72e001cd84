"""
Application initialization module.

This module provides functions to initialize StreamWatch with all its
components wired together.

Usage:
    from streamwatch.app import create_bot, create_bot_app

    bot = create_bot(settings)
    app = await create_bot_app(bot, settings)
    await bot.start(settings.discord_token)
"""

import asyncio
from typing import Any, Dict

import aiohttp
import discord
from discord.ext import commands

from streamwatch.config import Settings
from streamwatch.core.models import Platform
from streamwatch.core.repositories import (
    SQLiteKeyValueStore,
    CatalogRepository,
    StateRepository,
    QuotaRepository,
    ConfigRepository,
)
from streamwatch.core.services import (
    IdentifierResolver,
    NotificationService,
    PollCycleEngine,
    StreamCheckScheduler,
    StreamService,
)
from streamwatch.discord_bot import (
    AsyncioJobScheduler,
    DiscordMessageFormatter,
    DiscordNotifier,
)
from streamwatch.discord_bot.commands import setup_all_commands
from streamwatch.discord_bot.handlers import setup_handlers, register_handlers
from streamwatch.integrations import create_session
from streamwatch.integrations.twitch import TwitchClient, TwitchLiveProbe, TwitchTokenProvider
from streamwatch.integrations.youtube import YouTubeClient, YouTubeContentProbe, YouTubeLiveProbe
from streamwatch.utils import BOT_VERSION, STREAM_JOB_RESOURCE_ID, get_logger

logger = get_logger("app")


async def initialize_repositories(settings: Settings) -> Dict[str, Any]:
    """
    Initialize the store and all repositories on top of it.

    Args:
        settings: Bot settings

    Returns:
        Dictionary containing initialized repository instances
    """
    store = SQLiteKeyValueStore(settings.db_path)
    await store.initialize()

    return {
        "store": store,
        "catalog": CatalogRepository(store),
        "state": StateRepository(store),
        "quota": QuotaRepository(store),
        "config": ConfigRepository(store, default_language=settings.language),
    }


def initialize_integrations(
    session: aiohttp.ClientSession,
    settings: Settings,
    repos: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Initialize the platform clients and probes.

    Args:
        session: Shared HTTP session
        settings: Bot settings
        repos: Dictionary of initialized repositories

    Returns:
        Dictionary containing client and probe instances
    """
    youtube = YouTubeClient(session, settings.youtube_api_key, repos["quota"])
    twitch = TwitchClient(
        session,
        TwitchTokenProvider(session, settings.twitch_client_id, settings.twitch_client_secret),
    )

    if not settings.has_youtube_api:
        logger.warning("YOUTUBE_API_KEY is not set; YouTube content checks and search are disabled")
    if not settings.has_twitch:
        logger.warning("Twitch credentials are not set; Twitch checks are disabled")

    return {
        "youtube": youtube,
        "twitch": twitch,
        "live_probes": {
            Platform.YOUTUBE: YouTubeLiveProbe(youtube),
            Platform.TWITCH: TwitchLiveProbe(twitch),
        },
        "content_probe": YouTubeContentProbe(youtube),
    }


def initialize_services(
    bot: commands.Bot,
    repos: Dict[str, Any],
    integrations: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Initialize all services with their dependencies.

    Args:
        bot: Discord bot instance
        repos: Dictionary of initialized repositories
        integrations: Dictionary of clients and probes

    Returns:
        Dictionary containing initialized service instances
    """
    notifications = NotificationService(DiscordNotifier(bot), DiscordMessageFormatter())
    job_scheduler = AsyncioJobScheduler(repos["store"])

    engine = PollCycleEngine(
        repos["catalog"],
        repos["state"],
        repos["config"],
        integrations["live_probes"],
        integrations["content_probe"],
        notifications,
    )

    return {
        "notification": notifications,
        "job_scheduler": job_scheduler,
        "engine": engine,
        "stream_check": StreamCheckScheduler(job_scheduler, engine),
        "stream": StreamService(
            IdentifierResolver(integrations["youtube"], integrations["twitch"]),
            repos["catalog"],
            repos["config"],
            integrations["live_probes"],
            notifications,
        ),
    }


def setup_bot_commands(bot: commands.Bot, repos: Dict[str, Any], services: Dict[str, Any]):
    """
    Set up all bot commands.

    Args:
        bot: Discord bot instance
        repos: Dictionary of repositories
        services: Dictionary of services
    """
    setup_all_commands(
        bot,
        stream_service=services["stream"],
        config_repo=repos["config"],
    )


async def start_stream_checks(services: Dict[str, Any]):
    """
    Restore persisted jobs and make sure the recurring check is armed.

    A job that came due while the bot was down is reported as missed and
    runs right away; if no job was persisted at all, a fresh one is armed.
    """
    stream_check: StreamCheckScheduler = services["stream_check"]
    job_scheduler: AsyncioJobScheduler = services["job_scheduler"]

    stream_check.attach()
    restored = await job_scheduler.start()
    if STREAM_JOB_RESOURCE_ID not in restored:
        await stream_check.arm()
    logger.info(f"Stream checks started (restored jobs: {len(restored)})")


def create_bot(settings: Settings) -> commands.Bot:
    """Create the Discord bot with the intents text commands need."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True

    return commands.Bot(
        command_prefix=settings.command_prefix,
        intents=intents,
        help_command=commands.DefaultHelpCommand(),
    )


async def create_bot_app(bot: commands.Bot, settings: Settings) -> Dict[str, Any]:
    """
    Create and initialize the full bot application.

    Args:
        bot: Discord bot instance
        settings: Bot settings

    Returns:
        Dictionary with the session, repos, integrations and services
    """
    repos = await initialize_repositories(settings)
    session = create_session(settings.http_timeout)
    integrations = initialize_integrations(session, settings, repos)
    services = initialize_services(bot, repos, integrations)

    setup_bot_commands(bot, repos, services)

    async def on_first_ready(_bot):
        # Run outside the ready listener so a slow first cycle does not block it
        services["startup_task"] = asyncio.create_task(
            start_stream_checks(services), name="stream-checks-start"
        )

    handlers = setup_handlers(
        bot,
        startup_callbacks=[on_first_ready],
        status_message=f"streams | v{BOT_VERSION}",
    )
    await register_handlers(handlers)

    return {
        "session": session,
        "repos": repos,
        "integrations": integrations,
        "services": services,
    }


async def close_bot_app(app: Dict[str, Any]):
    """Stop pending jobs and close the HTTP session."""
    await app["services"]["job_scheduler"].stop()
    await app["session"].close()
    logger.info("StreamWatch stopped")
