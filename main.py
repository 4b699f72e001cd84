"""
StreamWatch entry point.

Reads settings from the environment (and .env), wires the application and
runs the bot until it is stopped.
"""

import asyncio
import logging
import signal
import sys

from streamwatch.app import create_bot, create_bot_app, close_bot_app
from streamwatch.config import Settings
from streamwatch.utils import setup_logging


async def main() -> int:
    settings = Settings.from_env()
    logger = setup_logging(level=settings.log_level, log_file=settings.log_file)

    if not settings.discord_token:
        logger.error("DISCORD_TOKEN is not set")
        return 1

    bot = create_bot(settings)
    async with bot:
        app = await create_bot_app(bot, settings)

        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, lambda s=signum: asyncio.create_task(shutdown(bot, s)))
            except NotImplementedError:
                # Not supported on Windows event loops
                pass

        try:
            await bot.start(settings.discord_token)
        finally:
            await close_bot_app(app)
    return 0


async def shutdown(bot, signum):
    logging.getLogger("streamwatch").info(f"Received signal {signum}, shutting down gracefully...")
    await bot.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
