"""
Runtime configuration for StreamWatch.

Settings are read once from the environment (and an optional .env file)
and passed explicitly to the components that need them.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from streamwatch.utils import DEFAULT_COMMAND_PREFIX, DEFAULT_LOCALE, SUPPORTED_LOCALES


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """
    Bot settings.

    Attributes:
        discord_token: Discord bot token
        db_path: SQLite file backing the key-value store
        youtube_api_key: YouTube Data API key (None disables credentialed calls)
        twitch_client_id: Twitch application client id
        twitch_client_secret: Twitch application client secret
        language: Default locale for notifications
        command_prefix: Prefix for text commands
        log_file: Optional log file path
        log_level: Logging level
        http_timeout: Total timeout in seconds for each outbound HTTP call
    """
    discord_token: Optional[str] = None
    db_path: str = "streamwatch_data.db"
    youtube_api_key: Optional[str] = None
    twitch_client_id: Optional[str] = None
    twitch_client_secret: Optional[str] = None
    language: str = DEFAULT_LOCALE
    command_prefix: str = DEFAULT_COMMAND_PREFIX
    log_file: Optional[str] = None
    log_level: int = logging.INFO
    http_timeout: float = 30.0

    @property
    def has_youtube_api(self) -> bool:
        return bool(self.youtube_api_key)

    @property
    def has_twitch(self) -> bool:
        return bool(self.twitch_client_id and self.twitch_client_secret)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'Settings':
        """
        Build settings from environment variables.

        Args:
            dotenv_path: Optional explicit .env path (defaults to the working directory)

        Returns:
            Settings instance
        """
        load_dotenv(dotenv_path)

        language = (_env("STREAMWATCH_LANGUAGE") or DEFAULT_LOCALE).lower()
        if language not in SUPPORTED_LOCALES:
            language = DEFAULT_LOCALE

        level_name = (_env("STREAMWATCH_LOG_LEVEL") or "INFO").upper()
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            log_level = logging.INFO

        try:
            http_timeout = float(_env("STREAMWATCH_HTTP_TIMEOUT") or 30)
        except ValueError:
            http_timeout = 30.0

        return cls(
            discord_token=_env("DISCORD_TOKEN"),
            db_path=_env("STREAMWATCH_DB_PATH") or "streamwatch_data.db",
            youtube_api_key=_env("YOUTUBE_API_KEY"),
            twitch_client_id=_env("TWITCH_CLIENT_ID"),
            twitch_client_secret=_env("TWITCH_CLIENT_SECRET"),
            language=language,
            command_prefix=_env("STREAMWATCH_COMMAND_PREFIX") or DEFAULT_COMMAND_PREFIX,
            log_file=_env("STREAMWATCH_LOG_FILE"),
            log_level=log_level,
            http_timeout=http_timeout,
        )
