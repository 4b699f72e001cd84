"""
Shared utilities for StreamWatch.

This module provides common utility functions used across the application:
- Logging configuration and setup
- Time helpers (epoch milliseconds, UTC day boundaries, ISO parsing)
- JSON helpers for the key-value store
- Polling constants
"""

import json
import logging
import time
from datetime import datetime, timedelta
from typing import Any, Optional

import dateparser
import pytz


# =============================================================================
# Logging Utilities
# =============================================================================

def setup_logging(
    name: str = 'streamwatch',
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging with console and optional file handlers.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path for log output
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    if format_string is None:
        format_string = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'

    formatter = logging.Formatter(format_string, datefmt='%Y-%m-%d %H:%M:%S')

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Silence discord.py internal debug logs
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("discord.gateway").setLevel(logging.WARNING)
    logging.getLogger("discord.client").setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(f'streamwatch.{name}')


# =============================================================================
# Time Utilities
# =============================================================================

MINUTE_MS = 60 * 1000


def now_ms() -> int:
    """Current time as UNIX epoch milliseconds."""
    return int(time.time() * 1000)


def minutes_ms(minutes: float) -> int:
    """Convert minutes to milliseconds."""
    return int(minutes * MINUTE_MS)


def from_ms(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=pytz.UTC)


def to_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are UTC)."""
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return int(dt.timestamp() * 1000)


def next_utc_midnight_ms(current_ms: int) -> int:
    """
    Get the start of the next UTC day.

    Args:
        current_ms: Reference time in epoch milliseconds

    Returns:
        Epoch milliseconds of the next 00:00:00 UTC strictly after current_ms
    """
    current = from_ms(current_ms)
    midnight = current.replace(hour=0, minute=0, second=0, microsecond=0)
    return to_ms(midnight + timedelta(days=1))


def parse_iso_ms(value: Optional[str]) -> Optional[int]:
    """
    Parse an ISO 8601 timestamp (as returned by platform APIs) to epoch ms.

    Returns:
        Epoch milliseconds, or None if missing or unparseable
    """
    if not value:
        return None
    parsed = dateparser.parse(
        value,
        settings={'RETURN_AS_TIMEZONE_AWARE': True, 'TO_TIMEZONE': 'UTC'},
    )
    return to_ms(parsed) if parsed else None


# =============================================================================
# JSON Utilities
# =============================================================================

def loads_or(raw: Optional[str], fallback: Any) -> Any:
    """Decode a stored JSON value, returning fallback when absent or malformed."""
    if not raw:
        return fallback
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        get_logger('utils').warning("Discarding malformed stored value: %.80s", raw)
        return fallback


def dumps(value: Any) -> str:
    """Encode a value for storage."""
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


# =============================================================================
# Constants
# =============================================================================

BOT_VERSION = "1.0.0"
DEFAULT_COMMAND_PREFIX = "!"

# Poll cadence (minutes)
POLL_INTERVAL_MINUTES = 5
CONTENT_CHECK_INTERVAL_MINUTES = 20
LIVE_RECHECK_WHEN_LATE_MINUTES = 2
LIVE_FALLBACK_CHECK_MINUTES = 30
MAX_SCHEDULE_AHEAD_MS = 365 * 24 * 60 * MINUTE_MS

# Scheduler identity for the stream check job
STREAM_JOB_TAG = "stream-check"
STREAM_JOB_RESOURCE_ID = "stream-check-job"

SUPPORTED_LOCALES = ["en", "pt"]
DEFAULT_LOCALE = "en"


__all__ = [
    # Logging
    'setup_logging',
    'get_logger',
    # Time
    'MINUTE_MS',
    'now_ms',
    'minutes_ms',
    'from_ms',
    'to_ms',
    'next_utc_midnight_ms',
    'parse_iso_ms',
    # JSON
    'loads_or',
    'dumps',
    # Constants
    'BOT_VERSION',
    'DEFAULT_COMMAND_PREFIX',
    'POLL_INTERVAL_MINUTES',
    'CONTENT_CHECK_INTERVAL_MINUTES',
    'LIVE_RECHECK_WHEN_LATE_MINUTES',
    'LIVE_FALLBACK_CHECK_MINUTES',
    'MAX_SCHEDULE_AHEAD_MS',
    'STREAM_JOB_TAG',
    'STREAM_JOB_RESOURCE_ID',
    'SUPPORTED_LOCALES',
    'DEFAULT_LOCALE',
]
