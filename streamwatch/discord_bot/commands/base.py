"""
Base command utilities and shared functionality.

This module provides common utilities for Discord commands including
permission checks and reply helpers.
"""

from typing import List

from discord.ext import commands

# Discord rejects messages longer than this
MAX_MESSAGE_LENGTH = 2000


def admin_only():
    """Restrict a command to members who can manage the guild."""
    return commands.has_guild_permissions(manage_guild=True)


def get_guild_id(ctx: commands.Context) -> str:
    """Get the tenant id for a command (the guild id as a string)."""
    if ctx.guild is None:
        raise commands.NoPrivateMessage()
    return str(ctx.guild.id)


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """
    Split text into Discord-sized chunks on line boundaries.

    Args:
        text: Text to split
        limit: Maximum chunk length

    Returns:
        List of chunks, each at most limit characters
    """
    chunks = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


async def send_long(ctx: commands.Context, text: str):
    """Send text that may exceed the message length limit."""
    for chunk in split_message(text):
        await ctx.send(chunk)
