"""
Per-guild channel state repository.

A guild's whole state map is stored under one key so a poll cycle reads it
once and writes it once.
"""

from typing import Dict

from streamwatch.core.interfaces import KeyValueStore
from streamwatch.core.models import ChannelState
from streamwatch.utils import get_logger, loads_or, dumps

logger = get_logger("state")

STATE_PREFIX = "state:"


class StateRepository:
    """Stores {"<platform>:<externalId>": ChannelState} per guild."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def load(self, guild_id: str) -> Dict[str, ChannelState]:
        """
        Load a guild's state map.

        Args:
            guild_id: Guild ID

        Returns:
            Mapping of state key to ChannelState (empty when nothing is stored)
        """
        raw = loads_or(await self.store.get(STATE_PREFIX + guild_id), {})
        if not isinstance(raw, dict):
            return {}
        states = {}
        for key, value in raw.items():
            if isinstance(value, dict):
                states[key] = ChannelState.from_dict(value)
        return states

    async def save(self, guild_id: str, states: Dict[str, ChannelState]):
        """Replace a guild's state map."""
        payload = {key: state.to_dict() for key, state in states.items()}
        await self.store.set(STATE_PREFIX + guild_id, dumps(payload))
        logger.debug(f"Saved {len(payload)} channel state(s) for guild {guild_id}")
