"""
Per-guild notification overrides.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamOverrides:
    """
    Where and how a guild wants stream notifications.

    Attributes:
        channel_id: Channel that receives notifications (None disables polling for the guild)
        mention_role_id: Role mentioned with every notification
        message_template: Custom live template with {name} {platform} {url} {title}
    """
    channel_id: Optional[str] = None
    mention_role_id: Optional[str] = None
    message_template: Optional[str] = None

    @property
    def mention(self) -> str:
        return f"<@&{self.mention_role_id}>" if self.mention_role_id else ""

    def to_dict(self) -> dict:
        return {
            'channelId': self.channel_id,
            'mentionRoleId': self.mention_role_id,
            'messageTemplate': self.message_template,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'StreamOverrides':
        data = data or {}
        return cls(
            channel_id=data.get('channelId'),
            mention_role_id=data.get('mentionRoleId'),
            message_template=data.get('messageTemplate'),
        )
