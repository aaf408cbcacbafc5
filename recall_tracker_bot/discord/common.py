from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import discord


@dataclass(slots=True, frozen=True)
class IncomingMessage:
    message_id: str
    author_id: str
    is_bot: bool
    content: str
    created_at: datetime
    channel_id: str

    @classmethod
    def from_discord(cls, message: discord.Message) -> "IncomingMessage":
        return cls(
            message_id=str(message.id),
            author_id=str(message.author.id),
            is_bot=bool(message.author.bot),
            content=message.content or "",
            created_at=message.created_at,
            channel_id=str(message.channel.id),
        )


GENERIC_COMMAND_ERROR = "❌ An error occurred while executing the command"
UPDATE_FAILED = "❌ An error occurred while updating message history."
UNKNOWN_COMMAND = "❌ Unknown command"
