from __future__ import annotations

from typing import List

import discord

from .backfill import HistoryMessage


def history_message_from_discord(message: discord.Message) -> HistoryMessage:
    return HistoryMessage(
        message_id=str(message.id),
        author_id=str(message.author.id),
        content=message.content or "",
        created_at=message.created_at,
        channel_id=str(message.channel.id),
    )


class DiscordHistoryPages:
    """Page fetcher over ``channel.history``; newest first, bounded above by ``before``."""

    def __init__(self, channel: discord.abc.Messageable) -> None:
        self.channel = channel

    async def __call__(self, before: str | None, limit: int) -> List[HistoryMessage]:
        cursor = discord.Object(id=int(before)) if before else None
        return [
            history_message_from_discord(message)
            async for message in self.channel.history(limit=limit, before=cursor)
        ]
