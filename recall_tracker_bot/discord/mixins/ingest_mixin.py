from __future__ import annotations

import logging

import discord

from ...memory import InsertResult
from ..common import IncomingMessage

logger = logging.getLogger("recall_tracker_bot")


class IngestMixin:
    def start_tracking(self, channel_id: str) -> None:
        self.tracked_channels.start(channel_id)

    def stop_tracking(self, channel_id: str) -> None:
        self.tracked_channels.stop(channel_id)

    def is_tracking(self, channel_id: str) -> bool:
        return self.tracked_channels.contains(channel_id)

    async def on_message(self, message: discord.Message) -> None:
        # Store failures propagate to discord.py's on_error.
        await self.ingest_message(IncomingMessage.from_discord(message))

    async def ingest_message(self, event: IncomingMessage) -> InsertResult | None:
        if event.is_bot:
            return None
        if not self.tracked_channels.contains(event.channel_id):
            return None

        reporter_id = await self.store.get_reporter_id()
        if event.author_id != reporter_id:
            return None

        return await self.store.add_message(
            message_id=event.message_id,
            user_id=event.author_id,
            content=event.content,
            timestamp=event.created_at,
            channel_id=event.channel_id,
        )
