from __future__ import annotations

import asyncio
import logging

import discord

from ..config import Settings
from ..history.backfill import HistoryBackfill
from ..memory.store import MessageStore
from ..stats.service import RecallStatsService
from ..tracking import TrackedChannelSet
from .mixins.commands_mixin import CommandsMixin
from .mixins.ingest_mixin import IngestMixin

logger = logging.getLogger("recall_tracker_bot")


class RecallTrackerBot(
    IngestMixin,
    CommandsMixin,
    discord.Client,
):
    def __init__(self, settings: Settings, store: MessageStore) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.messages = True
        intents.message_content = settings.discord_message_content_intent

        super().__init__(intents=intents, application_id=settings.application_id)

        self.settings = settings
        self.store = store
        self.tracked_channels = TrackedChannelSet()
        self.backfill = HistoryBackfill(store, page_size=settings.history_page_size)
        self.stats = RecallStatsService(store)
        self.tree = self._build_command_tree()

    async def setup_hook(self) -> None:
        await self.store.init()
        # Registration failures are fatal for startup; no retry.
        await self.register_commands()

    async def close(self) -> None:
        await self._run_shutdown_step("discord.Client.close", super().close(), timeout=6.0)
        await self._run_shutdown_step("store.close", self.store.close(), timeout=6.0)

    async def _run_shutdown_step(self, label: str, coro: object, *, timeout: float) -> None:
        try:
            await asyncio.wait_for(coro, timeout=timeout)  # type: ignore[arg-type]
        except asyncio.TimeoutError:
            logger.warning("Shutdown step timed out: %s", label)
        except Exception as exc:
            logger.warning("Shutdown step failed: %s (%s)", label, exc)

    async def on_ready(self) -> None:
        if self.user:
            logger.info("Connected as %s (%s)", self.user, self.user.id)
