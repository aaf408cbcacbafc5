from __future__ import annotations

import asyncio
import contextlib
import logging

from .config import Settings
from .discord.client import RecallTrackerBot
from .memory.store import MessageStore

logger = logging.getLogger("recall_tracker_bot")


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("discord.gateway").setLevel(logging.WARNING)


def build_bot(settings: Settings) -> RecallTrackerBot:
    store = MessageStore(settings.sqlite_path, default_reporter_id=settings.default_reporter_id)
    return RecallTrackerBot(settings=settings, store=store)


async def _run_bot(settings: Settings) -> None:
    bot = build_bot(settings)
    try:
        async with bot:
            await bot.start(settings.discord_token)
    finally:
        if not bot.is_closed():
            with contextlib.suppress(Exception):
                await asyncio.wait_for(bot.close(), timeout=10.0)
        # close() may never have run if login failed before the client was set up.
        await bot.store.close()


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.debug_mode)
    settings.validate()
    try:
        asyncio.run(_run_bot(settings))
    except KeyboardInterrupt:
        logger.info("Shutdown requested, exiting.")
