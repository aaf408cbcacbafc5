from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import discord

logger = logging.getLogger("recall_tracker_bot")


class ChannelKind(str, Enum):
    TEXT = "text"
    ANNOUNCEMENT = "announcement"
    PUBLIC_THREAD = "public_thread"
    PRIVATE_THREAD = "private_thread"
    ANNOUNCEMENT_THREAD = "announcement_thread"
    UNSUPPORTED = "unsupported"


_KIND_BY_TYPE: dict[discord.ChannelType, ChannelKind] = {
    discord.ChannelType.text: ChannelKind.TEXT,
    discord.ChannelType.news: ChannelKind.ANNOUNCEMENT,
    discord.ChannelType.public_thread: ChannelKind.PUBLIC_THREAD,
    discord.ChannelType.private_thread: ChannelKind.PRIVATE_THREAD,
    discord.ChannelType.news_thread: ChannelKind.ANNOUNCEMENT_THREAD,
}

THREAD_KINDS = frozenset(
    {
        ChannelKind.PUBLIC_THREAD,
        ChannelKind.PRIVATE_THREAD,
        ChannelKind.ANNOUNCEMENT_THREAD,
    }
)

NOT_A_TEXT_CHANNEL = "❌ This command must be used in a text channel or thread"
CHANNEL_ACCESS_HELP = (
    "❌ **Bot cannot access this thread/channel**\n\n"
    "**To fix this issue:**\n"
    "1️⃣ **Check Server Permissions** (if you're an admin):\n"
    "   • Go to **Server Settings > Roles**\n"
    "   • Find the bot's role and ensure it has:\n"
    "     - ✅ Read Messages\n"
    "     - ✅ Read Message History\n"
    "     - ✅ Send Messages in Threads\n\n"
    "2️⃣ **Check Channel Permissions**:\n"
    "   • Right-click this channel/thread → **Settings**\n"
    "   • Go to **Permissions** tab\n"
    "   • Make sure the bot isn't **denied** access\n\n"
    "3️⃣ **For Private Threads**: Add the bot to the thread manually\n\n"
    "💡 **Need help?** Contact a server admin to check bot permissions."
)


@dataclass(slots=True, frozen=True)
class ChannelContext:
    channel: Any
    channel_id: str
    kind: ChannelKind
    supports_history: bool

    @property
    def is_thread(self) -> bool:
        return self.kind in THREAD_KINDS

    @property
    def label(self) -> str:
        return "thread" if self.is_thread else "channel"

    @property
    def is_messageable(self) -> bool:
        return self.kind is not ChannelKind.UNSUPPORTED and self.supports_history

    @classmethod
    def from_channel(cls, channel: Any) -> "ChannelContext":
        kind = _KIND_BY_TYPE.get(getattr(channel, "type", None), ChannelKind.UNSUPPORTED)
        return cls(
            channel=channel,
            channel_id=str(channel.id),
            kind=kind,
            supports_history=callable(getattr(channel, "history", None)),
        )


@dataclass(slots=True, frozen=True)
class ChannelResolution:
    context: ChannelContext | None
    rejection: str = NOT_A_TEXT_CHANNEL


def _messageable_context(channel: Any) -> ChannelContext | None:
    if channel is None:
        return None
    context = ChannelContext.from_channel(channel)
    return context if context.is_messageable else None


async def _fetch_channel_context(interaction: discord.Interaction, client: Any) -> ChannelContext | None:
    channel_id = int(interaction.channel_id)
    guild = interaction.guild
    if guild is not None:
        try:
            context = _messageable_context(await guild.fetch_channel(channel_id))
        except (discord.HTTPException, discord.InvalidData) as exc:
            logger.debug("Guild channel fetch failed for %s: %s", channel_id, exc)
        else:
            if context is not None:
                return context
    try:
        return _messageable_context(await client.fetch_channel(channel_id))
    except (discord.HTTPException, discord.InvalidData) as exc:
        logger.debug("Client channel fetch failed for %s: %s", channel_id, exc)
        return None


async def resolve_channel_context(interaction: discord.Interaction, client: Any) -> ChannelResolution:
    """Resolve the invoking channel or thread once, falling back to an API fetch when uncached."""
    if interaction.channel is not None:
        return ChannelResolution(_messageable_context(interaction.channel))

    if not interaction.channel_id:
        return ChannelResolution(None)

    context = await _fetch_channel_context(interaction, client)
    if context is None:
        logger.info("Could not access channel %s for command", interaction.channel_id)
        return ChannelResolution(None, CHANNEL_ACCESS_HELP)
    return ChannelResolution(context)
