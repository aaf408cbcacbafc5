from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

import discord
from discord import app_commands

from ...history.discord_pages import DiscordHistoryPages
from ...stats import StatsOutcomeKind
from ..channels import ChannelContext, resolve_channel_context
from ..common import GENERIC_COMMAND_ERROR, UNKNOWN_COMMAND, UPDATE_FAILED
from ..responder import InteractionResponder

logger = logging.getLogger("recall_tracker_bot")

CommandHandler = Callable[[InteractionResponder, ChannelContext, Mapping[str, Any]], Awaitable[None]]


class CommandsMixin:
    def _build_command_tree(self) -> app_commands.CommandTree:
        tree = app_commands.CommandTree(self)

        @tree.command(name="update", description="Fetch and store all message history from this channel or thread")
        async def update(interaction: discord.Interaction) -> None:
            await self.handle_slash_command(interaction, "update")

        @tree.command(name="track", description="Start/stop tracking new messages in this channel or thread")
        async def track(interaction: discord.Interaction) -> None:
            await self.handle_slash_command(interaction, "track")

        @tree.command(name="reporter", description="Set or view the user ID to track messages from")
        @app_commands.describe(userid="The user ID to track messages from")
        async def reporter(interaction: discord.Interaction, userid: str | None = None) -> None:
            await self.handle_slash_command(interaction, "reporter", {"userid": userid})

        @tree.command(name="stats", description="Show recall reason statistics from all stored reporter messages")
        async def stats(interaction: discord.Interaction) -> None:
            await self.handle_slash_command(interaction, "stats")

        return tree

    async def register_commands(self) -> None:
        logger.info("Registering application (/) commands...")
        guild_ids = sorted(self.settings.command_guild_ids)
        if guild_ids:
            for guild_id in guild_ids:
                guild = discord.Object(id=guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info("Registered %s application (/) commands in guild %s", len(synced), guild_id)
            return
        synced = await self.tree.sync()
        logger.info("Registered %s global application (/) commands", len(synced))

    def _command_handlers(self) -> dict[str, CommandHandler]:
        return {
            "update": self._handle_update_command,
            "track": self._handle_track_command,
            "reporter": self._handle_reporter_command,
            "stats": self._handle_stats_command,
        }

    async def handle_slash_command(
        self,
        interaction: discord.Interaction,
        command_name: str,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        responder = InteractionResponder(interaction)
        logger.debug("Slash command %s in channel %s", command_name, interaction.channel_id)

        resolution = await resolve_channel_context(interaction, self)
        if resolution.context is None:
            await responder.reply(resolution.rejection)
            return

        handler = self._command_handlers().get(command_name)
        if handler is None:
            await responder.reply(UNKNOWN_COMMAND)
            return

        try:
            await handler(responder, resolution.context, options or {})
        except Exception as exc:
            logger.exception("Error handling command %s: %s", command_name, exc)
            await responder.fail(GENERIC_COMMAND_ERROR)

    async def _handle_update_command(
        self,
        responder: InteractionResponder,
        context: ChannelContext,
        options: Mapping[str, Any],
    ) -> None:
        await responder.defer()
        logger.info("Starting to fetch message history for %s %s", context.label, context.channel_id)

        try:
            result = await self.backfill.run(DiscordHistoryPages(context.channel), channel_id=context.channel_id)
        except Exception as exc:
            logger.exception("Error in update command: %s", exc)
            await responder.edit(UPDATE_FAILED)
            return

        await responder.edit(result.summary(context.label))
        await self._send_stats_follow_up(responder)

    async def _send_stats_follow_up(self, responder: InteractionResponder) -> None:
        try:
            outcome = await self.stats.build_report()
            if outcome.kind is StatsOutcomeKind.REPORT:
                await responder.follow_up(outcome.render())
        except Exception as exc:
            logger.warning("Could not append recall stats after update: %s", exc)

    async def _handle_track_command(
        self,
        responder: InteractionResponder,
        context: ChannelContext,
        options: Mapping[str, Any],
    ) -> None:
        if self.tracked_channels.toggle(context.channel_id):
            await responder.reply(f"▶️ Started tracking this {context.label} for new messages")
        else:
            await responder.reply(f"⏹️ Stopped tracking this {context.label}")
        logger.info(
            "%s %s tracking: %s",
            context.label.capitalize(),
            context.channel_id,
            self.tracked_channels.contains(context.channel_id),
        )

    async def _handle_reporter_command(
        self,
        responder: InteractionResponder,
        context: ChannelContext,
        options: Mapping[str, Any],
    ) -> None:
        user_id = str(options.get("userid") or "").strip()
        if user_id:
            await self.store.set_reporter_id(user_id)
            await responder.reply(f"✅ Reporter user ID set to: {user_id}")
            return
        current = await self.store.get_reporter_id()
        await responder.reply(f"📊 Current reporter user ID: {current}")

    async def _handle_stats_command(
        self,
        responder: InteractionResponder,
        context: ChannelContext,
        options: Mapping[str, Any],
    ) -> None:
        await responder.defer()
        outcome = await self.stats.build_report()
        await responder.edit(outcome.render())
