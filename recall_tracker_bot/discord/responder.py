from __future__ import annotations

from enum import Enum

import discord


class ReplyState(str, Enum):
    UNANSWERED = "unanswered"
    DEFERRED = "deferred"
    REPLIED = "replied"
    FOLLOWED_UP = "followed_up"


class InteractionResponder:
    """Tracks the reply lifecycle of one interaction: unanswered -> deferred|replied -> followed_up.

    Only one initial response is ever sent; everything after it goes through edits or follow-ups.
    """

    def __init__(self, interaction: discord.Interaction, *, ephemeral: bool = True) -> None:
        self.interaction = interaction
        self.ephemeral = ephemeral
        self.state = ReplyState.UNANSWERED

    @property
    def answered(self) -> bool:
        return self.state is not ReplyState.UNANSWERED

    def _require_unanswered(self, action: str) -> None:
        if self.answered:
            raise RuntimeError(f"Cannot {action}: interaction already {self.state.value}")

    def _require_answered(self, action: str) -> None:
        if not self.answered:
            raise RuntimeError(f"Cannot {action}: interaction has not been answered yet")

    async def reply(self, content: str) -> None:
        self._require_unanswered("reply")
        await self.interaction.response.send_message(content, ephemeral=self.ephemeral)
        self.state = ReplyState.REPLIED

    async def defer(self) -> None:
        self._require_unanswered("defer")
        await self.interaction.response.defer(ephemeral=self.ephemeral, thinking=True)
        self.state = ReplyState.DEFERRED

    async def edit(self, content: str) -> None:
        self._require_answered("edit")
        await self.interaction.edit_original_response(content=content)

    async def follow_up(self, content: str) -> None:
        self._require_answered("follow up")
        await self.interaction.followup.send(content, ephemeral=self.ephemeral)
        self.state = ReplyState.FOLLOWED_UP

    async def fail(self, content: str) -> None:
        if self.answered:
            await self.follow_up(content)
        else:
            await self.reply(content)
