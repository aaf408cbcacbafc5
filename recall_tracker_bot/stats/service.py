from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..memory.store import MessageStore
from .reasons import RecallStats, compute_recall_stats
from .report import format_recall_report

logger = logging.getLogger("recall_tracker_bot")


class StatsOutcomeKind(str, Enum):
    REPORT = "report"
    NO_MESSAGES = "no_messages"
    NO_RECALLS = "no_recalls"


@dataclass(slots=True)
class StatsOutcome:
    kind: StatsOutcomeKind
    stats: RecallStats
    text: str | None = None

    def render(self) -> str:
        if self.kind is StatsOutcomeKind.REPORT and self.text:
            return self.text
        if self.kind is StatsOutcomeKind.NO_MESSAGES:
            return "📭 No messages from the reporter have been stored yet."
        return f"📊 No recall data found yet in {self.stats.total_messages} stored messages."


class RecallStatsService:
    def __init__(self, store: MessageStore) -> None:
        self.store = store

    async def build_report(self) -> StatsOutcome:
        reporter_id = await self.store.get_reporter_id()
        messages = await self.store.get_messages_by_author(reporter_id)
        stats = compute_recall_stats(messages)

        if not stats.has_messages:
            return StatsOutcome(StatsOutcomeKind.NO_MESSAGES, stats)

        text = format_recall_report(stats)
        if text is None:
            return StatsOutcome(StatsOutcomeKind.NO_RECALLS, stats)

        logger.info(
            "Recall stats for reporter %s: %s messages, %s recalls, %s reasons",
            reporter_id,
            stats.total_messages,
            stats.recall_messages,
            len(stats.groups),
        )
        return StatsOutcome(StatsOutcomeKind.REPORT, stats, text)
