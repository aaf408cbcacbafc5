from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Sequence

from ..memory.store import MessageStore

logger = logging.getLogger("recall_tracker_bot")

# Discord returns at most 100 messages per history request.
MAX_PAGE_SIZE = 100


@dataclass(slots=True, frozen=True)
class HistoryMessage:
    message_id: str
    author_id: str
    content: str
    created_at: datetime
    channel_id: str


PageFetcher = Callable[[str | None, int], Awaitable[Sequence[HistoryMessage]]]


class BackfillError(RuntimeError):
    def __init__(self, channel_id: str, total_fetched: int, total_stored: int) -> None:
        super().__init__(
            f"History fetch failed for {channel_id} after {total_fetched} fetched / {total_stored} stored"
        )
        self.channel_id = channel_id
        self.total_fetched = total_fetched
        self.total_stored = total_stored


@dataclass(slots=True)
class BackfillResult:
    total_fetched: int = 0
    total_stored: int = 0
    pages: int = 0

    @property
    def total_duplicates(self) -> int:
        return self.total_fetched - self.total_stored

    def summary(self, target_kind: str) -> str:
        return (
            f"✅ Update complete! Fetched {self.total_fetched} messages, "
            f"stored {self.total_stored} new messages from this {target_kind}."
        )


class HistoryBackfill:
    """Walks a channel's history backwards page by page and feeds every message into the store.

    Pages are requested strictly one after another. The cursor for the next request is the
    id of the oldest (last) message of the page just processed. The walk stops on an empty
    page, or after processing a page shorter than ``page_size``.
    """

    def __init__(self, store: MessageStore, *, page_size: int = MAX_PAGE_SIZE) -> None:
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be in [1, {MAX_PAGE_SIZE}]")
        self.store = store
        self.page_size = page_size

    async def run(self, fetch_page: PageFetcher, *, channel_id: str) -> BackfillResult:
        result = BackfillResult()
        before: str | None = None

        while True:
            try:
                page = list(await fetch_page(before, self.page_size))
            except Exception as exc:
                logger.warning(
                    "History fetch failed for %s (before=%s): %s",
                    channel_id,
                    before,
                    exc,
                )
                raise BackfillError(channel_id, result.total_fetched, result.total_stored) from exc

            if not page:
                break

            result.pages += 1
            result.total_fetched += len(page)
            for message in page:
                inserted = await self.store.add_message(
                    message_id=message.message_id,
                    user_id=message.author_id,
                    content=message.content,
                    timestamp=message.created_at,
                    channel_id=message.channel_id,
                )
                if inserted.stored:
                    result.total_stored += 1

            logger.debug(
                "Backfill page %s for %s: size=%s fetched=%s stored=%s",
                result.pages,
                channel_id,
                len(page),
                result.total_fetched,
                result.total_stored,
            )

            before = page[-1].message_id
            if len(page) < self.page_size:
                break

        logger.info(
            "Backfill complete for %s: %s fetched, %s stored",
            channel_id,
            result.total_fetched,
            result.total_stored,
        )
        return result
