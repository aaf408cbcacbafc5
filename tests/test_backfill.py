from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Sequence

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from recall_tracker_bot.history import BackfillError, HistoryBackfill, HistoryMessage  # noqa: E402
from recall_tracker_bot.memory import MessageStore  # noqa: E402


BASE_TIME = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _history(channel_id: str, count: int, *, newest_id: int = 10_000) -> List[HistoryMessage]:
    """Newest-first history with descending numeric ids."""
    return [
        HistoryMessage(
            message_id=str(newest_id - offset),
            author_id="reporter",
            content=f"message {newest_id - offset}",
            created_at=BASE_TIME - timedelta(minutes=offset),
            channel_id=channel_id,
        )
        for offset in range(count)
    ]


class _PagedHistory:
    def __init__(self, messages: Sequence[HistoryMessage], *, fail_on_call: int | None = None) -> None:
        self.messages = list(messages)
        self.fail_on_call = fail_on_call
        self.calls: list[tuple[str | None, int]] = []

    async def __call__(self, before: str | None, limit: int) -> List[HistoryMessage]:
        self.calls.append((before, limit))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise ConnectionError("gateway went away")
        start = 0
        if before is not None:
            start = next(index for index, item in enumerate(self.messages) if item.message_id == before) + 1
        return self.messages[start : start + limit]


def test_exact_page_multiple_then_short_page_stops_without_extra_fetch(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    pages = _PagedHistory(_history("c1", 101))

    async def scenario() -> None:
        await store.init()
        result = await HistoryBackfill(store).run(pages, channel_id="c1")
        assert result.total_fetched == 101
        assert result.total_stored == 101
        assert result.pages == 2
        assert len(pages.calls) == 2
        assert await store.get_message_count("c1") == 101
        await store.close()

    asyncio.run(scenario())


def test_full_pages_continue_until_short_page(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    pages = _PagedHistory(_history("c1", 237))

    async def scenario() -> None:
        await store.init()
        result = await HistoryBackfill(store).run(pages, channel_id="c1")
        assert (result.total_fetched, result.total_stored, result.pages) == (237, 237, 3)
        assert [limit for _, limit in pages.calls] == [100, 100, 100]
        await store.close()

    asyncio.run(scenario())


def test_cursor_is_oldest_message_of_previous_page(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    pages = _PagedHistory(_history("c1", 200, newest_id=500))

    async def scenario() -> None:
        await store.init()
        result = await HistoryBackfill(store).run(pages, channel_id="c1")
        # Two full pages, then an empty one ends the walk.
        assert [before for before, _ in pages.calls] == [None, "401", "301"]
        assert result.total_fetched == 200
        assert result.pages == 2
        await store.close()

    asyncio.run(scenario())


def test_empty_history_stores_nothing(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    pages = _PagedHistory([])

    async def scenario() -> None:
        await store.init()
        result = await HistoryBackfill(store).run(pages, channel_id="c1")
        assert (result.total_fetched, result.total_stored, result.pages) == (0, 0, 0)
        assert result.summary("channel") == (
            "✅ Update complete! Fetched 0 messages, stored 0 new messages from this channel."
        )
        assert len(pages.calls) == 1
        await store.close()

    asyncio.run(scenario())


def test_second_run_counts_duplicates_as_fetched_only(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    history = _history("c1", 40)

    async def scenario() -> None:
        await store.init()
        backfill = HistoryBackfill(store)
        first = await backfill.run(_PagedHistory(history), channel_id="c1")
        second = await backfill.run(_PagedHistory(history), channel_id="c1")

        assert (first.total_fetched, first.total_stored) == (40, 40)
        assert (second.total_fetched, second.total_stored) == (40, 0)
        assert second.total_duplicates == 40
        assert second.summary("thread") == (
            "✅ Update complete! Fetched 40 messages, stored 0 new messages from this thread."
        )
        assert await store.get_message_count() == 40
        await store.close()

    asyncio.run(scenario())


def test_partial_overlap_only_counts_new_rows(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    history = _history("c1", 30)

    async def scenario() -> None:
        await store.init()
        for item in history[10:]:
            await store.add_message(item.message_id, item.author_id, item.content, item.created_at, item.channel_id)

        result = await HistoryBackfill(store).run(_PagedHistory(history), channel_id="c1")
        assert (result.total_fetched, result.total_stored) == (30, 10)
        await store.close()

    asyncio.run(scenario())


def test_fetch_failure_raises_and_keeps_earlier_pages(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    pages = _PagedHistory(_history("c1", 250), fail_on_call=2)

    async def scenario() -> None:
        await store.init()
        with pytest.raises(BackfillError) as excinfo:
            await HistoryBackfill(store).run(pages, channel_id="c1")

        error = excinfo.value
        assert error.channel_id == "c1"
        assert error.total_fetched == 100
        assert error.total_stored == 100
        assert isinstance(error.__cause__, ConnectionError)
        assert await store.get_message_count("c1") == 100
        await store.close()

    asyncio.run(scenario())


def test_custom_page_size_is_passed_to_fetcher(tmp_path: Path) -> None:
    store = MessageStore(tmp_path / "bot.db")
    pages = _PagedHistory(_history("c1", 25))

    async def scenario() -> None:
        await store.init()
        result = await HistoryBackfill(store, page_size=10).run(pages, channel_id="c1")
        assert [limit for _, limit in pages.calls] == [10, 10, 10]
        assert result.pages == 3
        assert result.total_stored == 25
        await store.close()

    asyncio.run(scenario())


@pytest.mark.parametrize("page_size", [0, 101])
def test_page_size_outside_discord_bounds_is_rejected(tmp_path: Path, page_size: int) -> None:
    with pytest.raises(ValueError):
        HistoryBackfill(MessageStore(tmp_path / "bot.db"), page_size=page_size)
