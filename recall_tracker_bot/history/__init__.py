from .backfill import (
    MAX_PAGE_SIZE,
    BackfillError,
    BackfillResult,
    HistoryBackfill,
    HistoryMessage,
    PageFetcher,
)

__all__ = [
    "MAX_PAGE_SIZE",
    "BackfillError",
    "BackfillResult",
    "HistoryBackfill",
    "HistoryMessage",
    "PageFetcher",
]
