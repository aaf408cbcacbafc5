from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

import aiosqlite


def _sqlite_busy_timeout_ms() -> int:
    raw = os.getenv("MESSAGE_STORE_SQLITE_BUSY_TIMEOUT_MS", "5000").strip()
    try:
        timeout = int(raw)
    except ValueError:
        timeout = 5000
    return max(0, min(timeout, 60000))


async def _open_sqlite_connection(db_path: str | Path) -> aiosqlite.Connection:
    db = await aiosqlite.connect(db_path)
    try:
        db.row_factory = aiosqlite.Row
        timeout_ms = _sqlite_busy_timeout_ms()
        if timeout_ms > 0:
            await db.execute(f"PRAGMA busy_timeout={timeout_ms}")
    except Exception:
        await db.close()
        raise
    return db


def to_utc_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def from_utc_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class InsertStatus(str, Enum):
    STORED = "stored"
    DUPLICATE = "duplicate"


@dataclass(slots=True, frozen=True)
class InsertResult:
    status: InsertStatus
    row_id: int | None = None

    @property
    def stored(self) -> bool:
        return self.status is InsertStatus.STORED

    @classmethod
    def duplicate(cls) -> "InsertResult":
        return cls(InsertStatus.DUPLICATE)


@dataclass(slots=True)
class StoredMessage:
    id: int
    message_id: str
    user_id: str
    content: str
    timestamp: datetime
    channel_id: str
    created_at: str

    @classmethod
    def from_row(cls, row: aiosqlite.Row) -> "StoredMessage":
        return cls(
            id=int(row["id"]),
            message_id=str(row["message_id"]),
            user_id=str(row["user_id"]),
            content=str(row["content"]),
            timestamp=from_utc_iso(str(row["timestamp"])),
            channel_id=str(row["channel_id"]),
            created_at=str(row["created_at"]),
        )
