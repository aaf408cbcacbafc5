from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from .utils import _open_sqlite_connection

logger = logging.getLogger("recall_tracker_bot")


class MessageSchemaMixin:
    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Message store is not initialized (call init() first)")
        return self._db

    @property
    def is_open(self) -> bool:
        return self._db is not None

    async def init(self) -> None:
        if self._db is not None:
            return
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        db = await _open_sqlite_connection(self.db_path)
        try:
            await db.execute("PRAGMA journal_mode=WAL")
            async with db.execute("PRAGMA user_version") as cursor:
                row = await cursor.fetchone()
            version = int(row[0]) if row else 0

            if version > self.SCHEMA_VERSION:
                raise RuntimeError(
                    "SQLite schema version mismatch detected (database is newer than this bot build). "
                    f"Found user_version={version}, supported={self.SCHEMA_VERSION}."
                )

            await self._create_schema(db)
            if version != self.SCHEMA_VERSION:
                await db.execute(f"PRAGMA user_version = {self.SCHEMA_VERSION}")
            await db.commit()
        except Exception:
            await db.close()
            raise

        self._db = db
        logger.info("Message store initialized at %s", self.db_path)

    async def _create_schema(self, db: aiosqlite.Connection) -> None:
        await db.execute(
            """
            CREATE TABLE IF NOT EXISTS messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                message_id TEXT UNIQUE NOT NULL,
                user_id TEXT NOT NULL,
                content TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                channel_id TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        await db.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        await db.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_messages_channel_timestamp
            ON messages(channel_id, timestamp DESC)
            """
        )
        await db.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_messages_user
            ON messages(user_id)
            """
        )

    async def close(self) -> None:
        db = self._db
        if db is None:
            return
        self._db = None
        await db.close()
        logger.info("Message store closed")
