from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from .utils import InsertResult, InsertStatus, StoredMessage, to_utc_iso

logger = logging.getLogger("recall_tracker_bot")


class MessageRecordsMixin:
    async def add_message(
        self,
        message_id: str,
        user_id: str,
        content: str,
        timestamp: datetime,
        channel_id: str,
    ) -> InsertResult:
        cursor = await self.db.execute(
            """
            INSERT INTO messages (message_id, user_id, content, timestamp, channel_id)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(message_id) DO NOTHING
            """,
            (
                str(message_id),
                str(user_id),
                content,
                to_utc_iso(timestamp),
                str(channel_id),
            ),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            logger.debug("Message %s already exists in database", message_id)
            return InsertResult.duplicate()

        row_id = int(cursor.lastrowid)
        logger.info("Stored message %s from user %s", message_id, user_id)
        return InsertResult(InsertStatus.STORED, row_id)

    async def get_messages(self, channel_id: str, limit: int = 100) -> List[StoredMessage]:
        limit = int(limit)
        if limit < 0:
            raise ValueError("limit must be >= 0")
        async with self.db.execute(
            """
            SELECT id, message_id, user_id, content, timestamp, channel_id, created_at
            FROM messages
            WHERE channel_id = ?
            ORDER BY timestamp DESC, id DESC
            LIMIT ?
            """,
            (str(channel_id), limit),
        ) as cursor:
            rows = await cursor.fetchall()
        return [StoredMessage.from_row(row) for row in rows]

    async def get_messages_by_author(self, user_id: str) -> List[StoredMessage]:
        async with self.db.execute(
            """
            SELECT id, message_id, user_id, content, timestamp, channel_id, created_at
            FROM messages
            WHERE user_id = ?
            ORDER BY timestamp ASC, id ASC
            """,
            (str(user_id),),
        ) as cursor:
            rows = await cursor.fetchall()
        return [StoredMessage.from_row(row) for row in rows]

    async def get_message_count(self, channel_id: str | None = None) -> int:
        if channel_id:
            query = "SELECT COUNT(*) FROM messages WHERE channel_id = ?"
            params: tuple[str, ...] = (str(channel_id),)
        else:
            query = "SELECT COUNT(*) FROM messages"
            params = ()
        async with self.db.execute(query, params) as cursor:
            row = await cursor.fetchone()
        return int(row[0]) if row else 0
