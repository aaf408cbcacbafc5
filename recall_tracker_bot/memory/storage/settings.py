from __future__ import annotations

import logging

logger = logging.getLogger("recall_tracker_bot")

REPORTER_SETTING_KEY = "reporter_user_id"
DEFAULT_REPORTER_ID = "268478587651358721"


class MessageSettingsMixin:
    default_reporter_id: str = DEFAULT_REPORTER_ID

    async def set_reporter_id(self, user_id: str) -> None:
        await self.db.execute(
            """
            INSERT INTO settings (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = CURRENT_TIMESTAMP
            """,
            (REPORTER_SETTING_KEY, str(user_id)),
        )
        await self.db.commit()
        logger.info("Reporter user ID set to %s", user_id)

    async def get_reporter_id(self) -> str:
        async with self.db.execute(
            "SELECT value FROM settings WHERE key = ?",
            (REPORTER_SETTING_KEY,),
        ) as cursor:
            row = await cursor.fetchone()
        value = str(row[0]).strip() if row else ""
        return value or self.default_reporter_id
