from __future__ import annotations

from pathlib import Path

from .storage.messages import MessageRecordsMixin
from .storage.schema import MessageSchemaMixin
from .storage.settings import DEFAULT_REPORTER_ID, MessageSettingsMixin


class MessageStore(
    MessageSchemaMixin,
    MessageSettingsMixin,
    MessageRecordsMixin,
):
    """Persistent store for reporter messages and bot settings, one record per Discord message id."""

    def __init__(self, db_path: Path, *, default_reporter_id: str = DEFAULT_REPORTER_ID) -> None:
        super().__init__(db_path)
        self.default_reporter_id = default_reporter_id
