from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Set

from dotenv import load_dotenv

from .history.backfill import MAX_PAGE_SIZE
from .memory.storage.settings import DEFAULT_REPORTER_ID


load_dotenv()

TOKEN_PLACEHOLDER = "put_your_discord_bot_token_here"
_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def _read_env(name: str, *aliases: str) -> str | None:
    """First non-missing value among ``name`` and its aliases, stripped.

    Keys saved with a leading UTF-8 BOM (a common .env editor artefact) are accepted too.
    """
    for key in (name, *aliases):
        for candidate in (key, "\ufeff" + key):
            raw = os.environ.get(candidate)
            if raw is not None:
                return raw.strip()
    return None


def _env_flag(name: str, default: bool) -> bool:
    raw = _read_env(name)
    return default if raw is None else raw.lower() in _TRUTHY


def _env_number(name: str, default: int | None, *aliases: str) -> int | None:
    raw = _read_env(name, *aliases)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_text(name: str, default: str) -> str:
    return _read_env(name) or default


def _env_snowflakes(name: str) -> Set[int]:
    chunks = (_read_env(name) or "").split(",")
    return {int(chunk) for chunk in (item.strip() for item in chunks) if chunk.isdigit()}


def _strip_token(raw: str) -> str:
    token = raw.strip()
    if token[:4].lower() == "bot ":
        token = token[4:].strip()
    for quote in ('"', "'"):
        if len(token) >= 2 and token[0] == quote and token[-1] == quote:
            token = token[1:-1].strip()
            break
    return token


@dataclass(slots=True)
class Settings:
    discord_token: str
    application_id: int | None = None
    discord_message_content_intent: bool = True
    command_guild_ids: Set[int] = field(default_factory=set)

    sqlite_path: Path = Path("./data/recall_tracker.db")
    default_reporter_id: str = DEFAULT_REPORTER_ID
    history_page_size: int = MAX_PAGE_SIZE

    debug_mode: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        page_size = _env_number("HISTORY_PAGE_SIZE", MAX_PAGE_SIZE)
        return cls(
            discord_token=_strip_token(_read_env("DISCORD_TOKEN") or ""),
            application_id=_env_number("DISCORD_CLIENT_ID", None, "DISCORD_APPLICATION_ID"),
            discord_message_content_intent=_env_flag("DISCORD_MESSAGE_CONTENT_INTENT", True),
            command_guild_ids=_env_snowflakes("DISCORD_COMMAND_GUILD_IDS"),
            sqlite_path=Path(_env_text("SQLITE_PATH", "./data/recall_tracker.db")).expanduser(),
            default_reporter_id=_env_text("DEFAULT_REPORTER_USER_ID", DEFAULT_REPORTER_ID),
            history_page_size=min(int(page_size or 0), MAX_PAGE_SIZE),
            debug_mode=_env_flag("DEBUG_MODE", False),
        )

    def validate(self) -> None:
        if not self.discord_token:
            raise ValueError("DISCORD_TOKEN is required")
        if self.discord_token == TOKEN_PLACEHOLDER:
            raise ValueError("DISCORD_TOKEN is still the placeholder value")
        if not self.default_reporter_id.isdigit():
            raise ValueError("DEFAULT_REPORTER_USER_ID must be a numeric Discord user ID")
        if self.history_page_size < 1:
            raise ValueError(f"HISTORY_PAGE_SIZE must be in [1, {MAX_PAGE_SIZE}]")
