from __future__ import annotations

from typing import Iterator


class TrackedChannelSet:
    """Channels and threads under live observation. Lives for the process only; never persisted."""

    def __init__(self) -> None:
        self._channel_ids: set[str] = set()

    def start(self, channel_id: str) -> None:
        self._channel_ids.add(str(channel_id))

    def stop(self, channel_id: str) -> None:
        self._channel_ids.discard(str(channel_id))

    def contains(self, channel_id: str) -> bool:
        return str(channel_id) in self._channel_ids

    def toggle(self, channel_id: str) -> bool:
        if self.contains(channel_id):
            self.stop(channel_id)
            return False
        self.start(channel_id)
        return True

    def __contains__(self, channel_id: object) -> bool:
        return str(channel_id) in self._channel_ids

    def __len__(self) -> int:
        return len(self._channel_ids)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._channel_ids))
