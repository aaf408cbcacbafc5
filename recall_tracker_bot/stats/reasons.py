from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from ..memory.storage.utils import StoredMessage

# Captures the reason after "recalled due to" up to the next line break or bold marker.
RECALL_REASON_PATTERN = re.compile(
    r"recalled due to(?:[^\S\n]|[:*])+([^*\n].*?)(?=\*\*|\n|$)",
    re.IGNORECASE,
)
_TRAILING_PUNCTUATION = re.compile(r"[.,:;!?]+$")


def extract_recall_reason(content: str) -> str | None:
    if not content:
        return None
    match = RECALL_REASON_PATTERN.search(content)
    if match is None:
        return None
    reason = match.group(1).replace("**", "")
    reason = _TRAILING_PUNCTUATION.sub("", reason.strip()).strip()
    return reason or None


@dataclass(slots=True)
class RecallReasonGroup:
    label: str
    count: int = 1

    @property
    def key(self) -> str:
        return self.label.lower()


def aggregate_recall_reasons(reasons: Iterable[str]) -> List[RecallReasonGroup]:
    groups: List[RecallReasonGroup] = []
    by_key: dict[str, RecallReasonGroup] = {}
    for reason in reasons:
        key = reason.lower()
        group = by_key.get(key)
        if group is None:
            group = RecallReasonGroup(label=reason)
            by_key[key] = group
            groups.append(group)
        else:
            group.count += 1
    # sorted() is stable: ties keep discovery order.
    return sorted(groups, key=lambda item: item.count, reverse=True)


@dataclass(slots=True)
class RecallStats:
    total_messages: int
    recall_messages: int
    groups: List[RecallReasonGroup] = field(default_factory=list)

    @property
    def has_messages(self) -> bool:
        return self.total_messages > 0

    @property
    def has_data(self) -> bool:
        return self.recall_messages > 0 and bool(self.groups)


def compute_recall_stats(messages: Sequence[StoredMessage]) -> RecallStats:
    reasons = [
        reason
        for reason in (extract_recall_reason(message.content) for message in messages)
        if reason is not None
    ]
    return RecallStats(
        total_messages=len(messages),
        recall_messages=len(reasons),
        groups=aggregate_recall_reasons(reasons),
    )
