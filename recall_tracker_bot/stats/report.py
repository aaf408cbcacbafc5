from __future__ import annotations

from typing import List, Sequence

from .reasons import RecallReasonGroup, RecallStats

# Discord caps message content at 2000 characters; layout aims below that.
REPORT_HARD_LIMIT = 2000
REPORT_BUDGET = 1900
MAX_RANKED_REASONS = 20
MAX_LABEL_CHARS = 80

RANK_MARKERS = ("🥇", "🥈", "🥉")
TRUNCATION_MARKER = "… (report truncated)"
REPORT_FOOTER = "_Based on every stored message from the reporter, across all tracked channels._"

PATHOGEN_REMARKS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("salmonella",), "🐔 Salmonella again. Cook poultry and eggs all the way through."),
    (("listeria",), "🧀 Listeria leads the pack. Deli meats and soft cheeses deserve a second look."),
    (("e. coli", "e.coli"), "🥬 E. coli on top. Wash the greens and cook ground beef through."),
)


def shorten_label(label: str, limit: int = MAX_LABEL_CHARS) -> str:
    if len(label) <= limit:
        return label
    return label[: limit - 1].rstrip() + "…"


def _percentage(count: int, total: int) -> str:
    share = (count / total * 100.0) if total else 0.0
    return f"{share:.1f}%"


def _ranked_line(rank: int, group: RecallReasonGroup, recall_total: int) -> str:
    label = shorten_label(group.label)
    tail = f"{group.count} ({_percentage(group.count, recall_total)})"
    if rank < len(RANK_MARKERS):
        return f"{RANK_MARKERS[rank]} **{label}** — {tail}"
    return f"{rank + 1}. {label} — {tail}"


def _more_line(omitted: int) -> str:
    return f"…and {omitted} more not shown"


def _commentary_lines(groups: Sequence[RecallReasonGroup]) -> List[str]:
    top = shorten_label(groups[0].label)
    if len(groups) > 1:
        second = shorten_label(groups[1].label)
        return [f"💬 **{top}** is behind the most recalls so far, with **{second}** in second place."]
    return [f"💬 **{top}** is the only recall reason on record so far."]


def pathogen_remark(label: str) -> str | None:
    lowered = label.lower()
    for needles, remark in PATHOGEN_REMARKS:
        if any(needle in lowered for needle in needles):
            return remark
    return None


def _enforce_hard_limit(text: str, limit: int = REPORT_HARD_LIMIT) -> str:
    if len(text) <= limit:
        return text
    lines = text.split("\n")
    while lines and len("\n".join([*lines, TRUNCATION_MARKER])) > limit:
        lines.pop()
    lines.append(TRUNCATION_MARKER)
    return "\n".join(lines)


def format_recall_report(stats: RecallStats) -> str | None:
    """Render the ranked recall-reason report, or ``None`` when nothing matched.

    Space for the header and the fixed trailing sections (commentary, pathogen remark,
    footer) is reserved first; the ranked list gets whatever is left of ``REPORT_BUDGET``
    and is cut short with an "N more not shown" line. The result never exceeds
    ``REPORT_HARD_LIMIT``.
    """
    if not stats.has_data:
        return None

    groups = stats.groups
    header = [
        "📊 **Recall Statistics**",
        f"Analyzed {stats.total_messages} messages, found {stats.recall_messages} recall notices.",
        "",
        "**Top recall reasons:**",
    ]

    trailing = ["", *_commentary_lines(groups)]
    remark = pathogen_remark(groups[0].label)
    if remark:
        trailing.append(remark)
    trailing.extend(["", REPORT_FOOTER])

    fixed_length = len("\n".join([*header, *trailing]))
    available = REPORT_BUDGET - fixed_length - (len(_more_line(len(groups))) + 1)

    ranked: List[str] = []
    for rank, group in enumerate(groups[:MAX_RANKED_REASONS]):
        line = _ranked_line(rank, group, stats.recall_messages)
        cost = len(line) + 1
        if cost > available:
            break
        ranked.append(line)
        available -= cost

    omitted = len(groups) - len(ranked)
    if omitted > 0:
        ranked.append(_more_line(omitted))

    return _enforce_hard_limit("\n".join([*header, *ranked, *trailing]))
