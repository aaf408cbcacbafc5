from .reasons import (
    RECALL_REASON_PATTERN,
    RecallReasonGroup,
    RecallStats,
    aggregate_recall_reasons,
    compute_recall_stats,
    extract_recall_reason,
)
from .report import REPORT_BUDGET, REPORT_HARD_LIMIT, format_recall_report
from .service import RecallStatsService, StatsOutcome, StatsOutcomeKind

__all__ = [
    "RECALL_REASON_PATTERN",
    "REPORT_BUDGET",
    "REPORT_HARD_LIMIT",
    "RecallReasonGroup",
    "RecallStats",
    "RecallStatsService",
    "StatsOutcome",
    "StatsOutcomeKind",
    "aggregate_recall_reasons",
    "compute_recall_stats",
    "extract_recall_reason",
    "format_recall_report",
]
