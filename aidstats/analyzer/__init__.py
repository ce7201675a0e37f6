"""
Analysis engine: interval statistics, per-combatant aggregates and report assembly.
"""

from .intervals import (
    IntervalIntegrityError,
    IntervalStats,
    aggregate,
    compute_interval_stats,
    dedup_by_timestamp,
    format_interval,
)
from .displays import Report, ReportAssembler, ReportMode
from .session import ReportSession, is_relevant_change

__all__ = [
    "IntervalIntegrityError",
    "IntervalStats",
    "aggregate",
    "compute_interval_stats",
    "dedup_by_timestamp",
    "format_interval",
    "Report",
    "ReportAssembler",
    "ReportMode",
    "ReportSession",
    "is_relevant_change",
]
