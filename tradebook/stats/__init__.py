"""Statistics engine module."""

from tradebook.stats.engine import (
    WEEKDAYS,
    build_report,
    classify,
    compute_exposure,
    compute_streaks,
    compute_summary,
    group_by_setup,
    group_by_weekday,
    round_half_away,
)

__all__ = [
    "WEEKDAYS",
    "build_report",
    "classify",
    "compute_exposure",
    "compute_streaks",
    "compute_summary",
    "group_by_setup",
    "group_by_weekday",
    "round_half_away",
]
