"""Data models for tradebook."""

from tradebook.models.journal import JournalEntry
from tradebook.models.narrative import Narrative
from tradebook.models.playbook import PlaybookSetup
from tradebook.models.stats import (
    Exposure,
    GroupStats,
    PerformanceReport,
    Streak,
    Streaks,
    Summary,
    TradeRef,
)
from tradebook.models.trade import Trade
from tradebook.models.watchlist import WatchlistItem

__all__ = [
    "Exposure",
    "GroupStats",
    "JournalEntry",
    "Narrative",
    "PerformanceReport",
    "PlaybookSetup",
    "Streak",
    "Streaks",
    "Summary",
    "Trade",
    "TradeRef",
    "WatchlistItem",
]
