"""Outcome and execution grading for paper trades.

Paper trades exist to build execution habits, so the dashboard grades them on
two axes: how big the move was, and whether the written lessons describe a
clean or a sloppy execution.
"""

from typing import Literal

from pydantic import BaseModel, Field

from tradebook.models import Trade

BIG_MOVE_PCT = 30.0

POOR_EXECUTION_MARKERS = ("didn't", "chased", "late")
GOOD_EXECUTION_MARKERS = ("right read", "clean", "patience")

Outcome = Literal["open", "big_win", "small_win", "small_loss", "big_loss", "scratch"]


class PaperGrade(BaseModel):
    """Outcome bucket and execution grade for one paper trade."""

    outcome: Outcome = Field(..., description="Outcome bucket")
    icon: str = Field(..., description="Display icon")
    color: str = Field(..., description="Display color")
    execution: Literal["GOOD", "POOR", "—"] = Field(default="—", description="Execution grade")

    model_config = {"frozen": True}


_OUTCOME_DISPLAY = {
    "open": ("⏳", "#888888"),
    "big_win": ("🟢🟢", "#00ff88"),
    "small_win": ("🟢", "#00cc66"),
    "scratch": ("⚪", "#ffaa00"),
    "small_loss": ("🔴", "#cc6644"),
    "big_loss": ("🔴🔴", "#ff4444"),
}


def classify_outcome(trade: Trade) -> Outcome:
    """Bucket a trade by result and the size of the underlying price move."""
    if trade.pnl is None or trade.exit_price is None:
        return "open"
    if trade.pnl == 0:
        return "scratch"
    move_pct = (
        abs(trade.exit_price - trade.entry_price) / trade.entry_price * 100
        if trade.entry_price
        else 0.0
    )
    big = move_pct >= BIG_MOVE_PCT
    if trade.pnl > 0:
        return "big_win" if big else "small_win"
    return "big_loss" if big else "small_loss"


def grade_execution(trade: Trade) -> str:
    """Grade execution from the trade's written lessons."""
    lessons = (trade.lessons or "").lower()
    if any(marker in lessons for marker in POOR_EXECUTION_MARKERS):
        return "POOR"
    if any(marker in lessons for marker in GOOD_EXECUTION_MARKERS):
        return "GOOD"
    return "—"


def grade_paper_trade(trade: Trade) -> PaperGrade:
    outcome = classify_outcome(trade)
    icon, color = _OUTCOME_DISPLAY[outcome]
    return PaperGrade(outcome=outcome, icon=icon, color=color, execution=grade_execution(trade))


def count_outcomes(trades: list[Trade]) -> dict[str, int]:
    """Count closed paper trades per outcome bucket."""
    counts = {outcome: 0 for outcome in _OUTCOME_DISPLAY if outcome != "open"}
    for trade in trades:
        outcome = classify_outcome(trade)
        if outcome != "open":
            counts[outcome] += 1
    return counts
