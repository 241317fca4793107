"""Statistics engine output models.

Every model here is a derived, read-only view over a set of closed trades.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

StreakType = Literal["win", "loss", "scratch", "none"]


class TradeRef(BaseModel):
    """Reference to a single trade, used for best/worst trade reporting."""

    id: Optional[int] = Field(default=None, description="Trade database ID")
    ticker: str = Field(..., description="Ticker symbol")
    pnl: float = Field(..., description="Realized P&L")
    setup: Optional[str] = Field(default=None, description="Setup tag")

    model_config = {"frozen": True}


class Summary(BaseModel):
    """Aggregate performance over a set of closed trades."""

    total_trades: int = Field(default=0, ge=0, description="Number of trades")
    winners: int = Field(default=0, ge=0, description="Trades with pnl > 0")
    losers: int = Field(default=0, ge=0, description="Trades with pnl < 0")
    scratches: int = Field(default=0, ge=0, description="Trades with pnl == 0")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    avg_winner: float = Field(default=0.0, ge=0, description="Average winning pnl")
    avg_loser: float = Field(default=0.0, ge=0, description="Average losing pnl, as a magnitude")
    profit_factor: float = Field(
        default=0.0, ge=0, description="Gross wins over gross losses, inf with no losses"
    )
    total_pnl: float = Field(default=0.0, description="Sum of pnl")
    best_trade: Optional[TradeRef] = Field(default=None, description="Highest pnl trade")
    worst_trade: Optional[TradeRef] = Field(default=None, description="Lowest pnl trade")

    model_config = {"frozen": True}


class GroupStats(BaseModel):
    """Per-bucket performance, used for setup and weekday breakdowns."""

    total_trades: int = Field(default=0, ge=0, description="Number of trades")
    winners: int = Field(default=0, ge=0, description="Trades with pnl > 0")
    losers: int = Field(default=0, ge=0, description="Trades with pnl < 0")
    scratches: int = Field(default=0, ge=0, description="Trades with pnl == 0")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    total_pnl: float = Field(default=0.0, description="Sum of pnl")
    avg_pnl: float = Field(default=0.0, description="Average pnl per trade")
    avg_winner: float = Field(default=0.0, ge=0, description="Average winning pnl")
    avg_loser: float = Field(default=0.0, ge=0, description="Average losing pnl, as a magnitude")

    model_config = {"frozen": True}


class Streak(BaseModel):
    """A run of consecutive same-class outcomes."""

    type: StreakType = Field(default="none", description="Outcome class of the run")
    count: int = Field(default=0, ge=0, description="Run length")

    model_config = {"frozen": True}


class Streaks(BaseModel):
    """Current and record streaks."""

    current_streak: Streak = Field(default_factory=Streak, description="Run ending at the latest trade")
    best_win_streak: int = Field(default=0, ge=0, description="Longest run of wins")
    worst_loss_streak: int = Field(default=0, ge=0, description="Longest run of losses")

    model_config = {"frozen": True}


class Exposure(BaseModel):
    """Open position count and capital committed to them."""

    open_positions: int = Field(default=0, ge=0, description="Number of open trades")
    open_cost_basis: float = Field(default=0.0, description="Sum of open cost bases")

    model_config = {"frozen": True}


class PerformanceReport(BaseModel):
    """Summary plus setup and weekday breakdowns for one trade set."""

    summary: Summary = Field(default_factory=Summary)
    by_setup: dict[str, GroupStats] = Field(default_factory=dict)
    by_weekday: dict[str, GroupStats] = Field(default_factory=dict)

    model_config = {"frozen": True}
