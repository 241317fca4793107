"""Performance statistics over closed trades.

Every function here is pure: it takes a sequence of closed trades, never
touches the data store, and never mutates its input. Sums are accumulated at
full precision and rounded only when the output model is built.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, Optional, Sequence

from tradebook.models import (
    Exposure,
    GroupStats,
    PerformanceReport,
    Streak,
    Streaks,
    Summary,
    Trade,
    TradeRef,
)

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
DEFAULT_SETUP = "other"


def round_half_away(value: float, places: int = 2) -> float:
    """Round half away from zero, leaving infinities untouched.

    Args:
        value: Number to round.
        places: Decimal places to keep.

    Returns:
        The rounded float.
    """
    if value in (float("inf"), float("-inf")) or value != value:
        return value
    quantum = Decimal(1).scaleb(-places)
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        # quantize needs every integer digit plus the kept places
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def classify(pnl: float) -> str:
    """Classify a P&L value as 'win', 'loss' or 'scratch'."""
    if pnl > 0:
        return "win"
    if pnl < 0:
        return "loss"
    return "scratch"


def _require_closed(trades: Iterable[Trade]) -> list[Trade]:
    """Validate that every trade is closed with a realized P&L.

    Raises:
        ValueError: If any trade is open or has no pnl.
    """
    checked = list(trades)
    for trade in checked:
        if trade.pnl is None or not trade.is_closed:
            raise ValueError(
                f"Trade {trade.id} ({trade.ticker}) is not closed; "
                "only closed trades with a realized pnl can be analyzed"
            )
    return checked


def _ref(trade: Optional[Trade]) -> Optional[TradeRef]:
    if trade is None:
        return None
    return TradeRef(id=trade.id, ticker=trade.ticker, pnl=trade.pnl, setup=trade.setup_type)


@dataclass
class _Bucket:
    """Running totals for one group of trades."""

    trades: int = 0
    winners: int = 0
    losers: int = 0
    scratches: int = 0
    total_pnl: float = 0.0
    gross_wins: float = 0.0
    gross_losses: float = 0.0

    def record(self, pnl: float) -> None:
        self.trades += 1
        self.total_pnl += pnl
        if pnl > 0:
            self.winners += 1
            self.gross_wins += pnl
        elif pnl < 0:
            self.losers += 1
            self.gross_losses += pnl
        else:
            self.scratches += 1

    @property
    def win_rate(self) -> float:
        return self.winners / self.trades * 100 if self.trades else 0.0

    @property
    def avg_winner(self) -> float:
        return self.gross_wins / self.winners if self.winners else 0.0

    @property
    def avg_loser(self) -> float:
        return abs(self.gross_losses) / self.losers if self.losers else 0.0

    @property
    def profit_factor(self) -> float:
        if self.losers:
            return self.gross_wins / abs(self.gross_losses)
        if self.gross_wins > 0:
            return float("inf")
        return 0.0

    def to_group_stats(self) -> GroupStats:
        return GroupStats(
            total_trades=self.trades,
            winners=self.winners,
            losers=self.losers,
            scratches=self.scratches,
            win_rate=round_half_away(self.win_rate),
            total_pnl=round_half_away(self.total_pnl),
            avg_pnl=round_half_away(self.total_pnl / self.trades) if self.trades else 0.0,
            avg_winner=round_half_away(self.avg_winner),
            avg_loser=round_half_away(self.avg_loser),
        )


def compute_summary(trades: Sequence[Trade]) -> Summary:
    """Compute aggregate performance for a set of closed trades.

    Win rate is 0 for an empty set. Profit factor is infinity when there are
    winnings but no losses, and 0 when there are neither. Best and worst
    trades resolve ties to the first trade in input order.

    Args:
        trades: Closed trades.

    Returns:
        Summary with every monetary field rounded to cents.
    """
    closed = _require_closed(trades)
    if not closed:
        return Summary()

    bucket = _Bucket()
    best: Optional[Trade] = None
    worst: Optional[Trade] = None

    for trade in closed:
        bucket.record(trade.pnl)
        if best is None or trade.pnl > best.pnl:
            best = trade
        if worst is None or trade.pnl < worst.pnl:
            worst = trade

    return Summary(
        total_trades=bucket.trades,
        winners=bucket.winners,
        losers=bucket.losers,
        scratches=bucket.scratches,
        win_rate=round_half_away(bucket.win_rate),
        avg_winner=round_half_away(bucket.avg_winner),
        avg_loser=round_half_away(bucket.avg_loser),
        profit_factor=round_half_away(bucket.profit_factor),
        total_pnl=round_half_away(bucket.total_pnl),
        best_trade=_ref(best),
        worst_trade=_ref(worst),
    )


def group_by_setup(trades: Sequence[Trade]) -> dict[str, GroupStats]:
    """Break performance down by setup tag.

    Untagged trades land in the 'other' bucket. The mapping is ordered by
    descending total P&L; setups with equal totals keep first-seen order.
    """
    buckets: dict[str, _Bucket] = {}
    for trade in _require_closed(trades):
        setup = trade.setup_type or DEFAULT_SETUP
        buckets.setdefault(setup, _Bucket()).record(trade.pnl)

    stats = {setup: bucket.to_group_stats() for setup, bucket in buckets.items()}
    ranked = sorted(stats.items(), key=lambda item: item[1].total_pnl, reverse=True)
    return dict(ranked)


def group_by_weekday(trades: Sequence[Trade]) -> dict[str, GroupStats]:
    """Break performance down by the weekday of entry.

    Always returns Monday through Friday in calendar order. Trades entered
    on a weekend are dropped.
    """
    buckets = {day: _Bucket() for day in WEEKDAYS}
    for trade in _require_closed(trades):
        weekday = trade.entry_time.weekday()
        if weekday >= len(WEEKDAYS):
            logger.debug("Dropping weekend trade %s (%s) from weekday breakdown", trade.id, trade.ticker)
            continue
        buckets[WEEKDAYS[weekday]].record(trade.pnl)

    return {day: bucket.to_group_stats() for day, bucket in buckets.items()}


def compute_streaks(trades: Sequence[Trade]) -> Streaks:
    """Compute current and record win/loss streaks.

    The current streak counts trades of the latest trade's class until the
    class changes. Record streaks are found scanning oldest to newest, where
    a scratch resets both the win and the loss run.

    Args:
        trades: Closed trades ordered by entry time, most recent first.

    Returns:
        Streaks for the trade set.

    Raises:
        ValueError: If a trade is not closed or the input is not sorted
            most recent first.
    """
    closed = _require_closed(trades)
    if not closed:
        return Streaks()

    for newer, older in zip(closed, closed[1:]):
        if older.entry_time > newer.entry_time:
            raise ValueError(
                "Trades must be ordered by entry time, most recent first; "
                f"trade {older.id} ({older.entry_time.isoformat()}) follows "
                f"trade {newer.id} ({newer.entry_time.isoformat()})"
            )

    current_type = classify(closed[0].pnl)
    current_count = 0
    for trade in closed:
        if classify(trade.pnl) != current_type:
            break
        current_count += 1

    best_win = worst_loss = 0
    win_run = loss_run = 0
    for trade in reversed(closed):
        outcome = classify(trade.pnl)
        if outcome == "win":
            win_run += 1
            loss_run = 0
            best_win = max(best_win, win_run)
        elif outcome == "loss":
            loss_run += 1
            win_run = 0
            worst_loss = max(worst_loss, loss_run)
        else:
            win_run = loss_run = 0

    return Streaks(
        current_streak=Streak(type=current_type, count=current_count),
        best_win_streak=best_win,
        worst_loss_streak=worst_loss,
    )


def build_report(trades: Sequence[Trade]) -> PerformanceReport:
    """Bundle the summary with setup and weekday breakdowns."""
    closed = _require_closed(trades)
    return PerformanceReport(
        summary=compute_summary(closed),
        by_setup=group_by_setup(closed),
        by_weekday=group_by_weekday(closed),
    )


def compute_exposure(open_trades: Sequence[Trade]) -> Exposure:
    """Count open positions and the capital committed to them.

    Raises:
        ValueError: If any trade is already closed.
    """
    total = 0.0
    count = 0
    for trade in open_trades:
        if trade.status != "open":
            raise ValueError(f"Trade {trade.id} ({trade.ticker}) is not open")
        total += trade.cost_basis
        count += 1
    return Exposure(open_positions=count, open_cost_basis=round_half_away(total))
