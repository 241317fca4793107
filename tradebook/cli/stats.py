"""Statistics commands for tradebook CLI.

Each command loads closed trades for a period and hands them to the
statistics engine; nothing here computes numbers itself.
"""

from typing import Optional

import click

from tradebook.cli.common import console, empty, get_data_store
from tradebook.db.store import PERIODS
from tradebook.models import Trade
from tradebook.report.text import (
    setup_table,
    streaks_panel,
    summary_panel,
    weekday_table,
)
from tradebook.stats import compute_streaks, compute_summary, group_by_setup, group_by_weekday

PERIOD_TITLES = {
    "today": "Today",
    "week": "Last 7 Days",
    "month": "Last 30 Days",
    "all": "All Time",
}


def period_option(func):
    return click.option(
        "--period",
        type=click.Choice(PERIODS),
        default="all",
        show_default=True,
        help="Reporting window.",
    )(func)


def paper_option(func):
    return click.option(
        "--paper",
        is_flag=True,
        default=False,
        help="Analyze paper trades instead of real ones.",
    )(func)


def _load(ctx: click.Context, period: str, paper: bool, ticker: Optional[str] = None) -> list[Trade]:
    store = get_data_store(ctx)
    return store.get_closed_trades(period=period, ticker=ticker, paper=paper)


def _title(base: str, period: str, paper: bool) -> str:
    prefix = "Paper " if paper else ""
    return f"{prefix}{base} ({PERIOD_TITLES[period]})"


@click.command("stats")
@period_option
@click.option("--ticker", default=None, help="Only trades in this ticker.")
@paper_option
@click.pass_context
def stats(ctx: click.Context, period: str, ticker: Optional[str], paper: bool) -> None:
    """Show win rate, profit factor and P&L for closed trades.

    \b
    Examples:
      tradebook stats
      tradebook stats --period week
      tradebook stats --ticker SPY --period month
      tradebook stats --paper
    """
    trades = _load(ctx, period, paper, ticker)
    if not trades:
        empty("No closed trades found", _title("Performance Stats", period, paper))
        return

    title = _title("Performance Stats", period, paper)
    if ticker:
        title = f"{ticker.upper()} {title}"
    console.print(summary_panel(compute_summary(trades), title=title))


@click.command("setups")
@period_option
@paper_option
@click.pass_context
def setups(ctx: click.Context, period: str, paper: bool) -> None:
    """Break down performance by setup, best total P&L first."""
    trades = _load(ctx, period, paper)
    if not trades:
        empty("No closed trades found", _title("Setup Analysis", period, paper))
        return

    console.print(setup_table(group_by_setup(trades)))


@click.command("weekdays")
@period_option
@paper_option
@click.pass_context
def weekdays(ctx: click.Context, period: str, paper: bool) -> None:
    """Break down performance by day of the week."""
    trades = _load(ctx, period, paper)
    if not trades:
        empty("No closed trades found", _title("Day of Week", period, paper))
        return

    console.print(weekday_table(group_by_weekday(trades)))


@click.command("streaks")
@paper_option
@click.pass_context
def streaks(ctx: click.Context, paper: bool) -> None:
    """Show the current streak and the longest win and loss runs."""
    trades = _load(ctx, "all", paper)
    console.print(streaks_panel(compute_streaks(trades)))
