"""Trade commands for tradebook CLI.

Handles opening, closing and listing real and paper trades.
"""

import sqlite3
from datetime import date
from typing import Optional

import click

from tradebook.cli.common import console, empty, fail, get_data_store
from tradebook.models.trade import DIRECTIONS, INSTRUMENTS, SETUP_TYPES, Trade
from tradebook.report.formatting import format_money, format_percent, pnl_style
from tradebook.report.paper import count_outcomes, grade_paper_trade
from tradebook.report.text import totals_line, trades_table


def _open_options(func):
    """Options shared by 'trade open' and 'paper open'."""
    decorators = [
        click.argument("ticker"),
        click.argument("direction", type=click.Choice(DIRECTIONS)),
        click.argument("instrument", type=click.Choice(INSTRUMENTS)),
        click.argument("entry_price", type=float),
        click.argument("size", type=click.IntRange(min=1)),
        click.option(
            "--setup",
            "setup_type",
            type=click.Choice(SETUP_TYPES),
            default="other",
            show_default=True,
            help="Setup tag.",
        ),
        click.option("--narrative", "narrative_id", type=int, default=None, help="Linked narrative ID."),
        click.option("--watchlist", "watchlist_id", type=int, default=None, help="Linked watchlist item ID."),
        click.option("--risk", "planned_risk", type=float, default=None, help="Planned dollar risk."),
        click.option("--target", "planned_target", type=float, default=None, help="Planned dollar target."),
        click.option("--notes", default=None, help="Entry notes."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _do_open(ctx: click.Context, is_paper: bool, **kwargs) -> None:
    try:
        store = get_data_store(ctx)
        trade_id = store.open_trade(is_paper=is_paper, **kwargs)
        trade = store.get_trade(trade_id)
    except (ValueError, sqlite3.Error) as e:
        fail(f"Failed to open trade:\n\n{e}")

    label = "paper trade" if is_paper else "trade"
    console.print(
        f"[green]✓ Opened {label} #{trade_id}: {trade.direction} {trade.ticker} "
        f"{trade.instrument} x{trade.size} @ {trade.entry_price:.2f}[/green]"
    )
    console.print(f"  Cost basis: {format_money(trade.cost_basis)}")


def _do_close(
    ctx: click.Context,
    trade_id: int,
    exit_price: float,
    notes: Optional[str],
    lessons: Optional[str],
) -> Trade:
    try:
        store = get_data_store(ctx)
        trade = store.close_trade(trade_id, exit_price, notes=notes, lessons=lessons)
    except (ValueError, sqlite3.Error) as e:
        fail(f"Failed to close trade:\n\n{e}")

    style = pnl_style(trade.pnl)
    console.print(f"[green]✓ Closed trade #{trade_id} {trade.ticker} @ {exit_price:.2f}[/green]")
    pct = f" ({format_percent(trade.pnl_pct)})" if trade.pnl_pct is not None else ""
    console.print(f"  P&L: [{style}]{format_money(trade.pnl, signed=True)}{pct}[/{style}]")
    if trade.actual_rr is not None:
        console.print(f"  Realized R: {trade.actual_rr:.2f}R")
    return trade


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    if value == "today":
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        fail(f"Invalid date format: {value}. Use YYYY-MM-DD")


# ==================== Real trades ====================


@click.group()
def trade() -> None:
    """Record real trades.

    The cost basis includes a flat commission. Options are priced per
    contract with the configured multiplier (100 by default).

    \b
    Examples:
      tradebook trade open SPY long calls 2.50 2 --setup breakout --risk 150
      tradebook trade close 1 3.10 --lessons "Clean entry at the retest"
      tradebook trade list --open
      tradebook trade list --date today
      tradebook trade note 1 "Added on the pullback"
    """
    pass


@trade.command("open")
@_open_options
@click.pass_context
def open_trade(ctx: click.Context, **kwargs) -> None:
    """Open a trade: TICKER DIRECTION INSTRUMENT ENTRY_PRICE SIZE."""
    _do_open(ctx, is_paper=False, **kwargs)


@trade.command("close")
@click.argument("trade_id", type=int)
@click.argument("exit_price", type=float)
@click.option("--notes", default=None, help="Closing notes (keeps entry notes if omitted).")
@click.option("--lessons", default=None, help="Lessons learned.")
@click.pass_context
def close_trade(
    ctx: click.Context,
    trade_id: int,
    exit_price: float,
    notes: Optional[str],
    lessons: Optional[str],
) -> None:
    """Close trade TRADE_ID at EXIT_PRICE."""
    _do_close(ctx, trade_id, exit_price, notes, lessons)


@trade.command("list")
@click.option("--open", "open_only", is_flag=True, default=False, help="Show only open trades.")
@click.option("--date", "on_date", default=None, help="Entry date (YYYY-MM-DD or 'today').")
@click.option("--ticker", default=None, help="Filter by ticker.")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True, help="Maximum rows.")
@click.pass_context
def list_trades(
    ctx: click.Context,
    open_only: bool,
    on_date: Optional[str],
    ticker: Optional[str],
    limit: int,
) -> None:
    """List trades, most recent first."""
    store = get_data_store(ctx)
    trades = store.get_trades(
        open_only=open_only,
        ticker=ticker,
        on_date=_parse_date(on_date),
        limit=limit,
    )

    if not trades:
        empty("No trades found", "Trades")
        return

    console.print(trades_table(trades, title="Open Trades" if open_only else "Trades"))
    totals = totals_line(trades)
    if totals:
        console.print(totals)


@trade.command("note")
@click.argument("trade_id", type=int)
@click.argument("notes")
@click.option("--lessons", default=None, help="Lessons learned.")
@click.pass_context
def note_trade(ctx: click.Context, trade_id: int, notes: str, lessons: Optional[str]) -> None:
    """Replace the notes of trade TRADE_ID."""
    try:
        store = get_data_store(ctx)
        existing = store.get_trade(trade_id)
        if existing is None:
            raise ValueError(f"Trade {trade_id} not found")
        store.update_trade_notes(
            trade_id, notes, lessons if lessons is not None else existing.lessons
        )
    except (ValueError, sqlite3.Error) as e:
        fail(str(e))

    console.print(f"[green]✓ Updated notes for trade #{trade_id}[/green]")


# ==================== Paper trades ====================


@click.group()
def paper() -> None:
    """Record paper trades.

    Paper trades are kept apart from real ones and excluded from the
    default statistics. Use 'tradebook stats --paper' to analyze them.

    \b
    Examples:
      tradebook paper open TSLA long 0dte-calls 1.20 5 --setup momentum
      tradebook paper close 7 2.05 --lessons "Right read, sized too small"
      tradebook paper list
    """
    pass


@paper.command("open")
@_open_options
@click.pass_context
def open_paper(ctx: click.Context, **kwargs) -> None:
    """Open a paper trade: TICKER DIRECTION INSTRUMENT ENTRY_PRICE SIZE."""
    _do_open(ctx, is_paper=True, **kwargs)


@paper.command("close")
@click.argument("trade_id", type=int)
@click.argument("exit_price", type=float)
@click.option("--notes", default=None, help="Closing notes (keeps entry notes if omitted).")
@click.option("--lessons", default=None, help="Lessons learned.")
@click.pass_context
def close_paper(
    ctx: click.Context,
    trade_id: int,
    exit_price: float,
    notes: Optional[str],
    lessons: Optional[str],
) -> None:
    """Close paper trade TRADE_ID at EXIT_PRICE and grade it."""
    closed = _do_close(ctx, trade_id, exit_price, notes, lessons)
    grade = grade_paper_trade(closed)
    console.print(
        f"  Outcome: {grade.icon} {grade.outcome.replace('_', ' ')} | Execution: {grade.execution}"
    )


@paper.command("list")
@click.option("--open", "open_only", is_flag=True, default=False, help="Show only open paper trades.")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True, help="Maximum rows.")
@click.pass_context
def list_paper(ctx: click.Context, open_only: bool, limit: int) -> None:
    """List paper trades with outcome counts."""
    store = get_data_store(ctx)
    trades = store.get_trades(open_only=open_only, paper=True, limit=limit)

    if not trades:
        empty("No paper trades found", "Paper Trades")
        return

    console.print(trades_table(trades, title="Paper Trades"))
    totals = totals_line(trades)
    if totals:
        console.print(totals)
        counts = count_outcomes(trades)
        console.print(
            f"Big wins: {counts['big_win']} | Small wins: {counts['small_win']} | "
            f"Scratches: {counts['scratch']} | Small losses: {counts['small_loss']} | "
            f"Big losses: {counts['big_loss']}"
        )
