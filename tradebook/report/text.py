"""Rich renderables for terminal reports."""

from typing import Optional

from rich.panel import Panel
from rich.table import Table

from tradebook.models import (
    GroupStats,
    JournalEntry,
    Narrative,
    PlaybookSetup,
    Streak,
    Streaks,
    Summary,
    Trade,
    WatchlistItem,
)
from tradebook.report.formatting import (
    format_levels,
    format_money,
    format_percent,
    format_profit_factor,
    pnl_style,
    truncate,
)


def streak_label(streak: Streak) -> str:
    """Describe a streak, e.g. ``3 wins in a row``."""
    if streak.type == "none":
        return "No closed trades yet"
    plurals = {"win": "wins", "loss": "losses", "scratch": "scratches"}
    noun = streak.type if streak.count == 1 else plurals[streak.type]
    return f"{streak.count} {noun} in a row"


def summary_panel(summary: Summary, title: str = "Performance Stats") -> Panel:
    style = pnl_style(summary.total_pnl)
    lines = [
        f"Total Trades:   {summary.total_trades}",
        f"Winners: [green]{summary.winners}[/green] | "
        f"Losers: [red]{summary.losers}[/red] | "
        f"Scratches: [yellow]{summary.scratches}[/yellow]",
        f"Win Rate:       {format_percent(summary.win_rate, 2)}",
        f"{'─' * 30}",
        f"Avg Winner:     [green]{format_money(summary.avg_winner)}[/green]",
        f"Avg Loser:      [red]{format_money(summary.avg_loser)}[/red]",
        f"Profit Factor:  {format_profit_factor(summary.profit_factor)}",
        f"[bold]Total P&L:      [{style}]{format_money(summary.total_pnl, signed=True)}[/{style}][/bold]",
    ]

    if summary.best_trade:
        best = summary.best_trade
        lines.append(
            f"\n[green]Best Trade:[/green]  {best.ticker} "
            f"{format_money(best.pnl, signed=True)} ({best.setup or 'other'})"
        )
    if summary.worst_trade:
        worst = summary.worst_trade
        lines.append(
            f"[red]Worst Trade:[/red] {worst.ticker} "
            f"{format_money(worst.pnl, signed=True)} ({worst.setup or 'other'})"
        )

    return Panel(
        "\n".join(lines),
        title=f"[bold cyan]{title}[/bold cyan]",
        border_style="cyan",
    )


def _group_table(title: str, label: str, groups: dict[str, GroupStats], upper: bool) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(label, style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("W/L/S", justify="center")
    table.add_column("Win Rate", justify="right")
    table.add_column("Total P&L", justify="right")
    table.add_column("Avg P&L", justify="right")

    for name, stats in groups.items():
        style = pnl_style(stats.total_pnl)
        table.add_row(
            name.upper() if upper else name,
            str(stats.total_trades),
            f"{stats.winners}/{stats.losers}/{stats.scratches}",
            format_percent(stats.win_rate),
            f"[{style}]{format_money(stats.total_pnl, signed=True)}[/{style}]",
            format_money(stats.avg_pnl, signed=True),
        )
    return table


def setup_table(by_setup: dict[str, GroupStats]) -> Table:
    """Setup breakdown, in the order given (best total P&L first)."""
    return _group_table("Setup Analysis", "Setup", by_setup, upper=True)


def weekday_table(by_weekday: dict[str, GroupStats]) -> Table:
    return _group_table("Day of Week", "Day", by_weekday, upper=False)


def streaks_panel(streaks: Streaks) -> Panel:
    current = streaks.current_streak
    color = {"win": "green", "loss": "red"}.get(current.type, "yellow")
    text = (
        f"Current:           [{color}]{streak_label(current)}[/{color}]\n"
        f"Best Win Streak:   [green]{streaks.best_win_streak}[/green]\n"
        f"Worst Loss Streak: [red]{streaks.worst_loss_streak}[/red]"
    )
    return Panel(text, title="[bold cyan]Streaks[/bold cyan]", border_style="cyan")


def trades_table(trades: list[Trade], title: str = "Trades") -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Ticker", style="bold")
    table.add_column("Dir", justify="center")
    table.add_column("Inst")
    table.add_column("Qty", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Setup", style="dim")
    table.add_column("Status", justify="center")
    table.add_column("Date", style="dim")

    for trade in trades:
        dir_color = "green" if trade.direction == "long" else "red"
        if trade.pnl is not None:
            style = pnl_style(trade.pnl)
            pnl_str = f"[{style}]{format_money(trade.pnl, signed=True)}[/{style}]"
        else:
            pnl_str = "[cyan]OPEN[/cyan]"

        table.add_row(
            str(trade.id),
            trade.ticker,
            f"[{dir_color}]{trade.direction}[/{dir_color}]",
            trade.instrument,
            str(trade.size),
            format_money(trade.entry_price),
            format_money(trade.exit_price),
            pnl_str,
            trade.setup_type or "other",
            trade.status,
            trade.entry_time.strftime("%Y-%m-%d"),
        )
    return table


def narratives_table(narratives: list[Narrative]) -> Table:
    table = Table(title="Narratives", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Ticker", style="bold")
    table.add_column("Dir", justify="center")
    table.add_column("Status")
    table.add_column("Narrative", max_width=50)
    table.add_column("Levels")
    table.add_column("Invalid", justify="right")
    table.add_column("Date", style="dim")

    for narrative in narratives:
        color = {"bull": "green", "bear": "red"}.get(narrative.direction, "yellow")
        table.add_row(
            str(narrative.id),
            narrative.ticker,
            f"[{color}]{narrative.direction}[/{color}]",
            narrative.status,
            truncate(narrative.narrative, 50),
            format_levels(narrative.key_levels),
            f"{narrative.invalidation:g}" if narrative.invalidation is not None else "",
            narrative.created_at.strftime("%Y-%m-%d"),
        )
    return table


def watchlist_table(items: list[WatchlistItem]) -> Table:
    table = Table(title="Watchlist", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Ticker", style="bold")
    table.add_column("Bias", justify="center")
    table.add_column("Pri")
    table.add_column("Status")
    table.add_column("Setup", max_width=30)
    table.add_column("Levels")
    table.add_column("Flow", max_width=20)

    for item in items:
        color = {"long": "green", "short": "red"}.get(item.bias, "yellow")
        table.add_row(
            str(item.id),
            item.ticker,
            f"[{color}]{item.bias}[/{color}]",
            "⭐" * item.priority,
            item.status,
            truncate(item.setup, 30),
            format_levels(item.key_levels),
            truncate(item.options_flow_note, 20),
        )
    return table


def journal_panel(entry: JournalEntry) -> Panel:
    sections = []
    if entry.premarket_plan:
        sections.append(f"[bold]Premarket Plan:[/bold]\n{entry.premarket_plan}")
    if entry.postmarket_review:
        sections.append(f"[bold]Postmarket Review:[/bold]\n{entry.postmarket_review}")
    if entry.market_context:
        sections.append(f"[bold]Market Context:[/bold]\n{entry.market_context}")
    if entry.grade:
        sections.append(f"[bold]Grade:[/bold] {entry.grade}")

    return Panel(
        "\n\n".join(sections) or "[dim]Empty entry[/dim]",
        title=f"[bold cyan]Journal - {entry.date.isoformat()}[/bold cyan]",
        border_style="cyan",
    )


def playbook_table(setups: list[PlaybookSetup]) -> Table:
    table = Table(title="Playbook", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description", max_width=40)
    table.add_column("Entry", max_width=30)
    table.add_column("Exit", max_width=30)
    table.add_column("Risk", max_width=30)
    table.add_column("Examples", style="dim")

    for setup in setups:
        table.add_row(
            setup.name,
            setup.description or "",
            setup.entry_rules or "",
            setup.exit_rules or "",
            setup.risk_rules or "",
            setup.example_tickers or "",
        )
    return table


def totals_line(trades: list[Trade]) -> Optional[str]:
    """One-line totals for the closed trades in a listing, None if none are closed."""
    closed = [t for t in trades if t.pnl is not None]
    if not closed:
        return None
    total = sum(t.pnl for t in closed)
    winners = sum(1 for t in closed if t.pnl > 0)
    style = pnl_style(total)
    return (
        f"[bold]Totals:[/bold] {len(closed)} trades, "
        f"{format_percent(winners / len(closed) * 100)} win rate, "
        f"[{style}]{format_money(total, signed=True)}[/{style}] P&L"
    )
