"""Narrative commands for tradebook CLI.

Handles adding, listing and resolving market narratives.
"""

import sqlite3
from typing import Optional

import click

from tradebook.cli.common import console, empty, fail, get_data_store, parse_levels
from tradebook.models.narrative import (
    NARRATIVE_DIRECTIONS,
    TERMINAL_NARRATIVE_STATUSES,
    TIMEFRAMES,
)
from tradebook.report.text import narratives_table


@click.group()
def narrative() -> None:
    """Manage trading narratives.

    A narrative is a thesis for a ticker with key levels and an
    invalidation price. It stays active until it triggers, is
    invalidated, or expires.

    \b
    Examples:
      tradebook narrative add NVDA "Holding 120 into earnings" --direction bull
      tradebook narrative list --active
      tradebook narrative update 3 --status triggered
    """
    pass


@narrative.command("add")
@click.argument("ticker")
@click.argument("text")
@click.option(
    "--direction",
    type=click.Choice(NARRATIVE_DIRECTIONS),
    default="neutral",
    show_default=True,
    help="Directional bias.",
)
@click.option("--levels", default=None, help="Comma-separated key price levels.")
@click.option("--invalidation", type=float, default=None, help="Invalidation price.")
@click.option(
    "--timeframe",
    type=click.Choice(TIMEFRAMES),
    default="intraday",
    show_default=True,
    help="Thesis horizon.",
)
@click.pass_context
def add_narrative(
    ctx: click.Context,
    ticker: str,
    text: str,
    direction: str,
    levels: Optional[str],
    invalidation: Optional[float],
    timeframe: str,
) -> None:
    """Add a new narrative for TICKER."""
    try:
        store = get_data_store(ctx)
        narrative_id = store.add_narrative(
            ticker,
            text,
            direction=direction,
            timeframe=timeframe,
            key_levels=parse_levels(levels),
            invalidation=invalidation,
        )
    except (ValueError, sqlite3.Error) as e:
        fail(f"Failed to add narrative:\n\n{e}")

    console.print(f"[green]✓ Added narrative #{narrative_id} for {ticker.upper()}[/green]")


@narrative.command("list")
@click.option("--active", is_flag=True, default=False, help="Show only active narratives.")
@click.option("--ticker", default=None, help="Filter by ticker.")
@click.pass_context
def list_narratives(ctx: click.Context, active: bool, ticker: Optional[str]) -> None:
    """List narratives, newest first."""
    store = get_data_store(ctx)
    narratives = store.get_narratives(active_only=active, ticker=ticker)

    if not narratives:
        empty("No narratives found", "Narratives")
        return

    console.print(narratives_table(narratives))


@narrative.command("update")
@click.argument("narrative_id", type=int)
@click.option(
    "--status",
    type=click.Choice(TERMINAL_NARRATIVE_STATUSES),
    required=True,
    help="Resolution status.",
)
@click.pass_context
def update_narrative(ctx: click.Context, narrative_id: int, status: str) -> None:
    """Resolve narrative NARRATIVE_ID."""
    try:
        store = get_data_store(ctx)
        store.update_narrative_status(narrative_id, status)
    except (ValueError, sqlite3.Error) as e:
        fail(str(e))

    console.print(f"[green]✓ Updated narrative #{narrative_id} to {status}[/green]")
