"""Watchlist management commands for tradebook CLI.

Handles the per-day watchlist: add, list, status updates and clearing
items from previous days.
"""

import sqlite3
from datetime import date
from typing import Optional

import click

from tradebook.cli.common import console, empty, fail, get_data_store, parse_levels
from tradebook.db.store import WATCH_STATUSES
from tradebook.models.watchlist import BIASES
from tradebook.report.text import watchlist_table


@click.group()
def watch() -> None:
    """Manage the daily watchlist.

    Items belong to the day they were added. Use 'clear' to purge
    items from previous days.

    \b
    Examples:
      tradebook watch add AAPL "Break of 190 on volume" --bias long --priority 4
      tradebook watch list
      tradebook watch list --date 2024-05-01
      tradebook watch update 12 --status triggered
      tradebook watch clear
    """
    pass


@watch.command("add")
@click.argument("ticker")
@click.argument("setup")
@click.option("--levels", default=None, help="Comma-separated key price levels.")
@click.option(
    "--bias",
    type=click.Choice(BIASES),
    default="neutral",
    show_default=True,
    help="Directional bias.",
)
@click.option(
    "--priority",
    type=click.IntRange(1, 5),
    default=3,
    show_default=True,
    help="Priority from 1 (low) to 5 (high).",
)
@click.option("--flow", default=None, help="Options flow note.")
@click.pass_context
def add_item(
    ctx: click.Context,
    ticker: str,
    setup: str,
    levels: Optional[str],
    bias: str,
    priority: int,
    flow: Optional[str],
) -> None:
    """Add TICKER to today's watchlist with a SETUP description."""
    try:
        store = get_data_store(ctx)
        item_id = store.add_to_watchlist(
            ticker,
            setup,
            key_levels=parse_levels(levels),
            bias=bias,
            priority=priority,
            options_flow_note=flow,
        )
    except (ValueError, sqlite3.Error) as e:
        fail(f"Failed to add to watchlist:\n\n{e}")

    console.print(f"[green]✓ Added {ticker.upper()} to watchlist (#{item_id})[/green]")


@watch.command("list")
@click.option(
    "--date",
    "list_date",
    default="today",
    show_default=True,
    help="Date to show (YYYY-MM-DD), 'today', or 'all'.",
)
@click.option("--active", is_flag=True, default=False, help="Show only items still being watched.")
@click.pass_context
def list_items(ctx: click.Context, list_date: str, active: bool) -> None:
    """Show the watchlist, highest priority first."""
    if list_date == "today":
        on_date = date.today()
    elif list_date == "all":
        on_date = None
    else:
        try:
            on_date = date.fromisoformat(list_date)
        except ValueError:
            fail(f"Invalid date format: {list_date}. Use YYYY-MM-DD")

    store = get_data_store(ctx)
    items = store.get_watchlist(on_date=on_date, active_only=active)

    if not items:
        empty("No watchlist items found", "Watchlist")
        return

    console.print(watchlist_table(items))


@watch.command("update")
@click.argument("item_id", type=int)
@click.option(
    "--status",
    type=click.Choice([s for s in WATCH_STATUSES if s != "watching"]),
    required=True,
    help="New status.",
)
@click.pass_context
def update_item(ctx: click.Context, item_id: int, status: str) -> None:
    """Update the status of watchlist item ITEM_ID."""
    try:
        store = get_data_store(ctx)
        store.update_watchlist_status(item_id, status)
    except (ValueError, sqlite3.Error) as e:
        fail(str(e))

    console.print(f"[green]✓ Updated watchlist #{item_id} to {status}[/green]")


@watch.command("clear")
@click.pass_context
def clear_items(ctx: click.Context) -> None:
    """Remove watchlist items from previous days."""
    store = get_data_store(ctx)
    removed = store.clear_watchlist()
    console.print(f"[green]✓ Cleared {removed} old watchlist items[/green]")
