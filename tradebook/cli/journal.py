"""Journal commands for tradebook CLI."""

import sqlite3
from datetime import date
from typing import Optional

import click

from tradebook.cli.common import console, empty, fail, get_data_store
from tradebook.models.journal import GRADES
from tradebook.report.text import journal_panel


@click.group()
def journal() -> None:
    """Keep a daily trading journal.

    Each day has one entry with a premarket plan and a postmarket
    review. Writing either part again replaces it.

    \b
    Examples:
      tradebook journal plan "Only A+ setups. SPY 450 is the line."
      tradebook journal review "Followed the plan" --grade B --context "Choppy, low volume"
      tradebook journal show
      tradebook journal show --date 2024-05-01
    """
    pass


@journal.command("plan")
@click.argument("text")
@click.pass_context
def plan(ctx: click.Context, text: str) -> None:
    """Set today's premarket plan."""
    try:
        get_data_store(ctx).set_plan(text)
    except (ValueError, sqlite3.Error) as e:
        fail(str(e))

    console.print("[green]✓ Premarket plan saved[/green]")


@journal.command("review")
@click.argument("text")
@click.option("--grade", type=click.Choice(GRADES), default=None, help="Letter grade for the day.")
@click.option("--context", "market_context", default=None, help="Market context.")
@click.pass_context
def review(
    ctx: click.Context, text: str, grade: Optional[str], market_context: Optional[str]
) -> None:
    """Set today's postmarket review."""
    try:
        get_data_store(ctx).set_review(text, context=market_context, grade=grade)
    except (ValueError, sqlite3.Error) as e:
        fail(str(e))

    console.print("[green]✓ Postmarket review saved[/green]")


@journal.command("show")
@click.option("--date", "on_date", default=None, help="Journal date (YYYY-MM-DD). Defaults to today.")
@click.pass_context
def show(ctx: click.Context, on_date: Optional[str]) -> None:
    """Show a day's journal entry."""
    entry_date = date.today()
    if on_date:
        try:
            entry_date = date.fromisoformat(on_date)
        except ValueError:
            fail(f"Invalid date format: {on_date}. Use YYYY-MM-DD")

    entry = get_data_store(ctx).get_journal(entry_date)
    if entry is None:
        empty(f"No journal entry for {entry_date.isoformat()}", "Journal")
        return

    console.print(journal_panel(entry))
