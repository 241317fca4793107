"""Playbook commands for tradebook CLI."""

import sqlite3
from typing import Optional

import click

from tradebook.cli.common import console, empty, fail, get_data_store
from tradebook.report.text import playbook_table


@click.group()
def playbook() -> None:
    """Document repeatable setups and their rules.

    \b
    Examples:
      tradebook playbook add "ORB" --description "Opening range breakout" \\
          --entry "Break of 5m range on volume" --exit "Trail under 9 EMA"
      tradebook playbook list
    """
    pass


@playbook.command("add")
@click.argument("name")
@click.option("--description", default=None, help="What the setup is.")
@click.option("--entry", "entry_rules", default=None, help="Entry rules.")
@click.option("--exit", "exit_rules", default=None, help="Exit rules.")
@click.option("--risk", "risk_rules", default=None, help="Risk rules.")
@click.option("--examples", "example_tickers", default=None, help="Example tickers.")
@click.pass_context
def add_setup(
    ctx: click.Context,
    name: str,
    description: Optional[str],
    entry_rules: Optional[str],
    exit_rules: Optional[str],
    risk_rules: Optional[str],
    example_tickers: Optional[str],
) -> None:
    """Add setup NAME to the playbook."""
    try:
        get_data_store(ctx).add_playbook(
            name,
            description=description,
            entry_rules=entry_rules,
            exit_rules=exit_rules,
            risk_rules=risk_rules,
            example_tickers=example_tickers,
        )
    except sqlite3.IntegrityError:
        fail(f"A setup named '{name}' already exists")
    except sqlite3.Error as e:
        fail(str(e))

    console.print(f"[green]✓ Added '{name}' to playbook[/green]")


@playbook.command("list")
@click.pass_context
def list_setups(ctx: click.Context) -> None:
    """List active playbook setups."""
    setups = get_data_store(ctx).get_playbook()
    if not setups:
        empty("No playbook setups yet", "Playbook")
        return

    console.print(playbook_table(setups))
