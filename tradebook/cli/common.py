"""Helpers shared by the CLI command modules."""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from tradebook.config import AppConfig
from tradebook.db.store import DataStore

console = Console()


def get_config(ctx: click.Context) -> AppConfig:
    """Configuration loaded by the root command."""
    obj = ctx.find_root().obj or {}
    return obj.get("config") or AppConfig()


def get_data_store(ctx: click.Context) -> DataStore:
    """Build the data store from the root command's settings."""
    config = get_config(ctx)
    obj = ctx.find_root().obj or {}
    return DataStore(
        obj.get("db_path") or config.storage.db_path,
        commission=config.trading.commission,
        contract_multiplier=config.trading.contract_multiplier,
    )


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def empty(message: str, title: str) -> None:
    """Print a dim panel for an empty result."""
    console.print(Panel(
        f"[dim]{message}[/dim]",
        title=f"[bold]{title}[/bold]",
        border_style="dim",
    ))


def parse_levels(value: Optional[str]) -> Optional[list[float]]:
    """Parse a comma-separated list of price levels, skipping non-numbers."""
    if not value:
        return None
    levels = []
    for part in value.split(","):
        try:
            levels.append(float(part.strip()))
        except ValueError:
            continue
    return levels or None
