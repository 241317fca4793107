"""Dashboard command for tradebook CLI."""

import sqlite3
from pathlib import Path
from typing import Optional

import click
import jinja2

from tradebook.cli.common import console, fail, get_config, get_data_store
from tradebook.report.dashboard import save_dashboard


@click.command("generate")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output HTML file (default from config).",
)
@click.pass_context
def generate(ctx: click.Context, output: Optional[Path]) -> None:
    """Generate the static HTML dashboard.

    \b
    Examples:
      tradebook generate
      tradebook generate -o ~/Desktop/trading.html
    """
    output_path = output.expanduser() if output else get_config(ctx).storage.dashboard_path

    try:
        path = save_dashboard(get_data_store(ctx), output_path)
    except (OSError, sqlite3.Error, jinja2.TemplateError) as e:
        fail(f"Failed to generate dashboard:\n\n{e}")

    console.print(f"[green]✓ Dashboard written to {path}[/green]")
