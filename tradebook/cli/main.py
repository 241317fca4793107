"""Main CLI entry point for tradebook.

This module provides the main click group and lazy loading
for command modules to keep startup fast.
"""

from pathlib import Path
from typing import Optional

import click

from tradebook.config import load_config
from tradebook.utils.logger import setup_logging


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Commands are imported only when invoked, and short aliases
    resolve to their full command names.
    """

    def __init__(
        self,
        *args,
        lazy_subcommands: dict[str, str] | None = None,
        aliases: dict[str, str] | None = None,
        **kwargs,
    ):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
            aliases: Mapping of alias to command name.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}
        self._aliases = aliases or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name or alias, lazily loading if needed."""
        cmd_name = self._aliases.get(cmd_name, cmd_name)

        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def resolve_command(self, ctx: click.Context, args: list[str]):
        # Report the canonical name so help and errors never show the alias
        _, cmd, remaining = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, remaining

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                cmd = attr
                break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "narrative": "tradebook.cli.narrative",
    "watch": "tradebook.cli.watchlist",
    "trade": "tradebook.cli.trade",
    "paper": "tradebook.cli.trade",
    "journal": "tradebook.cli.journal",
    "stats": "tradebook.cli.stats",
    "setups": "tradebook.cli.stats",
    "weekdays": "tradebook.cli.stats",
    "streaks": "tradebook.cli.stats",
    "generate": "tradebook.cli.dashboard",
    "playbook": "tradebook.cli.playbook",
}

ALIASES = {
    "n": "narrative",
    "w": "watch",
    "t": "trade",
    "p": "paper",
    "j": "journal",
    "s": "stats",
    "dash": "generate",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    cls=LazyGroup,
    lazy_subcommands=LAZY_SUBCOMMANDS,
    aliases=ALIASES,
    context_settings=CONTEXT_SETTINGS,
)
@click.version_option(package_name="tradebook")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TRADEBOOK_DB",
    default=None,
    help="SQLite database file. Overrides the config file.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TRADEBOOK_CONFIG",
    default=None,
    help="Config file (default: ~/.config/tradebook/config.toml).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    db_path: Optional[Path],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """Tradebook - a personal trading journal and analytics CLI.

    Record trades, narratives, watchlists and a daily journal, then
    review win rate, profit factor, streaks and per-setup performance.

    \b
    Quick Start:
      tradebook trade open SPY long calls 2.50 2 --setup breakout
      tradebook trade close 1 3.10
      tradebook stats --period week
      tradebook generate
    """
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    setup_logging("DEBUG" if verbose else config.logging.level)

    ctx.obj["config"] = config
    ctx.obj["db_path"] = db_path.expanduser() if db_path else config.storage.db_path


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
