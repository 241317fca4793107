"""CLI module for tradebook."""

from tradebook.cli.main import cli, main

__all__ = ["cli", "main"]
