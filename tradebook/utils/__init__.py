"""Shared helpers for tradebook."""

from tradebook.utils.logger import setup_logging

__all__ = ["setup_logging"]
