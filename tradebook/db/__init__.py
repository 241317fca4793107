"""SQLite persistence for tradebook."""

from tradebook.db.store import DataStore

__all__ = ["DataStore"]
