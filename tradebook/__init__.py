"""tradebook: a personal trading journal and analytics CLI."""

__version__ = "0.1.0"
