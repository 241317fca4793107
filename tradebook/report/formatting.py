"""Value formatting shared by the terminal and HTML reports."""

import math
from typing import Optional

INFINITY_SYMBOL = "∞"


def format_money(value: Optional[float], signed: bool = False) -> str:
    """Format a dollar amount, e.g. ``$1,234.50`` or ``-$12.00``."""
    if value is None:
        return "-"
    sign = "-" if value < 0 else ("+" if signed and value > 0 else "")
    return f"{sign}${abs(value):,.2f}"


def format_profit_factor(value: float) -> str:
    """Format a profit factor, rendering infinity as a symbol."""
    if math.isinf(value):
        return INFINITY_SYMBOL
    return f"{value:.2f}"


def format_percent(value: float, places: int = 1) -> str:
    return f"{value:.{places}f}%"


def format_levels(levels: Optional[list[float]]) -> str:
    """Join price levels as ``450, 455.5``; empty string when none."""
    if not levels:
        return ""
    return ", ".join(f"{level:g}" for level in levels)


def pnl_style(value: Optional[float]) -> str:
    """Rich style name for a P&L value."""
    if value is None or value == 0:
        return "yellow"
    return "green" if value > 0 else "red"


def pnl_class(value: Optional[float]) -> str:
    """CSS class for a P&L value."""
    if value is None or value == 0:
        return "neutral"
    return "positive" if value > 0 else "negative"


def truncate(text: Optional[str], width: int) -> str:
    if not text:
        return ""
    return text if len(text) <= width else text[: width - 3] + "..."
