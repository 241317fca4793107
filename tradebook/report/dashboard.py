"""Static HTML dashboard.

Collects the day's records and the all-time statistics from a DataStore and
renders them through a Jinja2 template into one self-contained page.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tradebook.db.store import DataStore
from tradebook.report.formatting import (
    format_levels,
    format_money,
    format_percent,
    format_profit_factor,
    pnl_class,
)
from tradebook.report.paper import count_outcomes, grade_paper_trade
from tradebook.report.text import streak_label
from tradebook.stats import (
    build_report,
    compute_exposure,
    compute_streaks,
    compute_summary,
)

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
RECENT_TRADES_LIMIT = 20


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["money"] = format_money
    env.filters["profit_factor"] = format_profit_factor
    env.filters["percent"] = format_percent
    env.filters["pnl_class"] = pnl_class
    env.filters["levels"] = format_levels
    return env


def collect_dashboard_data(store: DataStore, today: Optional[date] = None) -> dict[str, Any]:
    """Gather everything the dashboard shows.

    Args:
        store: Data store to read from.
        today: Reference date. Defaults to the current date.

    Returns:
        Template context.
    """
    today = today or date.today()

    closed = store.get_closed_trades("all")
    todays_closed = store.get_trades(closed_only=True, on_date=today)
    open_trades = store.get_trades(open_only=True)
    paper_trades = store.get_trades(paper=True)

    return {
        "today": today,
        "generated_at": datetime.now(),
        "today_summary": compute_summary(todays_closed),
        "report": build_report(closed),
        "streaks": compute_streaks(closed),
        "exposure": compute_exposure(open_trades),
        "open_trades": open_trades,
        "todays_closed": todays_closed,
        "narratives": store.get_narratives(active_only=True),
        "watchlist": store.get_watchlist(on_date=today),
        "journal": store.get_journal(today),
        "recent_trades": store.get_trades(limit=RECENT_TRADES_LIMIT),
        "paper_trades": [(trade, grade_paper_trade(trade)) for trade in paper_trades],
        "paper_open": sum(1 for t in paper_trades if t.status == "open"),
        "paper_outcomes": count_outcomes(paper_trades),
    }


def render_dashboard(context: dict[str, Any]) -> str:
    """Render the dashboard HTML from a context built by collect_dashboard_data."""
    template = _environment().get_template("dashboard.html")
    return template.render(streak_label=streak_label, **context)


def save_dashboard(store: DataStore, output_path: Path, today: Optional[date] = None) -> Path:
    """Render the dashboard and write it to disk.

    Args:
        store: Data store to read from.
        output_path: Destination HTML file. Parent directories are created.
        today: Reference date. Defaults to the current date.

    Returns:
        The path written.
    """
    html = render_dashboard(collect_dashboard_data(store, today))
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    logger.info("Dashboard written to %s", output_path)
    return output_path
