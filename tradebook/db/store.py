"""SQLite data store for tradebook."""

import json
import logging
import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from tradebook.models import (
    JournalEntry,
    Narrative,
    PlaybookSetup,
    Trade,
    WatchlistItem,
)
from tradebook.models.journal import GRADES
from tradebook.models.narrative import (
    NARRATIVE_DIRECTIONS,
    TERMINAL_NARRATIVE_STATUSES,
    TIMEFRAMES,
)
from tradebook.models.trade import DIRECTIONS, INSTRUMENTS, SETUP_TYPES
from tradebook.models.watchlist import BIASES

logger = logging.getLogger(__name__)

PERIODS = ("today", "week", "month", "all")
WATCH_STATUSES = ("watching", "triggered", "skipped", "missed")


def period_start(period: str, today: Optional[date] = None) -> Optional[date]:
    """Resolve a reporting period to its first included date.

    Args:
        period: One of 'today', 'week', 'month' or 'all'.
        today: Reference date. Defaults to the current date.

    Returns:
        The start date, or None for 'all'.

    Raises:
        ValueError: For an unknown period.
    """
    today = today or date.today()
    if period == "today":
        return today
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return today - timedelta(days=30)
    if period == "all":
        return None
    raise ValueError(f"Invalid period: {period}. Must be one of {list(PERIODS)}")


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _dump_levels(levels: Optional[list[float]]) -> Optional[str]:
    return json.dumps(levels) if levels else None


def _load_levels(value: Optional[str]) -> Optional[list[float]]:
    return json.loads(value) if value else None


class DataStore:
    """SQLite-based data store for tradebook."""

    REQUIRED_TABLES = [
        "narratives",
        "watchlist",
        "trades",
        "journal",
        "playbook",
    ]

    def __init__(
        self,
        db_path: Path,
        commission: float = 1.0,
        contract_multiplier: int = 100,
    ):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
            commission: Flat round-trip commission charged at entry.
            contract_multiplier: Shares represented by one options contract.
        """
        self.db_path = Path(db_path)
        self.commission = commission
        self.contract_multiplier = contract_multiplier
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Narratives table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS narratives (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    ticker TEXT NOT NULL,
                    narrative TEXT NOT NULL,
                    direction TEXT NOT NULL DEFAULT 'neutral'
                        CHECK(direction IN ('bull', 'bear', 'neutral')),
                    timeframe TEXT NOT NULL DEFAULT 'intraday'
                        CHECK(timeframe IN ('intraday', 'swing', 'multi-day')),
                    key_levels TEXT,
                    invalidation REAL,
                    status TEXT NOT NULL DEFAULT 'active'
                        CHECK(status IN ('active', 'triggered', 'invalidated', 'expired')),
                    created_at TEXT NOT NULL,
                    updated_at TEXT,
                    resolved_at TEXT
                )
            """)

            # Watchlist table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS watchlist (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    ticker TEXT NOT NULL,
                    setup TEXT NOT NULL,
                    key_levels TEXT,
                    bias TEXT NOT NULL DEFAULT 'neutral'
                        CHECK(bias IN ('long', 'short', 'neutral')),
                    priority INTEGER NOT NULL DEFAULT 3
                        CHECK(priority BETWEEN 1 AND 5),
                    options_flow_note TEXT,
                    status TEXT NOT NULL DEFAULT 'watching'
                        CHECK(status IN ('watching', 'triggered', 'skipped', 'missed')),
                    created_at TEXT NOT NULL
                )
            """)

            # Trades table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    ticker TEXT NOT NULL,
                    direction TEXT NOT NULL CHECK(direction IN ('long', 'short')),
                    instrument TEXT NOT NULL CHECK(instrument IN
                        ('shares', 'calls', 'puts', '0dte-calls', '0dte-puts', 'csp')),
                    entry_price REAL NOT NULL,
                    entry_time TEXT NOT NULL,
                    exit_price REAL,
                    exit_time TEXT,
                    size INTEGER NOT NULL CHECK(size > 0),
                    cost_basis REAL NOT NULL,
                    proceeds REAL,
                    pnl REAL,
                    pnl_pct REAL,
                    setup_type TEXT DEFAULT 'other' CHECK(setup_type IN
                        ('breakout', 'fade', 'momentum', 'reversal', 'csp', 'squeeze', 'other')),
                    narrative_id INTEGER REFERENCES narratives(id) ON DELETE SET NULL,
                    watchlist_id INTEGER REFERENCES watchlist(id) ON DELETE SET NULL,
                    planned_risk REAL,
                    planned_target REAL,
                    actual_rr REAL,
                    notes TEXT,
                    lessons TEXT,
                    status TEXT NOT NULL DEFAULT 'open' CHECK(status IN ('open', 'closed')),
                    is_paper INTEGER NOT NULL DEFAULT 0
                )
            """)

            # Journal table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL UNIQUE,
                    premarket_plan TEXT,
                    postmarket_review TEXT,
                    market_context TEXT,
                    grade TEXT CHECK(grade IN ('A', 'B', 'C', 'D', 'F')),
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # Playbook table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS playbook (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT,
                    entry_rules TEXT,
                    exit_rules TEXT,
                    risk_rules TEXT,
                    example_tickers TEXT,
                    status TEXT NOT NULL DEFAULT 'active'
                        CHECK(status IN ('active', 'retired')),
                    created_at TEXT NOT NULL
                )
            """)

            for statement in (
                "CREATE INDEX IF NOT EXISTS idx_narratives_status ON narratives(status)",
                "CREATE INDEX IF NOT EXISTS idx_narratives_ticker ON narratives(ticker)",
                "CREATE INDEX IF NOT EXISTS idx_watchlist_date ON watchlist(date)",
                "CREATE INDEX IF NOT EXISTS idx_watchlist_status ON watchlist(status)",
                "CREATE INDEX IF NOT EXISTS idx_trades_status ON trades(status)",
                "CREATE INDEX IF NOT EXISTS idx_trades_ticker ON trades(ticker)",
                "CREATE INDEX IF NOT EXISTS idx_trades_entry_time ON trades(entry_time)",
            ):
                cursor.execute(statement)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Trades ====================

    def multiplier_for(self, instrument: str) -> int:
        """Units per contract: 1 for shares, the contract multiplier otherwise."""
        return 1 if instrument == "shares" else self.contract_multiplier

    def open_trade(
        self,
        ticker: str,
        direction: str,
        instrument: str,
        entry_price: float,
        size: int,
        setup_type: str = "other",
        narrative_id: Optional[int] = None,
        watchlist_id: Optional[int] = None,
        planned_risk: Optional[float] = None,
        planned_target: Optional[float] = None,
        notes: Optional[str] = None,
        is_paper: bool = False,
        entry_time: Optional[datetime] = None,
    ) -> int:
        """Open a new trade.

        The cost basis is ``entry_price * size * multiplier`` plus the flat
        round-trip commission.

        Args:
            ticker: Ticker symbol (stored upper-case).
            direction: 'long' or 'short'.
            instrument: Instrument type.
            entry_price: Entry price per share or per contract.
            size: Number of shares or contracts.
            setup_type: Setup tag.
            narrative_id: Optional linked narrative.
            watchlist_id: Optional linked watchlist item.
            planned_risk: Planned dollar risk, used for the realized R multiple.
            planned_target: Planned dollar target.
            notes: Entry notes.
            is_paper: Whether this is a paper trade.
            entry_time: Entry timestamp. Defaults to now.

        Returns:
            The ID of the new trade.

        Raises:
            ValueError: For an unknown direction, instrument or setup, or a
                non-positive size.
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"Direction must be one of: {', '.join(DIRECTIONS)}")
        if instrument not in INSTRUMENTS:
            raise ValueError(f"Instrument must be one of: {', '.join(INSTRUMENTS)}")
        if setup_type not in SETUP_TYPES:
            raise ValueError(f"Setup must be one of: {', '.join(SETUP_TYPES)}")
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        if entry_price < 0:
            raise ValueError(f"Entry price cannot be negative, got {entry_price}")

        cost_basis = entry_price * size * self.multiplier_for(instrument) + self.commission
        timestamp = (entry_time or datetime.now()).isoformat(timespec="seconds")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO trades (
                    ticker, direction, instrument, entry_price, entry_time, size,
                    cost_basis, setup_type, narrative_id, watchlist_id,
                    planned_risk, planned_target, notes, status, is_paper
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 'open', ?)
                """,
                (
                    ticker.upper(),
                    direction,
                    instrument,
                    entry_price,
                    timestamp,
                    size,
                    cost_basis,
                    setup_type,
                    narrative_id,
                    watchlist_id,
                    planned_risk,
                    planned_target,
                    notes,
                    1 if is_paper else 0,
                ),
            )
            conn.commit()
            trade_id = cursor.lastrowid or 0
        finally:
            conn.close()

        logger.info(
            "Opened %strade #%d: %s %s %s x%d @ %.2f",
            "paper " if is_paper else "",
            trade_id,
            direction,
            ticker.upper(),
            instrument,
            size,
            entry_price,
        )
        return trade_id

    def close_trade(
        self,
        trade_id: int,
        exit_price: float,
        notes: Optional[str] = None,
        lessons: Optional[str] = None,
        exit_time: Optional[datetime] = None,
    ) -> Trade:
        """Close an open trade and fix its P&L.

        Proceeds are ``exit_price * size * multiplier``; the commission was
        already charged in the cost basis.

        Args:
            trade_id: Trade to close.
            exit_price: Exit price per share or per contract.
            notes: Closing notes. Keeps the entry notes when omitted.
            lessons: Lessons learned.
            exit_time: Exit timestamp. Defaults to now.

        Returns:
            The closed trade.

        Raises:
            ValueError: If the trade does not exist or is already closed.
        """
        trade = self.get_trade(trade_id)
        if trade is None:
            raise ValueError(f"Trade {trade_id} not found")
        if trade.is_closed:
            raise ValueError(f"Trade {trade_id} is already closed")
        if exit_price < 0:
            raise ValueError(f"Exit price cannot be negative, got {exit_price}")

        proceeds = exit_price * trade.size * self.multiplier_for(trade.instrument)
        pnl = proceeds - trade.cost_basis
        pnl_pct = (pnl / trade.cost_basis * 100) if trade.cost_basis else None
        actual_rr = (pnl / trade.planned_risk) if trade.planned_risk else None
        timestamp = (exit_time or datetime.now()).isoformat(timespec="seconds")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE trades
                SET exit_price = ?, exit_time = ?, proceeds = ?, pnl = ?, pnl_pct = ?,
                    actual_rr = ?, status = 'closed', notes = ?, lessons = ?
                WHERE id = ? AND status = 'open'
                """,
                (
                    exit_price,
                    timestamp,
                    proceeds,
                    pnl,
                    pnl_pct,
                    actual_rr,
                    notes if notes is not None else trade.notes,
                    lessons,
                    trade_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info("Closed trade #%d @ %.2f, pnl %.2f", trade_id, exit_price, pnl)
        return self.get_trade(trade_id)

    def update_trade_notes(
        self, trade_id: int, notes: Optional[str], lessons: Optional[str] = None
    ) -> None:
        """Replace the free-text notes and lessons of a trade.

        Raises:
            ValueError: If the trade does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE trades SET notes = ?, lessons = ? WHERE id = ?",
                (notes, lessons, trade_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise ValueError(f"Trade {trade_id} not found")
        finally:
            conn.close()

    def get_trade(self, trade_id: int) -> Optional[Trade]:
        """Get a trade by ID.

        Returns:
            Trade if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM trades WHERE id = ?", (trade_id,))
            row = cursor.fetchone()
            return self._row_to_trade(row) if row else None
        finally:
            conn.close()

    def get_trades(
        self,
        open_only: bool = False,
        closed_only: bool = False,
        paper: bool = False,
        include_paper: bool = False,
        ticker: Optional[str] = None,
        on_date: Optional[date] = None,
        since: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Trade]:
        """Get trades, most recent entry first.

        Args:
            open_only: Only open trades.
            closed_only: Only closed trades.
            paper: Only paper trades.
            include_paper: Include paper trades alongside real ones.
            ticker: Only trades in this ticker.
            on_date: Only trades entered on this date.
            since: Only trades entered on or after this date.
            limit: Maximum number of trades to return.

        Returns:
            List of trades.
        """
        query = "SELECT * FROM trades WHERE 1=1"
        params: list = []

        if paper:
            query += " AND is_paper = 1"
        elif not include_paper:
            query += " AND is_paper = 0"

        if open_only:
            query += " AND status = 'open'"
        elif closed_only:
            query += " AND status = 'closed'"

        if ticker:
            query += " AND ticker = ?"
            params.append(ticker.upper())
        if on_date:
            query += " AND date(entry_time) = ?"
            params.append(on_date.isoformat())
        if since:
            query += " AND date(entry_time) >= ?"
            params.append(since.isoformat())

        query += " ORDER BY entry_time DESC, id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_closed_trades(
        self,
        period: str = "all",
        ticker: Optional[str] = None,
        paper: bool = False,
        today: Optional[date] = None,
    ) -> list[Trade]:
        """Get closed trades for a reporting period, most recent first.

        Args:
            period: 'today', 'week', 'month' or 'all'.
            ticker: Optional ticker filter.
            paper: Analyze paper trades instead of real ones.
            today: Reference date for the period window.

        Raises:
            ValueError: For an unknown period.
        """
        start = period_start(period, today)
        if period == "today":
            return self.get_trades(closed_only=True, paper=paper, ticker=ticker, on_date=start)
        return self.get_trades(closed_only=True, paper=paper, ticker=ticker, since=start)

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> Trade:
        return Trade(
            id=row["id"],
            ticker=row["ticker"],
            direction=row["direction"],
            instrument=row["instrument"],
            entry_price=row["entry_price"],
            exit_price=row["exit_price"],
            size=row["size"],
            cost_basis=row["cost_basis"],
            proceeds=row["proceeds"],
            pnl=row["pnl"],
            pnl_pct=row["pnl_pct"],
            setup_type=row["setup_type"],
            narrative_id=row["narrative_id"],
            watchlist_id=row["watchlist_id"],
            planned_risk=row["planned_risk"],
            planned_target=row["planned_target"],
            actual_rr=row["actual_rr"],
            notes=row["notes"],
            lessons=row["lessons"],
            status=row["status"],
            entry_time=datetime.fromisoformat(row["entry_time"]),
            exit_time=_parse_dt(row["exit_time"]),
            is_paper=bool(row["is_paper"]),
        )

    # ==================== Narratives ====================

    def add_narrative(
        self,
        ticker: str,
        narrative: str,
        direction: str = "neutral",
        timeframe: str = "intraday",
        key_levels: Optional[list[float]] = None,
        invalidation: Optional[float] = None,
    ) -> int:
        """Add a new active narrative.

        Returns:
            The ID of the new narrative.

        Raises:
            ValueError: For an unknown direction or timeframe.
        """
        if direction not in NARRATIVE_DIRECTIONS:
            raise ValueError(f"Direction must be one of: {', '.join(NARRATIVE_DIRECTIONS)}")
        if timeframe not in TIMEFRAMES:
            raise ValueError(f"Timeframe must be one of: {', '.join(TIMEFRAMES)}")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO narratives
                (ticker, narrative, direction, timeframe, key_levels, invalidation, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    ticker.upper(),
                    narrative,
                    direction,
                    timeframe,
                    _dump_levels(key_levels),
                    invalidation,
                    _now(),
                ),
            )
            conn.commit()
            narrative_id = cursor.lastrowid or 0
        finally:
            conn.close()

        logger.info("Added narrative #%d for %s", narrative_id, ticker.upper())
        return narrative_id

    def get_narratives(
        self, active_only: bool = False, ticker: Optional[str] = None
    ) -> list[Narrative]:
        """Get narratives, newest first.

        Args:
            active_only: Only narratives still active.
            ticker: Optional ticker filter.
        """
        query = "SELECT * FROM narratives WHERE 1=1"
        params: list = []
        if active_only:
            query += " AND status = 'active'"
        if ticker:
            query += " AND ticker = ?"
            params.append(ticker.upper())
        query += " ORDER BY created_at DESC, id DESC"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_narrative(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_narrative(self, narrative_id: int) -> Optional[Narrative]:
        """Get a narrative by ID."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM narratives WHERE id = ?", (narrative_id,))
            row = cursor.fetchone()
            return self._row_to_narrative(row) if row else None
        finally:
            conn.close()

    def update_narrative_status(self, narrative_id: int, status: str) -> Narrative:
        """Resolve an active narrative.

        A narrative leaves 'active' exactly once, to 'triggered',
        'invalidated' or 'expired'.

        Returns:
            The updated narrative.

        Raises:
            ValueError: If the narrative does not exist, is already resolved,
                or the status is not terminal.
        """
        if status not in TERMINAL_NARRATIVE_STATUSES:
            raise ValueError(
                f"Status must be one of: {', '.join(TERMINAL_NARRATIVE_STATUSES)}"
            )

        current = self.get_narrative(narrative_id)
        if current is None:
            raise ValueError(f"Narrative {narrative_id} not found")
        if current.status != "active":
            raise ValueError(f"Narrative {narrative_id} is already {current.status}")

        now = _now()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE narratives
                SET status = ?, updated_at = ?, resolved_at = ?
                WHERE id = ? AND status = 'active'
                """,
                (status, now, now, narrative_id),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info("Narrative #%d -> %s", narrative_id, status)
        return self.get_narrative(narrative_id)

    @staticmethod
    def _row_to_narrative(row: sqlite3.Row) -> Narrative:
        return Narrative(
            id=row["id"],
            ticker=row["ticker"],
            narrative=row["narrative"],
            direction=row["direction"],
            timeframe=row["timeframe"],
            key_levels=_load_levels(row["key_levels"]),
            invalidation=row["invalidation"],
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=_parse_dt(row["updated_at"]),
            resolved_at=_parse_dt(row["resolved_at"]),
        )

    # ==================== Watchlist ====================

    def add_to_watchlist(
        self,
        ticker: str,
        setup: str,
        key_levels: Optional[list[float]] = None,
        bias: str = "neutral",
        priority: int = 3,
        options_flow_note: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> int:
        """Add a ticker to a day's watchlist.

        Args:
            ticker: Ticker symbol.
            setup: Setup description.
            key_levels: Key price levels.
            bias: 'long', 'short' or 'neutral'.
            priority: Priority from 1 to 5.
            options_flow_note: Free-text options flow note.
            on_date: Watchlist date. Defaults to today.

        Returns:
            The ID of the new item.

        Raises:
            ValueError: For an unknown bias or a priority outside 1-5.
        """
        if bias not in BIASES:
            raise ValueError(f"Bias must be one of: {', '.join(BIASES)}")
        if not 1 <= priority <= 5:
            raise ValueError(f"Priority must be between 1 and 5, got {priority}")

        item_date = on_date or date.today()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO watchlist
                (date, ticker, setup, key_levels, bias, priority, options_flow_note, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item_date.isoformat(),
                    ticker.upper(),
                    setup,
                    _dump_levels(key_levels),
                    bias,
                    priority,
                    options_flow_note,
                    _now(),
                ),
            )
            conn.commit()
            item_id = cursor.lastrowid or 0
        finally:
            conn.close()

        logger.info("Added %s to watchlist for %s (#%d)", ticker.upper(), item_date, item_id)
        return item_id

    def get_watchlist(
        self, on_date: Optional[date] = None, active_only: bool = False
    ) -> list[WatchlistItem]:
        """Get watchlist items, highest priority then newest first.

        Args:
            on_date: Only items for this date. All dates when None.
            active_only: Only items still being watched.
        """
        query = "SELECT * FROM watchlist WHERE 1=1"
        params: list = []
        if on_date:
            query += " AND date = ?"
            params.append(on_date.isoformat())
        if active_only:
            query += " AND status = 'watching'"
        query += " ORDER BY priority DESC, created_at DESC, id DESC"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [
                WatchlistItem(
                    id=row["id"],
                    date=date.fromisoformat(row["date"]),
                    ticker=row["ticker"],
                    setup=row["setup"],
                    key_levels=_load_levels(row["key_levels"]),
                    bias=row["bias"],
                    priority=row["priority"],
                    options_flow_note=row["options_flow_note"],
                    status=row["status"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def update_watchlist_status(self, item_id: int, status: str) -> None:
        """Update the status of a watchlist item.

        Raises:
            ValueError: For an unknown status or a missing item.
        """
        if status not in WATCH_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(WATCH_STATUSES)}")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("UPDATE watchlist SET status = ? WHERE id = ?", (status, item_id))
            conn.commit()
            if cursor.rowcount == 0:
                raise ValueError(f"Watchlist item {item_id} not found")
        finally:
            conn.close()

    def clear_watchlist(self, before: Optional[date] = None) -> int:
        """Delete watchlist items dated before a day.

        Args:
            before: Cutoff date, exclusive. Defaults to today.

        Returns:
            Number of items removed.
        """
        cutoff = before or date.today()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM watchlist WHERE date < ?", (cutoff.isoformat(),))
            conn.commit()
            removed = cursor.rowcount
        finally:
            conn.close()

        logger.info("Cleared %d watchlist items dated before %s", removed, cutoff)
        return removed

    # ==================== Journal ====================

    def set_plan(self, plan: str, on_date: Optional[date] = None) -> None:
        """Create or update the premarket plan for a day.

        Args:
            plan: Premarket plan text.
            on_date: Journal date. Defaults to today.
        """
        entry_date = (on_date or date.today()).isoformat()
        now = _now()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO journal (date, premarket_plan, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(date) DO UPDATE SET
                    premarket_plan = excluded.premarket_plan,
                    updated_at = excluded.updated_at
                """,
                (entry_date, plan, now, now),
            )
            conn.commit()
        finally:
            conn.close()

    def set_review(
        self,
        review: str,
        context: Optional[str] = None,
        grade: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> None:
        """Create or update the postmarket review for a day.

        Context and grade keep their previous values when omitted.

        Args:
            review: Postmarket review text.
            context: Market context.
            grade: Letter grade A-F.
            on_date: Journal date. Defaults to today.

        Raises:
            ValueError: For a grade outside A-F.
        """
        if grade is not None and grade not in GRADES:
            raise ValueError(f"Grade must be one of: {', '.join(GRADES)}")

        entry_date = (on_date or date.today()).isoformat()
        now = _now()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO journal
                (date, postmarket_review, market_context, grade, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(date) DO UPDATE SET
                    postmarket_review = excluded.postmarket_review,
                    market_context = COALESCE(excluded.market_context, journal.market_context),
                    grade = COALESCE(excluded.grade, journal.grade),
                    updated_at = excluded.updated_at
                """,
                (entry_date, review, context, grade, now, now),
            )
            conn.commit()
        finally:
            conn.close()

    def get_journal(self, on_date: Optional[date] = None) -> Optional[JournalEntry]:
        """Get the journal entry for a day.

        Args:
            on_date: Journal date. Defaults to today.

        Returns:
            JournalEntry if one exists, None otherwise.
        """
        entry_date = (on_date or date.today()).isoformat()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM journal WHERE date = ?", (entry_date,))
            row = cursor.fetchone()
            if row:
                return JournalEntry(
                    id=row["id"],
                    date=date.fromisoformat(row["date"]),
                    premarket_plan=row["premarket_plan"],
                    postmarket_review=row["postmarket_review"],
                    market_context=row["market_context"],
                    grade=row["grade"],
                    created_at=_parse_dt(row["created_at"]),
                    updated_at=_parse_dt(row["updated_at"]),
                )
            return None
        finally:
            conn.close()

    # ==================== Playbook ====================

    def add_playbook(
        self,
        name: str,
        description: Optional[str] = None,
        entry_rules: Optional[str] = None,
        exit_rules: Optional[str] = None,
        risk_rules: Optional[str] = None,
        example_tickers: Optional[str] = None,
    ) -> int:
        """Add a playbook setup.

        Returns:
            The ID of the new setup.

        Raises:
            sqlite3.IntegrityError: If a setup with this name exists.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO playbook
                (name, description, entry_rules, exit_rules, risk_rules, example_tickers, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (name, description, entry_rules, exit_rules, risk_rules, example_tickers, _now()),
            )
            conn.commit()
            return cursor.lastrowid or 0
        finally:
            conn.close()

    def get_playbook(self) -> list[PlaybookSetup]:
        """Get active playbook setups ordered by name."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM playbook WHERE status = 'active' ORDER BY name")
            return [
                PlaybookSetup(
                    id=row["id"],
                    name=row["name"],
                    description=row["description"],
                    entry_rules=row["entry_rules"],
                    exit_rules=row["exit_rules"],
                    risk_rules=row["risk_rules"],
                    example_tickers=row["example_tickers"],
                    status=row["status"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
