"""Property-based tests for the database store.

**Feature: trade journal storage**
"""

import sqlite3
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradebook.db.store import DataStore, period_start


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


class TestDatabaseSchemaCompleteness:
    """
    *For any* fresh database, all required tables (narratives, watchlist,
    trades, journal, playbook) should exist.
    """

    def test_schema_completeness(self, temp_db: DataStore):
        """Test that all required tables exist in a fresh database."""
        tables = temp_db.get_tables()

        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_creates_parent_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "dir" / "test.db"
            DataStore(db_path)
            assert db_path.exists()

    def test_reopening_keeps_data(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "test.db"
            DataStore(db_path).add_narrative("SPY", "Range day")
            assert len(DataStore(db_path).get_narratives()) == 1

    @given(st.integers(min_value=1, max_value=5))
    @settings(max_examples=10)
    def test_schema_completeness_multiple_instances(self, num_instances: int):
        """
        *For any* number of DataStore instances created with fresh databases,
        all required tables should exist in each.
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            for i in range(num_instances):
                store = DataStore(Path(tmpdir) / f"test_{i}.db")
                tables = store.get_tables()

                for table in DataStore.REQUIRED_TABLES:
                    assert table in tables, f"Required table '{table}' missing in instance {i}"


class TestTradeLifecycle:
    """Trades are opened once and closed once, with P&L fixed at close."""

    def test_open_shares_cost_basis(self, temp_db: DataStore):
        trade_id = temp_db.open_trade("aapl", "long", "shares", 100.0, 10)
        trade = temp_db.get_trade(trade_id)

        assert trade.ticker == "AAPL"
        assert trade.status == "open"
        assert trade.pnl is None
        assert trade.cost_basis == pytest.approx(1001.0)
        assert trade.setup_type == "other"
        assert trade.is_paper is False

    def test_open_options_uses_multiplier(self, temp_db: DataStore):
        trade_id = temp_db.open_trade("SPY", "long", "calls", 2.50, 2)

        assert temp_db.get_trade(trade_id).cost_basis == pytest.approx(501.0)

    def test_custom_commission_and_multiplier(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db", commission=0.0, contract_multiplier=10)
            trade_id = store.open_trade("SPX", "short", "puts", 3.0, 4)
            assert store.get_trade(trade_id).cost_basis == pytest.approx(120.0)

    def test_close_computes_pnl(self, temp_db: DataStore):
        trade_id = temp_db.open_trade(
            "SPY", "long", "calls", 2.50, 2, setup_type="breakout", planned_risk=150.0
        )
        trade = temp_db.close_trade(trade_id, 3.10, lessons="Clean entry")

        assert trade.status == "closed"
        assert trade.proceeds == pytest.approx(620.0)
        assert trade.pnl == pytest.approx(119.0)
        assert trade.pnl_pct == pytest.approx(119.0 / 501.0 * 100)
        assert trade.actual_rr == pytest.approx(119.0 / 150.0)
        assert trade.lessons == "Clean entry"
        assert trade.exit_time is not None

    def test_close_without_planned_risk(self, temp_db: DataStore):
        trade_id = temp_db.open_trade("TSLA", "long", "shares", 200.0, 1)
        trade = temp_db.close_trade(trade_id, 190.0)

        assert trade.pnl == pytest.approx(-11.0)
        assert trade.actual_rr is None

    def test_close_keeps_entry_notes_when_omitted(self, temp_db: DataStore):
        trade_id = temp_db.open_trade("NVDA", "long", "shares", 100.0, 1, notes="VWAP reclaim")
        trade = temp_db.close_trade(trade_id, 101.0)

        assert trade.notes == "VWAP reclaim"

    def test_close_twice_rejected(self, temp_db: DataStore):
        trade_id = temp_db.open_trade("SPY", "long", "shares", 100.0, 1)
        temp_db.close_trade(trade_id, 105.0)

        with pytest.raises(ValueError, match="already closed"):
            temp_db.close_trade(trade_id, 50.0)
        assert temp_db.get_trade(trade_id).exit_price == 105.0

    def test_close_unknown_trade(self, temp_db: DataStore):
        with pytest.raises(ValueError, match="Trade 99 not found"):
            temp_db.close_trade(99, 1.0)

    def test_notes_editable_after_close(self, temp_db: DataStore):
        trade_id = temp_db.open_trade("SPY", "long", "shares", 100.0, 1)
        closed = temp_db.close_trade(trade_id, 102.0)
        temp_db.update_trade_notes(trade_id, "Revisited", "Size up next time")
        updated = temp_db.get_trade(trade_id)

        assert updated.notes == "Revisited"
        assert updated.lessons == "Size up next time"
        assert updated.pnl == closed.pnl

    def test_update_notes_unknown_trade(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.update_trade_notes(42, "nothing")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"direction": "sideways"},
            {"instrument": "futures"},
            {"setup_type": "vibes"},
            {"size": 0},
            {"entry_price": -1.0},
        ],
    )
    def test_invalid_open_rejected(self, temp_db: DataStore, kwargs):
        args = {
            "ticker": "SPY",
            "direction": "long",
            "instrument": "shares",
            "entry_price": 100.0,
            "size": 1,
        }
        args.update(kwargs)
        with pytest.raises(ValueError):
            temp_db.open_trade(**args)

    def test_unknown_narrative_link_rejected(self, temp_db: DataStore):
        with pytest.raises(sqlite3.IntegrityError):
            temp_db.open_trade("SPY", "long", "shares", 100.0, 1, narrative_id=12345)

    @given(
        instrument=st.sampled_from(["shares", "calls", "puts", "0dte-calls", "0dte-puts", "csp"]),
        entry=st.floats(min_value=0.01, max_value=1000.0, allow_nan=False),
        exit_price=st.floats(min_value=0.0, max_value=1000.0, allow_nan=False),
        size=st.integers(min_value=1, max_value=500),
    )
    @settings(max_examples=25, deadline=None)
    def test_pnl_equals_proceeds_minus_cost(self, instrument, entry, exit_price, size):
        """
        *For any* closed trade, pnl equals proceeds minus cost basis.
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            trade_id = store.open_trade("SPY", "long", instrument, entry, size)
            trade = store.close_trade(trade_id, exit_price)

            multiplier = 1 if instrument == "shares" else 100
            assert trade.proceeds == pytest.approx(exit_price * size * multiplier)
            assert trade.pnl == trade.proceeds - trade.cost_basis


class TestTradeQueries:
    """Trade queries filter correctly and return the most recent entry first."""

    def test_most_recent_first(self, temp_db: DataStore):
        base = datetime(2024, 6, 3, 10, 0)
        for hours, ticker in [(0, "A"), (2, "C"), (1, "B")]:
            temp_db.open_trade(ticker, "long", "shares", 10.0, 1, entry_time=base + timedelta(hours=hours))

        assert [t.ticker for t in temp_db.get_trades()] == ["C", "B", "A"]

    def test_paper_trades_separated(self, temp_db: DataStore):
        temp_db.open_trade("REAL", "long", "shares", 10.0, 1)
        temp_db.open_trade("PAPR", "long", "shares", 10.0, 1, is_paper=True)

        assert [t.ticker for t in temp_db.get_trades()] == ["REAL"]
        assert [t.ticker for t in temp_db.get_trades(paper=True)] == ["PAPR"]
        assert len(temp_db.get_trades(include_paper=True)) == 2

    def test_open_and_closed_filters(self, temp_db: DataStore):
        closed_id = temp_db.open_trade("SPY", "long", "shares", 10.0, 1)
        temp_db.open_trade("QQQ", "long", "shares", 10.0, 1)
        temp_db.close_trade(closed_id, 11.0)

        assert [t.ticker for t in temp_db.get_trades(open_only=True)] == ["QQQ"]
        assert [t.ticker for t in temp_db.get_trades(closed_only=True)] == ["SPY"]

    def test_ticker_and_date_filters(self, temp_db: DataStore):
        temp_db.open_trade("SPY", "long", "shares", 10.0, 1, entry_time=datetime(2024, 6, 3, 10))
        temp_db.open_trade("SPY", "long", "shares", 10.0, 1, entry_time=datetime(2024, 6, 4, 10))
        temp_db.open_trade("QQQ", "long", "shares", 10.0, 1, entry_time=datetime(2024, 6, 4, 11))

        assert len(temp_db.get_trades(ticker="spy")) == 2
        assert len(temp_db.get_trades(on_date=date(2024, 6, 4))) == 2
        assert len(temp_db.get_trades(since=date(2024, 6, 4))) == 2
        assert len(temp_db.get_trades(limit=1)) == 1

    def test_closed_trades_by_period(self, temp_db: DataStore):
        today = date(2024, 6, 28)
        for days_ago in (0, 3, 20, 60):
            trade_id = temp_db.open_trade(
                "SPY",
                "long",
                "shares",
                10.0,
                1,
                entry_time=datetime.combine(today - timedelta(days=days_ago), datetime.min.time()),
            )
            temp_db.close_trade(trade_id, 12.0)

        assert len(temp_db.get_closed_trades("today", today=today)) == 1
        assert len(temp_db.get_closed_trades("week", today=today)) == 2
        assert len(temp_db.get_closed_trades("month", today=today)) == 3
        assert len(temp_db.get_closed_trades("all", today=today)) == 4

    def test_unknown_period_rejected(self, temp_db: DataStore):
        with pytest.raises(ValueError, match="Invalid period"):
            temp_db.get_closed_trades("year")

    def test_period_start(self):
        today = date(2024, 6, 28)

        assert period_start("today", today) == today
        assert period_start("week", today) == date(2024, 6, 21)
        assert period_start("month", today) == date(2024, 5, 29)
        assert period_start("all", today) is None


class TestNarratives:
    """Narratives are created active and resolved exactly once."""

    def test_add_and_get(self, temp_db: DataStore):
        narrative_id = temp_db.add_narrative(
            "nvda",
            "Holding 120 into earnings",
            direction="bull",
            timeframe="swing",
            key_levels=[120.0, 125.5],
            invalidation=115.0,
        )
        narrative = temp_db.get_narrative(narrative_id)

        assert narrative.ticker == "NVDA"
        assert narrative.status == "active"
        assert narrative.key_levels == [120.0, 125.5]
        assert narrative.invalidation == 115.0
        assert narrative.timeframe == "swing"
        assert narrative.resolved_at is None

    def test_resolve_once(self, temp_db: DataStore):
        narrative_id = temp_db.add_narrative("SPY", "Gap fill")
        resolved = temp_db.update_narrative_status(narrative_id, "triggered")

        assert resolved.status == "triggered"
        assert resolved.resolved_at is not None
        with pytest.raises(ValueError, match="already triggered"):
            temp_db.update_narrative_status(narrative_id, "expired")

    def test_cannot_reactivate(self, temp_db: DataStore):
        narrative_id = temp_db.add_narrative("SPY", "Gap fill")
        with pytest.raises(ValueError):
            temp_db.update_narrative_status(narrative_id, "active")

    def test_unknown_narrative(self, temp_db: DataStore):
        with pytest.raises(ValueError, match="not found"):
            temp_db.update_narrative_status(5, "expired")

    def test_active_filter(self, temp_db: DataStore):
        keep = temp_db.add_narrative("SPY", "Still valid")
        done = temp_db.add_narrative("QQQ", "Played out")
        temp_db.update_narrative_status(done, "invalidated")

        active = temp_db.get_narratives(active_only=True)
        assert [n.id for n in active] == [keep]
        assert len(temp_db.get_narratives(ticker="qqq")) == 1

    def test_invalid_direction(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.add_narrative("SPY", "Sideways", direction="up")


class TestWatchlist:
    """Watchlist items are scoped to a date and ordered by priority."""

    def test_priority_ordering(self, temp_db: DataStore):
        temp_db.add_to_watchlist("LOW", "Maybe", priority=1)
        temp_db.add_to_watchlist("HIGH", "Best setup", priority=5, bias="long")
        temp_db.add_to_watchlist("MID", "Decent", priority=3)

        assert [i.ticker for i in temp_db.get_watchlist()] == ["HIGH", "MID", "LOW"]

    def test_date_scope_and_clear(self, temp_db: DataStore):
        today = date.today()
        temp_db.add_to_watchlist("OLD", "Yesterday's idea", on_date=today - timedelta(days=1))
        temp_db.add_to_watchlist("NEW", "Today's idea")

        assert [i.ticker for i in temp_db.get_watchlist(on_date=today)] == ["NEW"]
        assert temp_db.clear_watchlist() == 1
        assert [i.ticker for i in temp_db.get_watchlist()] == ["NEW"]

    def test_clear_unlinks_trades(self, temp_db: DataStore):
        item_id = temp_db.add_to_watchlist("OLD", "Idea", on_date=date.today() - timedelta(days=2))
        trade_id = temp_db.open_trade("OLD", "long", "shares", 10.0, 1, watchlist_id=item_id)

        assert temp_db.clear_watchlist() == 1
        assert temp_db.get_trade(trade_id).watchlist_id is None

    def test_status_update(self, temp_db: DataStore):
        item_id = temp_db.add_to_watchlist("SPY", "ORB", key_levels=[450.0], options_flow_note="Call sweep")
        temp_db.update_watchlist_status(item_id, "triggered")

        assert temp_db.get_watchlist(active_only=True) == []
        item = temp_db.get_watchlist()[0]
        assert item.status == "triggered"
        assert item.key_levels == [450.0]
        assert item.options_flow_note == "Call sweep"

    def test_invalid_status_and_priority(self, temp_db: DataStore):
        item_id = temp_db.add_to_watchlist("SPY", "ORB")
        with pytest.raises(ValueError):
            temp_db.update_watchlist_status(item_id, "done")
        with pytest.raises(ValueError):
            temp_db.update_watchlist_status(999, "skipped")
        with pytest.raises(ValueError):
            temp_db.add_to_watchlist("SPY", "ORB", priority=6)


class TestJournal:
    """One journal entry per day, with plan and review written independently."""

    def test_plan_then_review(self, temp_db: DataStore):
        day = date(2024, 6, 3)
        temp_db.set_plan("Only A+ setups", on_date=day)
        temp_db.set_review("Followed the plan", context="Trend day", grade="B", on_date=day)
        entry = temp_db.get_journal(day)

        assert entry.premarket_plan == "Only A+ setups"
        assert entry.postmarket_review == "Followed the plan"
        assert entry.market_context == "Trend day"
        assert entry.grade == "B"

    def test_review_keeps_previous_grade(self, temp_db: DataStore):
        day = date(2024, 6, 3)
        temp_db.set_review("First pass", grade="A", on_date=day)
        temp_db.set_review("Second pass", on_date=day)
        entry = temp_db.get_journal(day)

        assert entry.postmarket_review == "Second pass"
        assert entry.grade == "A"

    def test_plan_replaced(self, temp_db: DataStore):
        day = date(2024, 6, 3)
        temp_db.set_plan("v1", on_date=day)
        temp_db.set_plan("v2", on_date=day)

        assert temp_db.get_journal(day).premarket_plan == "v2"
        assert temp_db.get_stats()["journal"] == 1

    def test_missing_entry(self, temp_db: DataStore):
        assert temp_db.get_journal(date(2000, 1, 1)) is None

    def test_invalid_grade(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.set_review("Meh", grade="E")


class TestPlaybook:
    def test_add_and_list_sorted(self, temp_db: DataStore):
        temp_db.add_playbook("VWAP reclaim", entry_rules="Close above VWAP")
        temp_db.add_playbook("ORB", description="Opening range breakout")

        assert [s.name for s in temp_db.get_playbook()] == ["ORB", "VWAP reclaim"]

    def test_duplicate_name(self, temp_db: DataStore):
        temp_db.add_playbook("ORB")
        with pytest.raises(sqlite3.IntegrityError):
            temp_db.add_playbook("ORB")


class TestStats:
    def test_row_counts(self, temp_db: DataStore):
        temp_db.add_narrative("SPY", "Gap fill")
        temp_db.open_trade("SPY", "long", "shares", 10.0, 1)
        temp_db.open_trade("QQQ", "long", "shares", 10.0, 1)

        stats = temp_db.get_stats()
        assert stats["narratives"] == 1
        assert stats["trades"] == 2
        assert stats["watchlist"] == 0
