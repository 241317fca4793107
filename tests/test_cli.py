"""Tests for the click command interface."""

import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from tradebook.cli.main import ALIASES, LAZY_SUBCOMMANDS, cli
from tradebook.db.store import DataStore


@pytest.fixture
def workspace():
    """A temporary directory holding the database and config paths."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def run(workspace: Path):
    """Invoke the CLI against a temporary database and no config file."""
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(
            cli,
            [
                "--db",
                str(workspace / "test.db"),
                "--config",
                str(workspace / "missing.toml"),
                *args,
            ],
        )

    return _run


class TestCommandGroup:
    def test_help_lists_commands(self):
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("narrative", "watch", "trade", "paper", "journal", "stats", "generate"):
            assert name in result.output

    def test_short_help_option(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0

    @pytest.mark.parametrize("name", sorted(LAZY_SUBCOMMANDS))
    def test_every_command_loads(self, name: str):
        result = CliRunner().invoke(cli, [name, "--help"])

        assert result.exit_code == 0, result.output

    @pytest.mark.parametrize("alias", sorted(ALIASES))
    def test_aliases_resolve(self, alias: str):
        result = CliRunner().invoke(cli, [alias, "--help"])

        assert result.exit_code == 0, result.output

    def test_unknown_command(self):
        result = CliRunner().invoke(cli, ["frobnicate"])
        assert result.exit_code != 0

    def test_malformed_config_reported(self, workspace: Path):
        config = workspace / "bad.toml"
        config.write_text("[storage\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(config), "stats"])

        assert result.exit_code == 1
        assert "Invalid config file" in result.output

    def test_unknown_log_level_reported(self, workspace: Path):
        config = workspace / "config.toml"
        config.write_text('[logging]\nlevel = "loud"\n', encoding="utf-8")
        result = CliRunner().invoke(
            cli, ["--db", str(workspace / "test.db"), "--config", str(config), "stats"]
        )

        assert result.exit_code == 1
        assert "Invalid config file" in result.output
        assert "level" in result.output

    def test_invalid_setting_names_file(self, workspace: Path):
        config = workspace / "config.toml"
        config.write_text("[trading]\ncommission = -5\n", encoding="utf-8")
        result = CliRunner().invoke(
            cli, ["--db", str(workspace / "test.db"), "--config", str(config), "stats"]
        )

        assert result.exit_code == 1
        assert "Invalid config file" in result.output
        assert "config.toml" in result.output


class TestTradeCommands:
    def test_open_close_and_list(self, run, workspace: Path):
        result = run("trade", "open", "spy", "long", "calls", "2.50", "2", "--setup", "breakout", "--risk", "150")
        assert result.exit_code == 0, result.output
        assert "Opened trade #1" in result.output
        assert "$501.00" in result.output

        result = run("trade", "close", "1", "3.10", "--lessons", "Clean entry")
        assert result.exit_code == 0, result.output
        assert "+$119.00" in result.output

        trade = DataStore(workspace / "test.db").get_trade(1)
        assert trade.status == "closed"
        assert trade.lessons == "Clean entry"

        result = run("t", "list")
        assert result.exit_code == 0
        assert "SPY" in result.output
        assert "Totals" in result.output

    def test_close_twice_fails(self, run):
        run("trade", "open", "SPY", "long", "shares", "100", "1")
        run("trade", "close", "1", "101")
        result = run("trade", "close", "1", "102")

        assert result.exit_code == 1
        assert "already closed" in result.output

    def test_close_unknown_trade(self, run):
        result = run("trade", "close", "7", "1.0")

        assert result.exit_code == 1
        assert "Trade 7 not found" in result.output

    def test_invalid_choice_rejected_by_click(self, run):
        result = run("trade", "open", "SPY", "sideways", "shares", "100", "1")
        assert result.exit_code == 2

    def test_zero_size_rejected_by_click(self, run):
        result = run("trade", "open", "SPY", "long", "shares", "100", "0")
        assert result.exit_code == 2

    def test_note(self, run, workspace: Path):
        run("trade", "open", "SPY", "long", "shares", "100", "1")
        result = run("trade", "note", "1", "Added on the pullback")

        assert result.exit_code == 0
        assert DataStore(workspace / "test.db").get_trade(1).notes == "Added on the pullback"

    def test_empty_list(self, run):
        result = run("trade", "list", "--open")

        assert result.exit_code == 0
        assert "No trades found" in result.output

    def test_bad_date(self, run):
        result = run("trade", "list", "--date", "06/03/2024")

        assert result.exit_code == 1
        assert "Invalid date format" in result.output


class TestPaperCommands:
    def test_paper_round_trip(self, run, workspace: Path):
        result = run("p", "open", "TSLA", "long", "0dte-calls", "1.00", "1")
        assert result.exit_code == 0, result.output
        assert "Opened paper trade #1" in result.output

        result = run("paper", "close", "1", "1.60", "--lessons", "Right read")
        assert result.exit_code == 0, result.output
        assert "big win" in result.output
        assert "GOOD" in result.output

        store = DataStore(workspace / "test.db")
        assert store.get_trades() == []
        assert len(store.get_trades(paper=True)) == 1

        result = run("paper", "list")
        assert "Big wins: 1" in result.output


class TestStatsCommands:
    def _seed(self, run):
        for entry, exit_price, setup in (("100", "110", "breakout"), ("100", "95", "fade"), ("100", "120", "breakout")):
            run("trade", "open", "SPY", "long", "shares", entry, "1", "--setup", setup)
        run("trade", "close", "1", "110")
        run("trade", "close", "2", "95")
        run("trade", "close", "3", "120")

    def test_stats_empty(self, run):
        result = run("stats")

        assert result.exit_code == 0
        assert "No closed trades found" in result.output

    def test_stats_summary(self, run):
        self._seed(run)
        result = run("s", "--period", "week")

        assert result.exit_code == 0, result.output
        assert "Last 7 Days" in result.output
        assert "66.67%" in result.output

    def test_stats_invalid_period(self, run):
        result = run("stats", "--period", "year")
        assert result.exit_code == 2

    def test_setups(self, run):
        self._seed(run)
        result = run("setups")

        assert result.exit_code == 0, result.output
        assert result.output.index("BREAKOUT") < result.output.index("FADE")

    def test_weekdays(self, run):
        self._seed(run)
        result = run("weekdays")

        assert result.exit_code == 0, result.output
        assert "Friday" in result.output

    def test_streaks(self, run):
        result = run("streaks")
        assert "No closed trades yet" in result.output

        self._seed(run)
        result = run("streaks")
        assert result.exit_code == 0, result.output
        assert "Streaks" in result.output


class TestRecordCommands:
    def test_narrative_flow(self, run):
        result = run("n", "add", "nvda", "Holding 120", "--direction", "bull", "--levels", "120,125.5")
        assert result.exit_code == 0, result.output

        result = run("narrative", "list", "--active")
        assert "NVDA" in result.output

        result = run("narrative", "update", "1", "--status", "triggered")
        assert result.exit_code == 0

        result = run("narrative", "update", "1", "--status", "expired")
        assert result.exit_code == 1
        assert "already triggered" in result.output

    def test_watchlist_flow(self, run):
        result = run("w", "add", "amd", "Flag on the daily", "--bias", "long", "--priority", "4")
        assert result.exit_code == 0, result.output

        result = run("watch", "list")
        assert "AMD" in result.output

        result = run("watch", "add", "amd", "Too eager", "--priority", "9")
        assert result.exit_code == 2

        result = run("watch", "clear")
        assert "Cleared 0" in result.output

    def test_journal_flow(self, run):
        assert run("j", "plan", "Only A+ setups").exit_code == 0
        assert run("journal", "review", "Followed the plan", "--grade", "B").exit_code == 0

        result = run("journal", "show")
        assert "Only A+ setups" in result.output
        assert "Followed the plan" in result.output

    def test_journal_show_missing(self, run):
        result = run("journal", "show", "--date", "2001-01-01")
        assert "No journal entry" in result.output

    def test_playbook_duplicate(self, run):
        assert run("playbook", "add", "ORB", "--description", "Opening range").exit_code == 0

        result = run("playbook", "add", "ORB")
        assert result.exit_code == 1
        assert "already exists" in result.output

        result = run("playbook", "list")
        assert "ORB" in result.output


class TestGenerateCommand:
    def test_writes_dashboard(self, run, workspace: Path):
        output = workspace / "out" / "index.html"
        result = run("dash", "--output", str(output))

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "<!DOCTYPE html>" in output.read_text(encoding="utf-8")
