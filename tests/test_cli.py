"""Tests for cli.py - CLI interface."""

import json

import pytest
from click.testing import CliRunner

from super_calc.cli import main
from super_calc.notifier import ConsoleNotifier


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def home(tmp_path):
    """Data directory for one test."""
    return tmp_path / "calc-home"


def invoke(runner, home, *args, **kwargs):
    return runner.invoke(main, ["--home", str(home), *args], **kwargs)


def stored_history(home):
    data = json.loads((home / "storage.json").read_text())
    return json.loads(data["calculatorHistory"])


class TestCLIBasics:
    """Basic CLI tests."""

    def test_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "super-calc" in result.output

    def test_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "calc" in result.output
        assert "convert" in result.output
        assert "history" in result.output


class TestCalcCommand:
    """Tests for the calc command."""

    def test_evaluates_and_records(self, runner, home):
        """Test calc prints the result and records it."""
        result = invoke(runner, home, "calc", "2+3*4")
        assert result.exit_code == 0
        assert "2+3*4 = 14" in result.output

        entries = stored_history(home)
        assert len(entries) == 1
        assert entries[0]["type"] == "calculation"
        assert entries[0]["expression"] == "2+3*4"
        assert entries[0]["result"] == "14"
        assert entries[0]["category"] == "Basic"

    def test_invalid_expression(self, runner, home):
        """Test calc with a bad expression exits 1 and records nothing."""
        result = invoke(runner, home, "calc", "2+")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (home / "storage.json").exists()

    def test_deeply_nested_expression(self, runner, home):
        """Test calc with very deep nesting fails cleanly."""
        result = invoke(runner, home, "calc", "(" * 3000 + "1" + ")" * 3000)
        assert result.exit_code == 1
        assert not isinstance(result.exception, RecursionError)
        assert "Error" in result.output
        assert "too deeply nested" in result.output

    def test_large_result_in_exponent_form(self, runner, home):
        """Test calc shows a huge result in exponent form."""
        result = invoke(runner, home, "calc", "2*1" + "0" * 21)
        assert result.exit_code == 0
        assert "= 2e+21" in result.output

    def test_home_from_env(self, runner, home, monkeypatch):
        """Test the data directory comes from SUPER_CALC_HOME."""
        monkeypatch.setenv("SUPER_CALC_HOME", str(home))
        result = runner.invoke(main, ["calc", "(2+3)*4"])
        assert result.exit_code == 0
        assert stored_history(home)[0]["result"] == "20"


class TestConvertCommands:
    """Tests for convert and units."""

    def test_convert(self, runner, home):
        """Test convert prints and records the conversion."""
        result = invoke(runner, home, "convert", "10", "m", "ft")
        assert result.exit_code == 0
        assert "10m = 32.81ft" in result.output

        entry = stored_history(home)[0]
        assert entry["type"] == "conversion"
        assert entry["category"] == "Length"
        assert "expression" not in entry

    def test_convert_invalid_value(self, runner, home):
        """Test convert with a non-numeric value."""
        result = invoke(runner, home, "convert", "abc", "m", "ft")
        assert result.exit_code == 1
        assert "valid number" in result.output

    def test_convert_unknown_pair(self, runner, home):
        """Test convert with a pair outside the catalog."""
        result = invoke(runner, home, "convert", "10", "ft", "m")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_units_all(self, runner, home):
        """Test units lists the whole catalog."""
        result = invoke(runner, home, "units")
        assert result.exit_code == 0
        assert "Meters to Feet" in result.output
        assert "Grams to Ounces" in result.output

    def test_units_category(self, runner, home):
        """Test units filtered by category."""
        result = invoke(runner, home, "units", "-c", "Speed")
        assert result.exit_code == 0
        assert "mph" in result.output
        assert "Meters to Feet" not in result.output


class TestTipCommand:
    """Tests for the tip command."""

    def test_tip(self, runner, home):
        """Test tip prints the split and records it."""
        result = invoke(runner, home, "tip", "100", "-p", "20", "-s", "4")
        assert result.exit_code == 0
        assert "Tip: 20.00" in result.output
        assert "Total: 120.00" in result.output
        assert "Per Person: 30.00" in result.output

        entry = stored_history(home)[0]
        assert entry["type"] == "tip"
        assert entry["result"] == (
            "Bill: $100.00, Tip: $20.00 (20%), Total: $120.00, Per Person: $30.00"
        )

    def test_tip_uses_configured_defaults(self, runner, home):
        """Test tip falls back to configured defaults."""
        home.mkdir()
        (home / "config.json").write_text(json.dumps({"default_tip_percentage": 10}))
        result = invoke(runner, home, "tip", "50")
        assert result.exit_code == 0
        assert "Tip: 5.00" in result.output

    def test_tip_invalid_bill(self, runner, home):
        """Test tip with a non-numeric bill."""
        result = invoke(runner, home, "tip", "free")
        assert result.exit_code == 1
        assert "valid bill amount" in result.output

    def test_tip_percent_out_of_range(self, runner, home):
        """Test tip rejects a percentage above 30."""
        result = invoke(runner, home, "tip", "100", "-p", "31")
        assert result.exit_code == 2


class TestHistoryCommands:
    """Tests for history list/clear/share."""

    @pytest.fixture
    def populated(self, runner, home):
        invoke(runner, home, "calc", "2+3")
        invoke(runner, home, "convert", "10", "m", "ft")
        return home

    def test_list_empty(self, runner, home):
        """Test history list with no entries."""
        result = invoke(runner, home, "history", "list")
        assert result.exit_code == 0
        assert "No history" in result.output

    def test_list(self, runner, populated):
        """Test history list shows every entry."""
        result = invoke(runner, populated, "history", "list")
        assert result.exit_code == 0
        assert "2+3 = 5" in result.output
        assert "10m = 32.81ft" in result.output

    def test_list_search(self, runner, populated):
        """Test history list with a search filter."""
        result = invoke(runner, populated, "history", "list", "-q", "FT")
        assert result.exit_code == 0
        assert "10m = 32.81ft" in result.output
        assert "2+3 = 5" not in result.output

    def test_list_search_no_match(self, runner, populated):
        """Test history list when nothing matches."""
        result = invoke(runner, populated, "history", "list", "-q", "zzz")
        assert "No history matches" in result.output

    def test_list_limit(self, runner, populated):
        """Test history list with a limit."""
        result = invoke(runner, populated, "history", "list", "-n", "1")
        assert "10m = 32.81ft" in result.output
        assert "2+3 = 5" not in result.output

    def test_clear_cancelled(self, runner, populated, monkeypatch):
        """Test history clear when the prompt is declined."""
        monkeypatch.setattr(ConsoleNotifier, "confirm", lambda self, title, message: False)
        result = invoke(runner, populated, "history", "clear")
        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert len(stored_history(populated)) == 2

    def test_clear_confirmed(self, runner, populated, monkeypatch):
        """Test history clear when the prompt is accepted."""
        monkeypatch.setattr(ConsoleNotifier, "confirm", lambda self, title, message: True)
        result = invoke(runner, populated, "history", "clear")
        assert result.exit_code == 0
        assert "History cleared" in result.output
        data = json.loads((populated / "storage.json").read_text())
        assert "calculatorHistory" not in data

    def test_clear_yes_flag(self, runner, populated):
        """Test history clear --yes skips the prompt."""
        result = invoke(runner, populated, "history", "clear", "--yes")
        assert "History cleared" in result.output

    def test_share(self, runner, populated):
        """Test history share prints the entry."""
        calc_id = stored_history(populated)[1]["id"]
        result = invoke(runner, populated, "history", "share", calc_id)
        assert result.exit_code == 0
        assert "2+3 = 5" in result.output

    def test_share_unknown_id(self, runner, populated):
        """Test history share with an unknown id."""
        result = invoke(runner, populated, "history", "share", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestThemeCommand:
    """Tests for the theme command."""

    def test_default(self, runner, home):
        """Test the default theme."""
        result = invoke(runner, home, "theme")
        assert "Theme: light" in result.output

    def test_set_and_toggle(self, runner, home):
        """Test setting and toggling the theme."""
        invoke(runner, home, "theme", "dark")
        assert "Theme: dark" in invoke(runner, home, "theme").output
        assert "Theme: light" in invoke(runner, home, "theme", "toggle").output


class TestReplCommand:
    """Tests for the interactive session."""

    def test_keypad_session(self, runner, home):
        """Test a keypad session with memory keys."""
        keys = "\n".join(["12", "+", "30", "=", "M+", "C", "MR", "quit"]) + "\n"
        result = invoke(runner, home, "repl", input=keys)
        assert result.exit_code == 0
        assert "42" in result.output
        assert "M = 42" in result.output
        assert stored_history(home)[0]["expression"] == "12+30"

    def test_memory_recall_after_result(self, runner, home):
        """Test MR right after "=" prints the recalled value."""
        keys = "\n".join(["7", "M+", "C", "2", "+", "3", "=", "MR", "quit"]) + "\n"
        result = invoke(runner, home, "repl", input=keys)
        assert result.exit_code == 0
        after_result = result.output.rsplit("  5\n", 1)[1]
        assert "  7\n" in after_result

    def test_error_does_not_exit(self, runner, home):
        """Test an evaluation error keeps the session running."""
        result = invoke(runner, home, "repl", input="5\n/\n0\n=\nquit\n")
        assert result.exit_code == 0
        assert "Error" in result.output
