"""
Tests for CLI module.
"""

import argparse
import os
from unittest.mock import patch

import pytest

from dajaj_pos import __version__
from dajaj_pos.billing.memory import InMemoryBillRepository
from dajaj_pos.cli import build_cart, main, parse_day, parse_item_spec
from dajaj_pos.errors import BillRetrievalError


@pytest.fixture
def cli_store():
    """Route the CLI's BillRepository to an in-memory store."""
    store = InMemoryBillRepository()
    with patch("dajaj_pos.cli.BillRepository") as mock_repo:
        mock_repo.return_value.__enter__.return_value = store
        yield store


@pytest.fixture
def no_env(tmp_path):
    """Point the CLI at an env file that does not exist, with a clean environment."""
    with patch.dict(os.environ, {"APP_URL": "https://pos.example.test"}, clear=True):
        yield ["--env-file", str(tmp_path / "missing.env")]


class TestItemSpecs:
    """Test cases for item argument parsing."""

    def test_full_item_spec(self):
        product, variant, qty, addons = parse_item_spec("shw-reg:Roll:2:cheese,fries")
        assert product.id == "shw-reg"
        assert variant == "Roll"
        assert qty == 2
        assert addons == ["cheese", "fries"]

    def test_defaults(self):
        product, variant, qty, addons = parse_item_spec("khubbus")
        assert (product.id, variant, qty, addons) == ("khubbus", "", 1, [])
        assert parse_item_spec("khubbus::3")[2] == 3

    def test_parse_day(self):
        assert parse_day("2026-10-19").isoformat() == "2026-10-19"
        with pytest.raises(argparse.ArgumentTypeError):
            parse_day("yesterday")

    def test_repeated_specs_merge(self):
        cart = build_cart(["shw-reg:Roll:1:fries,cheese", "shw-reg:Roll:2:cheese,fries"])
        assert len(cart) == 1
        assert cart.lines()[0].quantity == 3


class TestCLI:
    """Test cases for CLI main function."""

    def test_cli_help(self, capsys):
        """Test CLI help command."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "DAJAJ POS" in captured.out

    def test_cli_version(self, capsys):
        """Test CLI version command."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert f"DAJAJ POS {__version__}" in captured.out

    def test_cli_no_command(self, capsys, no_env):
        """Test CLI with no command."""
        assert main(no_env) == 1
        captured = capsys.readouterr()
        assert "Available commands" in captured.out

    def test_menu(self, capsys, no_env):
        assert main(no_env + ["menu"]) == 0
        out = capsys.readouterr().out
        assert "SHAWARMAS" in out
        assert "Spcl Grilled Dajaj" in out
        assert "French Fries" in out

    def test_quote(self, capsys, no_env):
        result = main(no_env + ["quote", "--item", "shw-reg:Roll:2:cheese", "--item", "khubbus::3"])
        assert result == 0
        out = capsys.readouterr().out
        assert "Regular Shawarma (Roll)" in out
        assert "Khubbus (Standard)" in out
        assert "₹170.00" in out
        assert "₹4.25" in out

    def test_quote_unknown_product(self, capsys, no_env):
        assert main(no_env + ["quote", "--item", "pizza:Large"]) == 1
        assert "Unknown product id: pizza" in capsys.readouterr().out

    def test_issue_and_show(self, capsys, no_env, cli_store):
        result = main(no_env + [
            "issue", "--customer", "Asha", "--mobile", "+91 98765 43210",
            "--item", "shw-reg:Roll:2:cheese", "--item", "khubbus::3",
        ])
        assert result == 0
        out = capsys.readouterr().out
        assert "DAJAJ-000001" in out
        assert "https://pos.example.test/bill/DAJAJ-000001?token=" in out
        assert "https://wa.me/919876543210?text=" in out

        token = cli_store.find_bill_by_number("DAJAJ-000001")["publicToken"]
        assert main(no_env + ["show", "DAJAJ-000001", "--token", token]) == 0
        assert "Grand Total:" in capsys.readouterr().out

        assert main(no_env + ["show", "DAJAJ-000001", "--token", "wrong"]) == 1
        assert "Invalid or expired link" in capsys.readouterr().out

        assert main(no_env + ["show", "DAJAJ-000001", "--operator"]) == 0

    def test_show_missing_bill(self, capsys, no_env, cli_store):
        assert main(no_env + ["show", "DAJAJ-000099", "--operator"]) == 1
        assert "Bill not found" in capsys.readouterr().out

    def test_issue_rejects_bad_mobile_before_numbering(self, capsys, no_env, cli_store):
        result = main(no_env + ["issue", "--customer", "Asha", "--mobile", "12345", "--item", "rumali"])
        assert result == 1
        assert "10-digit" in capsys.readouterr().out
        assert cli_store.counter == 0

    def test_history_requires_operator(self, capsys, no_env, cli_store):
        assert main(no_env + ["history"]) == 1
        assert "operators" in capsys.readouterr().out

    def test_history(self, capsys, no_env, cli_store):
        main(no_env + ["issue", "--customer", "Asha", "--item", "rumali"])
        capsys.readouterr()

        assert main(no_env + ["history", "--operator"]) == 0
        out = capsys.readouterr().out
        assert "DAJAJ-000001" in out
        assert "1 bills, total ₹15.00" in out

    def test_show_reports_store_outage(self, capsys, no_env):
        with patch("dajaj_pos.cli.BillRepository") as mock_repo:
            store = mock_repo.return_value.__enter__.return_value
            store.find_bill_by_number.side_effect = BillRetrievalError("Could not load bill DAJAJ-000001: down")
            result = main(no_env + ["show", "DAJAJ-000001", "--operator"])

        assert result == 1
        assert "Error: Could not load bill DAJAJ-000001: down" in capsys.readouterr().out

    def test_history_reports_store_outage(self, capsys, no_env):
        with patch("dajaj_pos.cli.BillRepository") as mock_repo:
            store = mock_repo.return_value.__enter__.return_value
            store.find_bills_created_between.side_effect = BillRetrievalError("Could not load bill history: down")
            result = main(no_env + ["history", "--operator"])

        assert result == 1
        assert "Could not load bill history" in capsys.readouterr().out

    def test_history_rejects_bad_date(self, capsys, no_env, cli_store):
        assert main(no_env + ["history", "--operator", "--date", "19-10-2026"]) == 1
        assert "Invalid date: 19-10-2026" in capsys.readouterr().out
