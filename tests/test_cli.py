"""
Tests for the command-line interface.
"""

import json
import logging

import pytest
import structlog

from claimguard.categories import RENT_DEMO
from claimguard.cli import EXIT_USAGE, main


@pytest.fixture(autouse=True)
def reset_logging():
    """main() configures logging against the captured stderr of each test."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def test_fee(capsys):
    assert main(["fee", "1000"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["fee"] == 200
    assert data["feeType"] == "success_fee"


def test_analyze_demo(capsys):
    assert main(["analyze", "--category", "auto", "--demo"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["analysis"]["potentialSavings"] == 394.0
    assert data["fee"]["fee"] == 78.8


def test_analyze_file(tmp_path, capsys):
    bill = tmp_path / "rent.txt"
    bill.write_text(RENT_DEMO, encoding="utf-8")
    assert main(["analyze", "--category", "rent", str(bill)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data["analysis"]["lineItems"]) == 8


def test_statement(tmp_path, capsys):
    statement = tmp_path / "statement.csv"
    statement.write_text(
        "Date,Description,Amount\n"
        "2024-01-05,NETFLIX.COM,15.49\n"
        "2024-02-05,NETFLIX.COM,22.99\n",
        encoding="utf-8",
    )
    assert main(["statement", str(statement)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["flaggedCount"] == 1


def test_letter(capsys):
    assert main(["letter", "--category", "utility", "--demo"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("# Formal Dispute: Utility Billing Errors")
    assert "## How to Submit Your Dispute" in out


def test_unknown_category(capsys):
    assert main(["analyze", "--category", "dental", "--demo"]) == EXIT_USAGE
    assert "Unknown category: dental" in capsys.readouterr().err


def test_missing_bill_source():
    with pytest.raises(SystemExit):
        main(["analyze", "--category", "rent"])
