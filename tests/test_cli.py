"""Tests driving the interactive shell with scripted input."""

from __future__ import annotations

import io
import json
from decimal import Decimal
from pathlib import Path

from budget_core import FinanceSession, Settings
from finance_tracker.cli import FinanceShell, main


def _run_shell(session: FinanceSession, scripted, lines) -> str:
    out = io.StringIO()
    FinanceShell(session, input_fn=scripted(lines), out=out).run()
    return out.getvalue()


def test_budget_scenario_prints_near_limit_warning(session: FinanceSession, scripted) -> None:
    output = _run_shell(
        session,
        scripted,
        [
            "1", "500",
            "2", "2", "1", "50", "Weekly shop",
            "2", "2", "2", "400", "Flat",
            "2", "2", "4", "10", "Phone",
            "5",
            "7",
        ],
    )

    assert "Budget set to: $500.00" in output
    assert output.count("Transaction added successfully!") == 3
    assert output.count("close to exceeding your budget") == 1
    assert "Total Expenses: $460.00" in output
    assert "Net Savings: $-460.00" in output
    assert session.settings.snapshot_path.exists()


def test_invalid_input_is_reprompted(session: FinanceSession, scripted) -> None:
    output = _run_shell(
        session,
        scripted,
        ["9", "1", "-4", "0", "abc", "250", "7"],
    )

    assert output.count("Invalid input") == 4
    assert session.summary().budget == Decimal("250.00")


def test_new_category_is_created_during_entry(session: FinanceSession, scripted) -> None:
    output = _run_shell(
        session,
        scripted,
        ["2", "2", "6", "  ", "Travel", "120", "1234", "Train tickets", "3", "7"],
    )

    assert "6. Other (Create New Category)" in output
    assert session.list_categories("Expense")[-1] == "Travel"
    assert "1. Expense | Train tickets | $120.00 | Travel |" in output
    assert "You have exceeded your budget!" in output


def test_delete_flow_and_empty_messages(session: FinanceSession, scripted) -> None:
    output = _run_shell(
        session,
        scripted,
        [
            "4",
            "3",
            "2", "1", "1", "2000", "Salary March",
            "4", "2", "1",
            "3",
            "7",
        ],
    )

    assert "No transactions to delete." in output
    assert output.count("No transactions recorded.") == 2
    assert "Transaction deleted successfully!" in output
    assert session.summary().total_income == Decimal("0")


def test_export_writes_csv(session: FinanceSession, scripted) -> None:
    output = _run_shell(session, scripted, ["6", "7"])

    assert f"Transactions exported to {session.settings.csv_path}" in output
    assert session.settings.csv_path.read_text(encoding="utf-8") == (
        "Type,Description,Amount,Category,Date\n"
    )


def test_end_of_input_saves_and_exits(session: FinanceSession, scripted) -> None:
    output = _run_shell(session, scripted, ["1", "80"])

    assert "Data saved" in output
    payload = json.loads(session.settings.snapshot_path.read_text(encoding="utf-8"))
    assert payload["budget"] == "80"


def test_main_starts_fresh_then_resumes(tmp_path: Path, scripted) -> None:
    out = io.StringIO()
    code = main(
        ["--data-dir", str(tmp_path)],
        input_fn=scripted(["2", "1", "3", "99.99", "Index fund", "7"]),
        out=out,
    )
    assert code == 0
    assert "No previous data found. Starting fresh." in out.getvalue()

    out = io.StringIO()
    code = main(["--data-dir", str(tmp_path)], input_fn=scripted(["5", "7"]), out=out)

    assert code == 0
    assert "Starting fresh" not in out.getvalue()
    assert "Total Income: $99.99" in out.getvalue()
    resumed = FinanceSession.start(Settings(data_dir=tmp_path))
    assert resumed.list_transactions()[0].category == "Investments"


def test_corrupt_snapshot_is_kept_aside_before_saving(tmp_path: Path, scripted) -> None:
    """Saving after an unreadable start-up must not destroy the old file."""

    snapshot = tmp_path / "finance_data.json"
    snapshot.write_text('{"version": 99}', encoding="utf-8")
    out = io.StringIO()

    code = main(["--data-dir", str(tmp_path)], input_fn=scripted(["7"]), out=out)

    assert code == 0
    backup = tmp_path / "finance_data.json.corrupt"
    assert backup.read_text(encoding="utf-8") == '{"version": 99}'
    assert f"Unreadable data kept at {backup}" in out.getvalue()
    assert json.loads(snapshot.read_text(encoding="utf-8"))["version"] == 1
