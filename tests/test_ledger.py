"""Tests covering ledger totals, deletion and budget alerts."""

from __future__ import annotations

from datetime import timezone
from decimal import Decimal

import pytest

from budget_core import BudgetAlert, Ledger, TransactionIndexError, TransactionKind, ValidationError


def _assert_totals_consistent(ledger: Ledger) -> None:
    income, expenses = ledger.recompute_totals()
    assert ledger.total_income == income
    assert ledger.total_expenses == expenses


def test_add_transaction_returns_record_and_updates_matching_total(ledger: Ledger) -> None:
    """Income only moves total income; expenses only move total expenses."""

    income = ledger.add_transaction("Income", "March salary", "2500", "Salary")
    expense = ledger.add_transaction(TransactionKind.EXPENSE, "Groceries", 42.5, "Food")

    assert income.kind is TransactionKind.INCOME
    assert income.amount == Decimal("2500.00")
    assert income.id and income.id != expense.id
    assert income.timestamp.tzinfo is not None
    assert income.timestamp.utcoffset() == timezone.utc.utcoffset(None)
    assert ledger.total_income == Decimal("2500.00")
    assert ledger.total_expenses == Decimal("42.50")
    assert ledger.list_transactions() == (income, expense)


def test_totals_match_recomputation_after_every_add(ledger: Ledger) -> None:
    """Running totals equal a from-scratch sum at every observation point."""

    amounts = ["0.10", "0.20", "19.99", "1000", "0.01", "333.33", "7.07"]
    for index, amount in enumerate(amounts):
        kind = "Income" if index % 3 == 0 else "Expense"
        ledger.add_transaction(kind, f"Entry {index}", amount, "Misc")
        _assert_totals_consistent(ledger)


def test_deletes_at_any_position_do_not_drift(ledger: Ledger) -> None:
    """Incremental bookkeeping equals recomputation after mixed deletes."""

    for index in range(10):
        kind = "Expense" if index % 2 else "Income"
        ledger.add_transaction(kind, f"Entry {index}", f"{index + 1}.10", "Misc")

    for position in (1, 9, 4, 4, 2, 5):
        removed = ledger.delete_transaction(position)
        assert removed not in ledger.list_transactions()
        _assert_totals_consistent(ledger)

    assert len(ledger) == 4
    while len(ledger):
        ledger.delete_transaction(len(ledger))
    assert ledger.total_income == Decimal("0")
    assert ledger.total_expenses == Decimal("0")


def test_delete_removes_the_transaction_at_the_one_based_position(ledger: Ledger) -> None:
    first = ledger.add_transaction("Expense", "Cinema", "12", "Entertainment")
    second = ledger.add_transaction("Expense", "Electricity", "80", "Bills")

    removed = ledger.delete_transaction(1)

    assert removed == first
    assert ledger.list_transactions() == (second,)
    assert ledger.total_expenses == Decimal("80.00")


def test_delete_on_empty_ledger_raises_index_error(ledger: Ledger) -> None:
    with pytest.raises(IndexError):
        ledger.delete_transaction(1)


@pytest.mark.parametrize("position", [0, 3, -1])
def test_delete_out_of_range_raises_index_error(ledger: Ledger, position: int) -> None:
    """Positions 0 and size + 1 are both rejected."""

    ledger.add_transaction("Expense", "Lunch", "10", "Food")
    ledger.add_transaction("Expense", "Dinner", "20", "Food")

    with pytest.raises(TransactionIndexError):
        ledger.delete_transaction(position)
    assert len(ledger) == 2
    assert ledger.total_expenses == Decimal("30.00")


@pytest.mark.parametrize("amount", [0, "0", "-5", -0.01, "abc", None, "NaN", "Infinity"])
def test_add_transaction_rejects_invalid_amounts(ledger: Ledger, amount: object) -> None:
    with pytest.raises(ValidationError):
        ledger.add_transaction("Expense", "Coffee", amount, "Food")
    assert len(ledger) == 0
    assert ledger.total_expenses == Decimal("0")


def test_add_transaction_accepts_smallest_positive_amount(ledger: Ledger) -> None:
    transaction = ledger.add_transaction("Expense", "Sweet", "0.01", "Food")

    assert transaction.amount == Decimal("0.01")
    assert ledger.total_expenses == Decimal("0.01")


def test_amounts_are_kept_exactly_as_entered(ledger: Ledger) -> None:
    """Sub-cent amounts are neither rounded nor rejected."""

    tiny = ledger.add_transaction("Expense", "Tiny fee", "0.004", "Bills")
    odd = ledger.add_transaction("Expense", "Fuel", "12.345", "Bills")

    assert tiny.amount == Decimal("0.004")
    assert odd.amount == Decimal("12.345")
    assert ledger.total_expenses == Decimal("12.349")

    ledger.delete_transaction(1)
    assert ledger.total_expenses == Decimal("12.345")
    _assert_totals_consistent(ledger)


@pytest.mark.parametrize("description", ["", "   ", "12345", None])
def test_add_transaction_rejects_bad_descriptions(ledger: Ledger, description: object) -> None:
    with pytest.raises(ValidationError):
        ledger.add_transaction("Income", description, "10", "Salary")


def test_add_transaction_rejects_unknown_kind(ledger: Ledger) -> None:
    with pytest.raises(ValidationError):
        ledger.add_transaction("Transfer", "Moving money", "10", "Misc")


def test_set_budget_requires_positive_value(ledger: Ledger) -> None:
    for value in (0, "-100", "zero"):
        with pytest.raises(ValidationError):
            ledger.set_budget(value)
    assert ledger.budget == Decimal("0")

    assert ledger.set_budget("750.5") == Decimal("750.50")
    assert ledger.summary().budget == Decimal("750.50")


def test_budget_alert_boundaries(ledger: Ledger) -> None:
    """With a budget of 100: 91 and 100 are near the limit, 100.01 is over it."""

    ledger.set_budget(100)
    ledger.add_transaction("Expense", "Shoes", "90", "Shopping")
    assert ledger.budget_alert() is None

    ledger.add_transaction("Expense", "Snack", "1", "Food")
    assert ledger.budget_alert() is BudgetAlert.NEAR_LIMIT

    ledger.add_transaction("Expense", "Bus ticket", "9", "Bills")
    assert ledger.total_expenses == Decimal("100.00")
    assert ledger.budget_alert() is BudgetAlert.NEAR_LIMIT

    ledger.add_transaction("Expense", "Gum", "0.01", "Food")
    assert ledger.budget_alert() is BudgetAlert.OVER_LIMIT


def test_budget_alert_is_logged(ledger: Ledger, caplog: pytest.LogCaptureFixture) -> None:
    ledger.set_budget(10)
    with caplog.at_level("WARNING", logger="budget_core.ledger"):
        ledger.add_transaction("Expense", "Concert", "25", "Entertainment")

    assert any("exceed" in record.getMessage() for record in caplog.records)


def test_income_does_not_affect_budget_alert(ledger: Ledger) -> None:
    ledger.set_budget(100)
    ledger.add_transaction("Income", "Bonus cheque", "5000", "Bonus")

    assert ledger.budget_alert() is None


def test_spending_without_a_budget_is_over_limit(ledger: Ledger) -> None:
    ledger.add_transaction("Expense", "Pizza", "15", "Food")

    assert ledger.budget_alert() is BudgetAlert.OVER_LIMIT


def test_monthly_budget_scenario(ledger: Ledger) -> None:
    """Budget 500 with expenses 50, 400 and 10 ends near the limit."""

    ledger.set_budget(500)
    ledger.add_transaction("Expense", "Weekly shop", 50, "Food")
    ledger.add_transaction("Expense", "Flat", 400, "Rent")
    ledger.add_transaction("Expense", "Phone", 10, "Bills")

    assert ledger.total_expenses == Decimal("460")
    assert ledger.budget_alert() is BudgetAlert.NEAR_LIMIT
    assert tuple(ledger.summary()) == (
        Decimal("500"),
        Decimal("0"),
        Decimal("460"),
        Decimal("-460"),
    )


def test_summary_and_listing_do_not_mutate(ledger: Ledger) -> None:
    ledger.add_transaction("Income", "Dividend", "12.34", "Investments")
    before = (ledger.list_transactions(), ledger.summary())

    listing = ledger.list_transactions()
    assert isinstance(listing, tuple)
    ledger.summary()

    assert (ledger.list_transactions(), ledger.summary()) == before
