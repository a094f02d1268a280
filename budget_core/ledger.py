"""Transaction ledger with running totals and a monthly budget."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from .exceptions import TransactionIndexError
from .logging_utils import get_logger
from .models import BudgetAlert, Summary, Transaction, TransactionKind, utc_now
from .validators import (
    parse_amount,
    validate_category_name,
    validate_description,
    validate_kind,
    validate_position,
)

LOGGER = get_logger(__name__)

ZERO = Decimal("0.00")
NEAR_LIMIT_RATIO = Decimal("0.9")


class Ledger:
    """Owns the transactions and the aggregates derived from them.

    ``total_income`` and ``total_expenses`` are adjusted on every add and
    delete rather than recomputed; amounts are exact Decimals so
    the running totals always equal ``recompute_totals()``.
    """

    def __init__(self) -> None:
        self._transactions: List[Transaction] = []
        self._budget = ZERO
        self._total_income = ZERO
        self._total_expenses = ZERO

    @classmethod
    def restore(
        cls,
        transactions: Iterable[Transaction],
        budget: Decimal,
        total_income: Decimal,
        total_expenses: Decimal,
    ) -> "Ledger":
        """Rebuild a ledger from previously persisted state."""
        ledger = cls()
        ledger._transactions = list(transactions)
        ledger._budget = budget
        ledger._total_income = total_income
        ledger._total_expenses = total_expenses
        return ledger

    # Public API -----------------------------------------------------------
    @property
    def budget(self) -> Decimal:
        return self._budget

    @property
    def total_income(self) -> Decimal:
        return self._total_income

    @property
    def total_expenses(self) -> Decimal:
        return self._total_expenses

    def set_budget(self, value: object) -> Decimal:
        self._budget = parse_amount(value, "budget")
        LOGGER.info("Budget set to %s", self._budget)
        return self._budget

    def add_transaction(
        self,
        kind: object,
        description: object,
        amount: object,
        category: object,
    ) -> Transaction:
        transaction = Transaction(
            id=str(uuid4()),
            kind=validate_kind(kind),
            description=validate_description(description),
            amount=parse_amount(amount, "amount"),
            category=validate_category_name(category),
            timestamp=utc_now(),
        )
        self._transactions.append(transaction)
        self._apply(transaction, sign=1)
        LOGGER.info(
            "Added %s %s (%s) in %s",
            transaction.kind.label.lower(),
            transaction.amount,
            transaction.description,
            transaction.category,
        )

        alert = self.budget_alert()
        if alert is BudgetAlert.OVER_LIMIT:
            LOGGER.warning("Expenses %s exceed the budget of %s", self._total_expenses, self._budget)
        elif alert is BudgetAlert.NEAR_LIMIT:
            LOGGER.warning("Expenses %s are close to the budget of %s", self._total_expenses, self._budget)
        return transaction

    def delete_transaction(self, position: object) -> Transaction:
        """Remove the transaction at a 1-based position."""
        index = validate_position(position)
        if not self._transactions:
            raise TransactionIndexError("No transactions to delete")
        if not 1 <= index <= len(self._transactions):
            raise TransactionIndexError(
                f"Transaction position must be between 1 and {len(self._transactions)}"
            )
        transaction = self._transactions.pop(index - 1)
        self._apply(transaction, sign=-1)
        LOGGER.info("Deleted transaction %s at position %d", transaction.id, index)
        return transaction

    def list_transactions(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    def summary(self) -> Summary:
        return Summary(
            budget=self._budget,
            total_income=self._total_income,
            total_expenses=self._total_expenses,
            net_savings=self._total_income - self._total_expenses,
        )

    def budget_alert(self) -> Optional[BudgetAlert]:
        if self._total_expenses > self._budget:
            return BudgetAlert.OVER_LIMIT
        if self._total_expenses > self._budget * NEAR_LIMIT_RATIO:
            return BudgetAlert.NEAR_LIMIT
        return None

    def recompute_totals(self) -> Tuple[Decimal, Decimal]:
        """Sum income and expenses from scratch."""
        income = sum(
            (t.amount for t in self._transactions if t.kind is TransactionKind.INCOME),
            start=ZERO,
        )
        expenses = sum(
            (t.amount for t in self._transactions if t.kind is TransactionKind.EXPENSE),
            start=ZERO,
        )
        return income, expenses

    def __len__(self) -> int:
        return len(self._transactions)

    # Internal helpers -----------------------------------------------------
    def _apply(self, transaction: Transaction, *, sign: int) -> None:
        delta = transaction.amount * sign
        if transaction.kind is TransactionKind.INCOME:
            self._total_income += delta
        else:
            self._total_expenses += delta
