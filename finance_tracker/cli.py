"""Interactive console shell for the finance tracker."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO, TypeVar

from budget_core.config import Settings
from budget_core.exceptions import (
    CorruptSnapshotError,
    PersistenceError,
    TransactionIndexError,
    ValidationError,
)
from budget_core.logging_utils import configure_root_logger, get_logger
from budget_core.models import BudgetAlert, Transaction, TransactionKind, isoformat_utc
from budget_core.services import FinanceSession
from budget_core.validators import (
    parse_amount,
    validate_category_name,
    validate_description,
    validate_menu_choice,
)

LOGGER = get_logger(__name__)

T = TypeVar("T")

MENU = (
    "\n=== Personal Finance Tracker ===\n"
    "1. Set Budget\n"
    "2. Add Transaction\n"
    "3. View Transactions\n"
    "4. Delete Transaction\n"
    "5. View Summary\n"
    "6. Export to CSV\n"
    "7. Save & Exit"
)
EXIT_CHOICE = 7

ALERT_MESSAGES = {
    BudgetAlert.NEAR_LIMIT: "Warning: Your expenses are close to exceeding your budget!",
    BudgetAlert.OVER_LIMIT: "Warning: You have exceeded your budget!",
}


def _format_transaction(position: int, transaction: Transaction) -> str:
    return (
        f"{position}. {transaction.kind.label} | {transaction.description} | "
        f"${transaction.amount:.2f} | {transaction.category} | "
        f"{isoformat_utc(transaction.timestamp)}"
    )


class FinanceShell:
    """Menu-driven loop translating console input into session commands."""

    def __init__(
        self,
        session: FinanceSession,
        input_fn: Callable[[str], str] = input,
        out: Optional[TextIO] = None,
    ) -> None:
        self.session = session
        self._input = input_fn
        self._out = out or sys.stdout

    def run(self) -> bool:
        """Run until the user saves and exits; returns whether the save succeeded."""
        handlers = {
            1: self.set_budget,
            2: self.add_transaction,
            3: self.show_transactions,
            4: self.delete_transaction,
            5: self.show_summary,
            6: self.export_csv,
        }
        while True:
            try:
                self._print(MENU)
                choice = self._ask(
                    "Choose an option: ",
                    lambda raw: validate_menu_choice(raw, 1, EXIT_CHOICE),
                )
                if choice == EXIT_CHOICE:
                    break
                handlers[choice]()
            except EOFError:
                self._print("")
                break
        return self.save()

    # Commands -------------------------------------------------------------
    def set_budget(self) -> None:
        budget = self._ask(
            "Enter your monthly budget: ", lambda raw: parse_amount(raw, "budget")
        )
        self.session.set_budget(budget)
        self._print(f"Budget set to: ${budget:.2f}")

    def add_transaction(self) -> None:
        kind = self._ask(
            "Enter transaction type (1-Income, 2-Expense): ",
            lambda raw: TransactionKind.INCOME
            if validate_menu_choice(raw, 1, 2) == 1
            else TransactionKind.EXPENSE,
        )
        category = self._choose_category(kind)
        amount = self._ask("Enter amount: ", lambda raw: parse_amount(raw, "amount"))
        description = self._ask("Enter description: ", validate_description)

        result = self.session.add_transaction(kind, description, amount, category)
        self._print("Transaction added successfully!")
        if result.alert is not None:
            self._print(ALERT_MESSAGES[result.alert])

    def show_transactions(self) -> None:
        transactions = self.session.list_transactions()
        if not transactions:
            self._print("No transactions recorded.")
            return
        self._print("\n=== Transaction History ===")
        for position, transaction in enumerate(transactions, start=1):
            self._print(_format_transaction(position, transaction))

    def delete_transaction(self) -> None:
        count = len(self.session.list_transactions())
        if count == 0:
            self._print("No transactions to delete.")
            return
        self.show_transactions()
        position = self._ask(
            "Enter the transaction number to delete: ",
            lambda raw: validate_menu_choice(raw, 1, count),
        )
        try:
            self.session.delete_transaction(position)
        except TransactionIndexError as exc:
            self._print(f"Could not delete transaction: {exc}")
            return
        self._print("Transaction deleted successfully!")

    def show_summary(self) -> None:
        summary = self.session.summary()
        self._print("\n=== Financial Summary ===")
        self._print(f"Budget: ${summary.budget:.2f}")
        self._print(f"Total Income: ${summary.total_income:.2f}")
        self._print(f"Total Expenses: ${summary.total_expenses:.2f}")
        self._print(f"Net Savings: ${summary.net_savings:.2f}")

    def export_csv(self) -> None:
        try:
            path = self.session.export_csv()
        except PersistenceError as exc:
            self._print(f"Error exporting to CSV: {exc}")
            return
        self._print(f"Transactions exported to {path}")

    def save(self) -> bool:
        try:
            path = self.session.save()
        except PersistenceError as exc:
            self._print(f"Error saving data: {exc}")
            return False
        self._print(f"Data saved to {path}. Exiting...")
        return True

    # Internal helpers -----------------------------------------------------
    def _choose_category(self, kind: TransactionKind) -> str:
        categories = self.session.list_categories(kind)
        self._print("Choose a category:")
        for index, name in enumerate(categories, start=1):
            self._print(f"{index}. {name}")
        create_choice = len(categories) + 1
        self._print(f"{create_choice}. Other (Create New Category)")

        choice = self._ask(
            "Enter category: ",
            lambda raw: validate_menu_choice(raw, 1, create_choice),
        )
        if choice == create_choice:
            name = self._ask("Enter new category name: ", validate_category_name)
            return self.session.resolve_category(kind, name)
        return self.session.resolve_category(kind, choice)

    def _ask(self, prompt: str, parse: Callable[[str], T]) -> T:
        """Prompt until ``parse`` accepts the input."""
        while True:
            raw = self._input(prompt)
            try:
                return parse(raw)
            except ValidationError as exc:
                self._print(f"Invalid input: {exc}. Please try again.")

    def _print(self, message: str) -> None:
        print(message, file=self._out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal Finance Tracker")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the snapshot and CSV export (default: ./data)",
    )
    parser.add_argument("--snapshot", help="Snapshot file name inside the data directory")
    parser.add_argument("--csv", help="CSV export file name inside the data directory")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    input_fn: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env().with_overrides(
        data_dir=args.data_dir,
        snapshot_name=args.snapshot,
        csv_name=args.csv,
        log_level=args.log_level,
    )
    configure_root_logger(settings.log_level)

    session = FinanceSession(settings)
    try:
        if not session.load():
            print("No previous data found. Starting fresh.", file=out or sys.stdout)
    except CorruptSnapshotError as exc:
        print(f"Could not read saved data: {exc}", file=sys.stderr)
        try:
            backup = session.set_aside_snapshot()
        except PersistenceError as backup_exc:
            print(f"Storage error: {backup_exc}", file=sys.stderr)
        else:
            print(f"Unreadable data kept at {backup}. Starting fresh.", file=out or sys.stdout)
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)

    shell = FinanceShell(session, input_fn=input_fn, out=out)
    return 0 if shell.run() else 1


if __name__ == "__main__":
    raise SystemExit(main())
