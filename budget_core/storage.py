"""Snapshot persistence and CSV export for the ledger and category registry."""

from __future__ import annotations

import csv
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .categories import CategoryRegistry
from .exceptions import (
    CorruptSnapshotError,
    PersistenceError,
    SnapshotNotFoundError,
    ValidationError,
)
from .ledger import Ledger
from .logging_utils import get_logger
from .models import Transaction, isoformat_utc
from .validators import parse_amount, validate_category_name, validate_description

LOGGER = get_logger(__name__)

SNAPSHOT_VERSION = 1
CSV_HEADER = ("Type", "Description", "Amount", "Category", "Date")


class SnapshotStorage:
    """Versioned JSON snapshots and CSV exports with crash-safe writes."""

    def save(self, ledger: Ledger, registry: CategoryRegistry, destination: Path) -> Path:
        payload: Dict[str, Any] = {
            "version": SNAPSHOT_VERSION,
            "transactions": [transaction.to_dict() for transaction in ledger.list_transactions()],
            "budget": f"{ledger.budget:f}",
            "total_income": f"{ledger.total_income:f}",
            "total_expenses": f"{ledger.total_expenses:f}",
            **registry.as_dict(),
        }
        path = Path(destination)
        self._write_atomic(path, lambda handle: json.dump(payload, handle, indent=2))
        LOGGER.info("Saved %d transactions to %s", len(ledger), path)
        return path

    def load(self, source: Path) -> Tuple[Ledger, CategoryRegistry]:
        path = Path(source)
        if not path.exists():
            raise SnapshotNotFoundError(f"No snapshot found at {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptSnapshotError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        ledger, registry = _decode_snapshot(payload, path)
        LOGGER.info("Loaded %d transactions from %s", len(ledger), path)
        return ledger, registry

    def export_csv(self, ledger: Ledger, destination: Path) -> Path:
        def write_rows(handle) -> None:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for transaction in ledger.list_transactions():
                writer.writerow(
                    [
                        transaction.kind.label,
                        transaction.description,
                        f"{transaction.amount:f}",
                        transaction.category,
                        isoformat_utc(transaction.timestamp),
                    ]
                )

        path = Path(destination)
        self._write_atomic(path, write_rows, newline="")
        LOGGER.info("Exported %d transactions to %s", len(ledger), path)
        return path

    def set_aside(self, source: Path) -> Path:
        """Rename an unreadable snapshot so a later save cannot overwrite it."""
        path = Path(source)
        backup = path.with_suffix(path.suffix + ".corrupt")
        try:
            path.replace(backup)
        except OSError as exc:
            raise PersistenceError(f"Unable to move {path} aside") from exc
        LOGGER.warning("Moved unreadable snapshot %s to %s", path, backup)
        return backup

    # Internal helpers -----------------------------------------------------
    def _write_atomic(self, path: Path, write: Callable[[Any], None], newline: Optional[str] = None) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8", newline=newline) as handle:
                write(handle)
                handle.flush()
            # Use replace for atomic move on POSIX; the old file survives any failure above.
            temp_path.replace(path)
        except (OSError, UnicodeError) as exc:
            LOGGER.error("Unable to write %s: %s", path, exc)
            raise PersistenceError(f"Unable to write to {path}") from exc
        finally:
            if temp_path.exists():
                temp_path.unlink()


def _decode_snapshot(payload: Any, path: Path) -> Tuple[Ledger, CategoryRegistry]:
    if not isinstance(payload, dict):
        raise CorruptSnapshotError(f"Expected object payload in {path}")
    if payload.get("version") != SNAPSHOT_VERSION:
        raise CorruptSnapshotError(
            f"Unsupported snapshot version {payload.get('version')!r} in {path}"
        )
    try:
        raw_transactions = _expect(payload["transactions"], list, "transactions")
        transactions = [_decode_transaction(raw) for raw in raw_transactions]
        budget = _decode_decimal(payload["budget"], "budget")
        total_income = _decode_decimal(payload["total_income"], "total_income")
        total_expenses = _decode_decimal(payload["total_expenses"], "total_expenses")
        registry = CategoryRegistry.from_lists(
            _decode_names(payload["income_categories"], "income_categories"),
            _decode_names(payload["expense_categories"], "expense_categories"),
        )
    except KeyError as exc:
        raise CorruptSnapshotError(f"Missing field {exc} in {path}") from exc
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise CorruptSnapshotError(f"Invalid snapshot data in {path}: {exc}") from exc

    if budget < 0:
        raise CorruptSnapshotError(f"Negative budget in {path}")
    ledger = Ledger.restore(transactions, budget, total_income, total_expenses)
    if ledger.recompute_totals() != (total_income, total_expenses):
        raise CorruptSnapshotError(f"Stored totals do not match transactions in {path}")
    return ledger, registry


def _decode_transaction(raw: Any) -> Transaction:
    data = _expect(raw, dict, "transaction")
    for key in ("id", "kind", "description", "category", "timestamp", "amount"):
        if not isinstance(data[key], str):
            raise TypeError(f"transaction {key} must be a string")
    transaction = Transaction.from_dict(data)
    try:
        valid = (
            parse_amount(transaction.amount) == transaction.amount
            and validate_description(transaction.description) == transaction.description
            and validate_category_name(transaction.category) == transaction.category
        )
    except ValidationError as exc:
        raise ValueError(f"transaction {transaction.id}: {exc}") from exc
    if not valid:
        raise ValueError(f"transaction {transaction.id} holds untrimmed or invalid values")
    return transaction


def _decode_decimal(raw: Any, field: str) -> Decimal:
    if not isinstance(raw, str):
        raise TypeError(f"{field} must be a decimal string")
    value = Decimal(raw)
    if not value.is_finite():
        raise ValueError(f"{field} must be finite")
    return value


def _decode_names(raw: Any, field: str) -> List[str]:
    names = _expect(raw, list, field)
    if not all(isinstance(name, str) for name in names):
        raise TypeError(f"{field} must contain only strings")
    return names


def _expect(value: Any, expected: type, field: str) -> Any:
    if not isinstance(value, expected):
        raise TypeError(f"{field} must be a {expected.__name__}")
    return value
