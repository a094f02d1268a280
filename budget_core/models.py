"""Data models for the finance tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, NamedTuple

__all__ = [
    "BudgetAlert",
    "Summary",
    "Transaction",
    "TransactionKind",
    "isoformat_utc",
    "parse_datetime",
    "utc_now",
]


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z for UTC-aware datetimes."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    iso = dt.isoformat(timespec="seconds")
    # datetime.isoformat renders +00:00 for UTC; replace with the shorter Z form.
    return iso.replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings with optional trailing Z into UTC-aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Treat naive datetimes as UTC to avoid accidental timezone drift.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current UTC time truncated to the precision snapshots and exports keep."""
    return datetime.now(timezone.utc).replace(microsecond=0)


class TransactionKind(str, Enum):
    """Tag distinguishing the two transaction variants."""

    INCOME = "Income"
    EXPENSE = "Expense"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, value: str) -> "TransactionKind":
        """Coerce a label in any casing, or a menu number, into a kind."""
        try:
            normalised = value.strip().lower()
        except AttributeError as error:
            raise ValueError(f"Unsupported transaction kind: {value!r}") from error
        aliases = {"1": cls.INCOME, "2": cls.EXPENSE}
        if normalised in aliases:
            return aliases[normalised]
        for member in cls:
            if member.value.lower() == normalised:
                return member
        raise ValueError(f"Unsupported transaction kind: {value!r}")


class BudgetAlert(str, Enum):
    """Advisory signal raised after a transaction is added."""

    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"


class Summary(NamedTuple):
    budget: Decimal
    total_income: Decimal
    total_expenses: Decimal
    net_savings: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {field: f"{value:.2f}" for field, value in self._asdict().items()}


@dataclass(frozen=True)
class Transaction:
    id: str
    kind: TransactionKind
    description: str
    amount: Decimal
    category: str
    timestamp: datetime

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to JSON-friendly natives."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "description": self.description,
            "amount": f"{self.amount:f}",
            "category": self.category,
            "timestamp": isoformat_utc(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Hydrate a Transaction from JSON-native data."""
        return cls(
            id=data["id"],
            kind=TransactionKind.from_str(data["kind"]),
            description=data["description"],
            amount=Decimal(str(data["amount"])),
            category=data["category"],
            timestamp=parse_datetime(data["timestamp"]),
        )
