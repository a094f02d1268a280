"""Core business logic package for the finance tracker."""

from .categories import CategoryRegistry
from .config import Settings
from .exceptions import (
    CorruptSnapshotError,
    PersistenceError,
    SnapshotNotFoundError,
    TransactionIndexError,
    ValidationError,
)
from .ledger import Ledger
from .models import BudgetAlert, Summary, Transaction, TransactionKind
from .services import FinanceSession, TransactionResult
from .storage import SnapshotStorage

__all__ = [
    "BudgetAlert",
    "CategoryRegistry",
    "CorruptSnapshotError",
    "FinanceSession",
    "Ledger",
    "PersistenceError",
    "Settings",
    "SnapshotNotFoundError",
    "SnapshotStorage",
    "Summary",
    "Transaction",
    "TransactionIndexError",
    "TransactionKind",
    "TransactionResult",
    "ValidationError",
]
