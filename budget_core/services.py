"""Session object exposing the ledger commands to the shell and the API."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional, Tuple, Union

from .categories import CategoryRegistry
from .config import Settings
from .exceptions import SnapshotNotFoundError
from .ledger import Ledger
from .logging_utils import get_logger
from .models import BudgetAlert, Summary, Transaction, TransactionKind
from .storage import SnapshotStorage

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class TransactionResult:
    transaction: Transaction
    alert: Optional[BudgetAlert]


class FinanceSession:
    """All state of one tracker session, passed explicitly to each handler."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        ledger: Optional[Ledger] = None,
        registry: Optional[CategoryRegistry] = None,
        storage: Optional[SnapshotStorage] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.ledger = ledger or Ledger()
        self.registry = registry or CategoryRegistry()
        self.storage = storage or SnapshotStorage()

    @classmethod
    def start(cls, settings: Settings) -> "FinanceSession":
        """Create a session and resume from the configured snapshot if present."""
        session = cls(settings)
        session.load()
        return session

    # Ledger commands ------------------------------------------------------
    def set_budget(self, amount: object) -> Decimal:
        return self.ledger.set_budget(amount)

    def add_transaction(
        self,
        kind: object,
        description: object,
        amount: object,
        category: object,
    ) -> TransactionResult:
        transaction = self.ledger.add_transaction(kind, description, amount, category)
        return TransactionResult(transaction=transaction, alert=self.ledger.budget_alert())

    def delete_transaction(self, position: object) -> Transaction:
        return self.ledger.delete_transaction(position)

    def list_transactions(self) -> Tuple[Transaction, ...]:
        return self.ledger.list_transactions()

    def summary(self) -> Summary:
        return self.ledger.summary()

    # Category commands ----------------------------------------------------
    def list_categories(self, kind: Union[TransactionKind, str]) -> Tuple[str, ...]:
        return self.registry.list_categories(kind)

    def add_category(self, kind: Union[TransactionKind, str], name: object) -> str:
        return self.registry.add_category(kind, name)

    def resolve_category(self, kind: Union[TransactionKind, str], selection: Union[int, str]) -> str:
        return self.registry.resolve_or_create(kind, selection)

    # Persistence commands -------------------------------------------------
    def save(self, path: Optional[Path] = None) -> Path:
        return self.storage.save(self.ledger, self.registry, path or self.settings.snapshot_path)

    def load(self, path: Optional[Path] = None) -> bool:
        """Replace session state from a snapshot.

        Returns False when there is nothing to load; corrupt snapshots raise
        and leave the current state untouched.
        """
        source = path or self.settings.snapshot_path
        try:
            ledger, registry = self.storage.load(source)
        except SnapshotNotFoundError:
            LOGGER.info("No snapshot at %s; starting fresh", source)
            return False
        self.ledger = ledger
        self.registry = registry
        return True

    def set_aside_snapshot(self, path: Optional[Path] = None) -> Path:
        """Keep an unreadable snapshot as a ``.corrupt`` backup."""
        return self.storage.set_aside(path or self.settings.snapshot_path)

    def export_csv(self, path: Optional[Path] = None) -> Path:
        return self.storage.export_csv(self.ledger, path or self.settings.csv_path)
