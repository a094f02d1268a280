"""Category registry keeping the labels available per transaction kind."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple, Union

from .exceptions import ValidationError
from .logging_utils import get_logger
from .models import TransactionKind
from .validators import validate_category_name, validate_kind

LOGGER = get_logger(__name__)

DEFAULT_INCOME_CATEGORIES = ("Salary", "Bonus", "Investments")
DEFAULT_EXPENSE_CATEGORIES = ("Food", "Rent", "Entertainment", "Bills", "Shopping")


class CategoryRegistry:
    """Ordered, append-only category lists for income and expenses.

    Names are not deduplicated: adding an existing name appends a second
    entry, mirroring how categories accumulate during entry.
    """

    def __init__(
        self,
        income: Optional[Iterable[str]] = None,
        expense: Optional[Iterable[str]] = None,
    ) -> None:
        self._categories: Dict[TransactionKind, List[str]] = {
            TransactionKind.INCOME: list(DEFAULT_INCOME_CATEGORIES if income is None else income),
            TransactionKind.EXPENSE: list(DEFAULT_EXPENSE_CATEGORIES if expense is None else expense),
        }

    @classmethod
    def from_lists(cls, income: Iterable[str], expense: Iterable[str]) -> "CategoryRegistry":
        return cls(income=income, expense=expense)

    def list_categories(self, kind: Union[TransactionKind, str]) -> Tuple[str, ...]:
        return tuple(self._categories[validate_kind(kind)])

    def add_category(self, kind: Union[TransactionKind, str], name: object) -> str:
        canonical_kind = validate_kind(kind)
        category = validate_category_name(name)
        self._categories[canonical_kind].append(category)
        LOGGER.info("Added %s category %r", canonical_kind.label.lower(), category)
        return category

    def resolve_or_create(self, kind: Union[TransactionKind, str], selection: Union[int, str]) -> str:
        """Return the category at a 1-based index, or append a new name."""
        canonical_kind = validate_kind(kind)
        if isinstance(selection, bool):
            raise ValidationError("category selection must be an index or a name")
        if isinstance(selection, int):
            categories = self._categories[canonical_kind]
            if not 1 <= selection <= len(categories):
                raise ValidationError(
                    f"category selection must be between 1 and {len(categories)}"
                )
            return categories[selection - 1]
        return self.add_category(canonical_kind, selection)

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            "income_categories": list(self._categories[TransactionKind.INCOME]),
            "expense_categories": list(self._categories[TransactionKind.EXPENSE]),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategoryRegistry):
            return NotImplemented
        return self._categories == other._categories
