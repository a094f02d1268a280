"""Validation helpers shared by the ledger, the shell and the API."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError
from .models import TransactionKind

DESCRIPTION_MAX_LENGTH = 200
CATEGORY_MAX_LENGTH = 50


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive Decimal, keeping every digit as entered."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    text = raw.strip() if isinstance(raw, str) else str(raw)
    try:
        amount = Decimal(text)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    try:
        trimmed.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError(f"{field} contains characters that cannot be stored") from exc
    return trimmed


def validate_description(value: object) -> str:
    """Descriptions must carry words, not just a number."""
    description = validate_required_str(value, "description", DESCRIPTION_MAX_LENGTH)
    if description.isdigit():
        raise ValidationError("description cannot be only numbers")
    return description


def validate_category_name(value: object) -> str:
    return validate_required_str(value, "category", CATEGORY_MAX_LENGTH)


def validate_kind(value: object) -> TransactionKind:
    if isinstance(value, TransactionKind):
        return value
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ValidationError("kind must be Income or Expense")
    try:
        return TransactionKind.from_str(str(value))
    except ValueError as exc:
        raise ValidationError("kind must be Income or Expense") from exc


def _parse_int(value: object, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValidationError(f"{field} must be a whole number") from exc
    raise ValidationError(f"{field} must be a whole number")


def validate_menu_choice(value: object, minimum: int, maximum: int) -> int:
    choice = _parse_int(value, "choice")
    if not minimum <= choice <= maximum:
        raise ValidationError(f"choice must be between {minimum} and {maximum}")
    return choice


def validate_position(value: object) -> int:
    """Positions are parsed here; range checks belong to the ledger."""
    return _parse_int(value, "position")
