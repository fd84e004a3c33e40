"""Pure functions for transaction field validation.

This module contains the functional core for validation:
- No I/O operations (no database, no console, no files)
- No side effects
- Errors are returned as data, never raised

Each field validator returns an error message, or None when the value is valid.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from fintrack.dates import parse_iso_date
from fintrack.dates import today as current_date
from fintrack.domain.models import DEFAULT_CATEGORIES, Field
from fintrack.domain.parsing import parse_amount

MAX_DESCRIPTION_LENGTH = 200

MAX_AMOUNT = Decimal("1000000")


def validate_description(value: object) -> str | None:
    """Validate a transaction description.

    Args:
        value: Raw description.

    Returns:
        Error message or None.
    """
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        return "Description is required"
    if len(text) > MAX_DESCRIPTION_LENGTH:
        return f"Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer"
    return None


def validate_amount(value: object) -> str | None:
    """Validate a transaction amount.

    Negative amounts are expenses and positive amounts are income, so both
    signs are accepted. Zero is rejected.

    Args:
        value: Raw amount.

    Returns:
        Error message or None.
    """
    parsed = parse_amount(value)
    if parsed.value is None:
        return parsed.error

    if parsed.value == 0:
        return "Amount cannot be zero"
    if abs(parsed.value) > MAX_AMOUNT:
        return f"Amount must be between -{MAX_AMOUNT:,} and {MAX_AMOUNT:,}"
    return None


def validate_date(value: object, today: date | None = None) -> str | None:
    """Validate a transaction date.

    Args:
        value: Raw date in YYYY-MM-DD format.
        today: Reference date for the future-date check. Defaults to today.

    Returns:
        Error message or None.
    """
    if not isinstance(value, str) or not value.strip():
        return "Date is required"

    parsed = parse_iso_date(value)
    if parsed is None:
        return "Date must be a valid date (YYYY-MM-DD)"

    if parsed > (today or current_date()):
        return "Date cannot be in the future"
    return None


def validate_category(value: object, categories: Iterable[str] = DEFAULT_CATEGORIES) -> str | None:
    """Validate a transaction category.

    Args:
        value: Raw category name.
        categories: Known category names.

    Returns:
        Error message or None.
    """
    if not isinstance(value, str) or not value.strip():
        return "Category is required"
    if value not in set(categories):
        return f"Unknown category: {value}"
    return None


def validate_budget_cap(value: object) -> str | None:
    """Validate a budget cap.

    Args:
        value: Raw budget cap.

    Returns:
        Error message or None.
    """
    parsed = parse_amount(value)
    if parsed.value is None:
        return parsed.error
    if parsed.value <= 0:
        return "Budget cap must be positive"
    return None


def _field_validators(
    categories: Iterable[str],
    today: date | None,
) -> dict[Field, Callable[[object], str | None]]:
    return {
        Field.DESCRIPTION: validate_description,
        Field.AMOUNT: validate_amount,
        Field.CATEGORY: lambda value: validate_category(value, categories),
        Field.DATE: lambda value: validate_date(value, today),
    }


def validate_field(
    field: Field,
    value: object,
    categories: Iterable[str] = DEFAULT_CATEGORIES,
    today: date | None = None,
) -> str | None:
    """Validate a single field by identifier.

    Args:
        field: Field to validate.
        value: Raw value.
        categories: Known category names.
        today: Reference date for the future-date check.

    Returns:
        Error message or None.
    """
    return _field_validators(tuple(categories), today)[field](value)


def validate_transaction(
    data: Mapping[str, Any],
    categories: Iterable[str] = DEFAULT_CATEGORIES,
    today: date | None = None,
) -> dict[Field, str]:
    """Validate every field of a transaction.

    All fields are checked independently; a missing key is validated as an
    empty value.

    Args:
        data: Raw transaction fields keyed by field name.
        categories: Known category names.
        today: Reference date for the future-date check.

    Returns:
        Dictionary of failing fields to error messages. Empty if valid.
    """
    validators = _field_validators(tuple(categories), today)
    errors: dict[Field, str] = {}

    for field, validator in validators.items():
        error = validator(data.get(field.value, ""))
        if error is not None:
            errors[field] = error

    return errors
