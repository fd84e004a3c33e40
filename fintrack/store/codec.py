"""Dictionary and JSON encoding for transactions and settings.

Amounts are encoded as decimal strings and timestamps as ISO 8601 so that
decode(encode(x)) == x exactly.
"""

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from fintrack.dates import parse_iso_date
from fintrack.domain.models import (
    DEFAULT_CURRENCY_RATES,
    Amount,
    CategoryName,
    Description,
    Settings,
    Transaction,
    TransactionId,
)
from fintrack.domain.parsing import parse_amount

EXPORT_VERSION = 1


def _parse_timestamp(value: Any, name: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be an ISO timestamp")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} must be a non-empty string")
    return value


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    """Encode a transaction as a JSON-compatible dictionary.

    Args:
        transaction: Transaction to encode.

    Returns:
        Dictionary with string values.
    """
    return {
        "id": transaction.id,
        "description": transaction.description,
        "amount": str(transaction.amount),
        "category": transaction.category,
        "date": transaction.date,
        "created_at": transaction.created_at.isoformat(),
        "updated_at": transaction.updated_at.isoformat(),
    }


def transaction_from_dict(data: Any) -> Transaction:
    """Decode a transaction dictionary.

    Args:
        data: Dictionary as produced by transaction_to_dict.

    Returns:
        Decoded Transaction.

    Raises:
        ValueError: If any field is missing or malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("transaction must be an object")

    parsed = parse_amount(data.get("amount"))
    if parsed.value is None:
        raise ValueError(f"amount is invalid: {parsed.error}")

    date = _require_text(data, "date")
    if parse_iso_date(date) is None:
        raise ValueError(f"date is invalid: {date}")

    return Transaction(
        id=TransactionId(_require_text(data, "id")),
        description=Description(_require_text(data, "description").strip()),
        amount=parsed.value,
        category=CategoryName(_require_text(data, "category")),
        date=date,
        created_at=_parse_timestamp(data.get("created_at"), "created_at"),
        updated_at=_parse_timestamp(data.get("updated_at"), "updated_at"),
    )


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Encode settings as a JSON-compatible dictionary.

    Args:
        settings: Settings to encode.

    Returns:
        Dictionary with decimal values as strings.
    """
    return {
        "budget_cap": None if settings.budget_cap is None else str(settings.budget_cap),
        "currency_rates": {code: str(rate) for code, rate in settings.currency_rates.items()},
    }


def settings_from_dict(data: Any) -> Settings:
    """Decode a settings dictionary.

    Missing keys take their default values.

    Args:
        data: Dictionary as produced by settings_to_dict.

    Returns:
        Decoded Settings.

    Raises:
        ValueError: If a present value is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("settings must be an object")

    budget_cap: Amount | None = None
    raw_cap = data.get("budget_cap")
    if raw_cap is not None:
        parsed = parse_amount(raw_cap)
        if parsed.value is None or parsed.value <= 0:
            raise ValueError(f"budget_cap is invalid: {raw_cap!r}")
        budget_cap = parsed.value

    raw_rates = data.get("currency_rates")
    if raw_rates is None:
        rates = dict(DEFAULT_CURRENCY_RATES)
    elif isinstance(raw_rates, dict):
        rates = {}
        for code, raw_rate in raw_rates.items():
            parsed = parse_amount(raw_rate)
            if parsed.value is None:
                raise ValueError(f"currency rate for {code} is invalid: {raw_rate!r}")
            rates[str(code)] = Decimal(parsed.value)
    else:
        raise ValueError("currency_rates must be an object")

    return Settings(budget_cap=budget_cap, currency_rates=rates)


def dump_export(transactions: Sequence[Transaction], settings: Settings) -> str:
    """Serialize transactions and settings to a JSON document.

    Args:
        transactions: Transactions in order.
        settings: Current settings.

    Returns:
        JSON text.
    """
    document = {
        "version": EXPORT_VERSION,
        "transactions": [transaction_to_dict(t) for t in transactions],
        "settings": settings_to_dict(settings),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def load_export(text: str) -> tuple[list[Transaction], Settings]:
    """Parse a JSON document produced by dump_export.

    Args:
        text: JSON text.

    Returns:
        Tuple of (transactions, settings).

    Raises:
        ValueError: If the document or any record is malformed.
    """
    document = json.loads(text)
    if not isinstance(document, dict):
        raise ValueError("export must be a JSON object")

    raw_transactions = document.get("transactions", [])
    if not isinstance(raw_transactions, list):
        raise ValueError("transactions must be a list")

    transactions = [transaction_from_dict(item) for item in raw_transactions]
    settings = settings_from_dict(document.get("settings", {}))
    return transactions, settings
