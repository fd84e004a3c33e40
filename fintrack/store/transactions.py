"""Authoritative in-memory store of transactions and settings.

The store owns the live transaction list. Callers only ever receive copies,
and every mutation re-persists the full set through the injected backend
before returning.
"""

import secrets
import string
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from fintrack.domain.models import (
    Amount,
    CategoryName,
    Description,
    Settings,
    Transaction,
    TransactionId,
)
from fintrack.domain.parsing import parse_amount
from fintrack.logging_setup import get_logger
from fintrack.store.backend import Persistence

logger = get_logger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9
_SETTINGS_KEYS = frozenset({"budget_cap", "currency_rates"})


class StoreError(Exception):
    """Base class for transaction store errors."""


class StoreNotInitializedError(StoreError, RuntimeError):
    """Raised when the store is used before initialize()."""


class InvalidAmountError(StoreError, ValueError):
    """Raised when an amount does not parse to a finite number."""


class PersistenceError(StoreError):
    """Raised when the backend fails to save.

    The in-memory change has been applied; call TransactionStore.flush() to
    retry the save.
    """


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _drop_duplicate_ids(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Keep the first record for each ID, warning about any later ones."""
    seen: set[str] = set()
    unique: list[Transaction] = []
    for txn in transactions:
        if txn.id in seen:
            logger.warning("Skipping duplicate transaction %s", txn.id)
            continue
        seen.add(txn.id)
        unique.append(txn)
    return unique


class TransactionStore:
    """In-memory transaction and settings store with write-through persistence.

    Args:
        backend: Persistence backend implementing the load/save contract.
        clock: Returns the current time. Defaults to utc_now.
    """

    def __init__(self, backend: Persistence, clock: Callable[[], datetime] = utc_now) -> None:
        self._backend = backend
        self._clock = clock
        self._transactions: list[Transaction] = []
        self._settings = Settings()
        self._editing_id: TransactionId | None = None
        self._initialized = False
        self._transactions_dirty = False
        self._settings_dirty = False
        self._last_id_ms = 0

    # Lifecycle

    def initialize(self) -> None:
        """Load transactions and settings from the backend.

        Replaces all in-memory state, including the editing cursor.
        """
        self._transactions = _drop_duplicate_ids(self._backend.load_transactions())
        self._settings = self._backend.load_settings().copy()
        self._editing_id = None
        self._transactions_dirty = False
        self._settings_dirty = False
        self._initialized = True
        logger.info("Loaded %d transactions from storage", len(self._transactions))

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StoreNotInitializedError("TransactionStore.initialize() must be called first")

    @property
    def is_dirty(self) -> bool:
        """True when an in-memory change has not been persisted."""
        return self._transactions_dirty or self._settings_dirty

    def flush(self) -> None:
        """Retry persisting transactions and settings.

        Raises:
            PersistenceError: If the backend still fails.
        """
        self._require_initialized()
        self._transactions_dirty = not self._backend.save_transactions(list(self._transactions))
        self._settings_dirty = not self._backend.save_settings(self._settings.copy())
        if self.is_dirty:
            raise PersistenceError("Could not persist changes")

    def _persist_transactions(self) -> None:
        if self._backend.save_transactions(list(self._transactions)):
            self._transactions_dirty = False
            return
        self._transactions_dirty = True
        logger.warning("Transactions changed in memory but could not be saved")
        raise PersistenceError("Could not save transactions")

    def _persist_settings(self) -> None:
        if self._backend.save_settings(self._settings.copy()):
            self._settings_dirty = False
            return
        self._settings_dirty = True
        logger.warning("Settings changed in memory but could not be saved")
        raise PersistenceError("Could not save settings")

    # Transactions

    def _generate_id(self) -> TransactionId:
        now_ms = max(int(time.time() * 1000), self._last_id_ms)
        self._last_id_ms = now_ms
        existing = {t.id for t in self._transactions}
        while True:
            suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
            txn_id = TransactionId(f"txn_{now_ms}_{suffix}")
            if txn_id not in existing:
                return txn_id

    def _now(self, not_before: datetime | None = None) -> datetime:
        now = self._clock()
        if not_before is not None and now < not_before:
            return not_before
        return now

    @staticmethod
    def _coerce_amount(raw: object) -> Amount:
        parsed = parse_amount(raw)
        if parsed.value is None:
            raise InvalidAmountError(f"Invalid amount {raw!r}: {parsed.error}")
        return parsed.value

    def _index_of(self, txn_id: str) -> int | None:
        for index, txn in enumerate(self._transactions):
            if txn.id == txn_id:
                return index
        return None

    def add_transaction(self, data: Mapping[str, Any]) -> Transaction:
        """Create and persist a transaction.

        Field semantics are expected to have been validated already; only
        type coercion happens here.

        Args:
            data: Raw fields: description, amount, category, date.

        Returns:
            The created transaction.

        Raises:
            InvalidAmountError: If the amount does not parse to a finite number.
            PersistenceError: If the backend fails (the transaction stays in memory).
        """
        self._require_initialized()
        amount = self._coerce_amount(data["amount"])
        now = self._now()

        transaction = Transaction(
            id=self._generate_id(),
            description=Description(str(data["description"]).strip()),
            amount=amount,
            category=CategoryName(str(data["category"])),
            date=str(data["date"]).strip(),
            created_at=now,
            updated_at=now,
        )

        self._transactions.append(transaction)
        logger.debug("Added transaction %s", transaction.id)
        self._persist_transactions()
        return transaction

    def update_transaction(self, txn_id: str, data: Mapping[str, Any]) -> Transaction | None:
        """Replace every editable field of a transaction.

        The id and created_at are kept; updated_at is refreshed and never moves
        backwards.

        Args:
            txn_id: Transaction ID.
            data: Raw fields: description, amount, category, date.

        Returns:
            The updated transaction, or None if no transaction has this ID.

        Raises:
            InvalidAmountError: If the amount does not parse to a finite number.
            PersistenceError: If the backend fails (the update stays in memory).
        """
        self._require_initialized()
        index = self._index_of(txn_id)
        if index is None:
            return None

        amount = self._coerce_amount(data["amount"])
        current = self._transactions[index]

        updated = Transaction(
            id=current.id,
            description=Description(str(data["description"]).strip()),
            amount=amount,
            category=CategoryName(str(data["category"])),
            date=str(data["date"]).strip(),
            created_at=current.created_at,
            updated_at=self._now(not_before=current.updated_at),
        )

        self._transactions[index] = updated
        if self._editing_id == txn_id:
            self._editing_id = None
        logger.debug("Updated transaction %s", txn_id)
        self._persist_transactions()
        return updated

    def delete_transaction(self, txn_id: str) -> bool:
        """Delete a transaction.

        Args:
            txn_id: Transaction ID.

        Returns:
            True if deleted, False if no transaction has this ID.

        Raises:
            PersistenceError: If the backend fails (the deletion stays in memory).
        """
        self._require_initialized()
        index = self._index_of(txn_id)
        if index is None:
            return False

        del self._transactions[index]
        if self._editing_id == txn_id:
            self._editing_id = None
        logger.debug("Deleted transaction %s", txn_id)
        self._persist_transactions()
        return True

    def get_transaction_by_id(self, txn_id: str) -> Transaction | None:
        """Get a transaction by ID, or None if not found."""
        self._require_initialized()
        index = self._index_of(txn_id)
        return None if index is None else self._transactions[index]

    def get_all_transactions(self) -> list[Transaction]:
        """Get a copy of all transactions in insertion order."""
        self._require_initialized()
        return list(self._transactions)

    def set_transactions(self, transactions: Iterable[Transaction]) -> None:
        """Replace the whole transaction set (import or restore).

        Args:
            transactions: New transactions in order.

        Raises:
            ValueError: If two transactions share an ID.
            PersistenceError: If the backend fails (the new set stays in memory).
        """
        self._require_initialized()
        new_transactions = list(transactions)

        seen: set[str] = set()
        for txn in new_transactions:
            if txn.id in seen:
                raise ValueError(f"Duplicate transaction id: {txn.id}")
            seen.add(txn.id)

        self._transactions = new_transactions
        logger.info("Replaced transactions (%d records)", len(new_transactions))
        self._persist_transactions()

    # Editing cursor

    def set_editing_id(self, txn_id: str | None) -> None:
        """Mark a transaction as being edited. The ID is not checked."""
        self._editing_id = None if txn_id is None else TransactionId(txn_id)

    def get_editing_id(self) -> TransactionId | None:
        """Get the ID of the transaction being edited, if any."""
        return self._editing_id

    def clear_editing_id(self) -> None:
        """Clear the editing cursor."""
        self._editing_id = None

    # Settings

    def get_settings(self) -> Settings:
        """Get a copy of the current settings."""
        self._require_initialized()
        return self._settings.copy()

    def update_settings(self, partial: Mapping[str, Any]) -> Settings:
        """Merge the given top-level settings over the current ones.

        Args:
            partial: Any of "budget_cap" (positive number or None) and
                "currency_rates" (mapping of currency code to rate).

        Returns:
            A copy of the merged settings.

        Raises:
            ValueError: If a key is unknown or a value is invalid.
            PersistenceError: If the backend fails (the change stays in memory).
        """
        self._require_initialized()
        unknown = set(partial) - _SETTINGS_KEYS
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        budget_cap = self._settings.budget_cap
        if "budget_cap" in partial:
            raw_cap = partial["budget_cap"]
            if raw_cap is None:
                budget_cap = None
            else:
                budget_cap = self._coerce_amount(raw_cap)
                if budget_cap <= 0:
                    raise ValueError("Budget cap must be positive")

        currency_rates = dict(self._settings.currency_rates)
        if "currency_rates" in partial:
            currency_rates = {
                str(code): self._coerce_amount(rate) for code, rate in dict(partial["currency_rates"]).items()
            }

        self._settings = Settings(budget_cap=budget_cap, currency_rates=currency_rates)
        logger.debug("Updated settings: %s", ", ".join(sorted(partial)))
        self._persist_settings()
        return self._settings.copy()
