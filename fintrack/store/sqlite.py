"""SQLite persistence backend."""

import json
import sqlite3
from collections.abc import Sequence
from contextlib import closing
from pathlib import Path

from fintrack.domain.models import Settings, Transaction
from fintrack.logging_setup import get_logger
from fintrack.store.codec import (
    settings_from_dict,
    settings_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)
from fintrack.store.schema import database_exists, init_database

logger = get_logger(__name__)

_SETTINGS_KEY = "settings"


class SqliteBackend:
    """Stores transactions and settings in a local SQLite database.

    Each save replaces the whole transactions table inside a single SQL
    transaction. A position column preserves insertion order.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        init_database(self.db_path)

    def load_transactions(self) -> list[Transaction]:
        """Load all transactions in insertion order.

        Returns:
            List of transactions. Empty if the database is missing or
            unreadable; rows that fail to decode are skipped.
        """
        if not database_exists(self.db_path):
            return []

        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT id, description, amount, category, date, created_at, updated_at "
                    "FROM transactions ORDER BY position ASC"
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.warning("Could not read transactions from %s: %s", self.db_path, e)
            return []

        transactions = []
        for row in rows:
            try:
                transactions.append(transaction_from_dict(dict(row)))
            except ValueError as e:
                logger.warning("Skipping corrupt transaction row %r: %s", row["id"], e)
        return transactions

    def save_transactions(self, transactions: Sequence[Transaction]) -> bool:
        """Replace all stored transactions.

        Args:
            transactions: Complete transaction list in order.

        Returns:
            True if saved, False if the database or filesystem reported an error.
        """
        try:
            self._ensure_schema()
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute("DELETE FROM transactions")
                    cursor.executemany(
                        "INSERT INTO transactions "
                        "(id, position, description, amount, category, date, created_at, updated_at) "
                        "VALUES (:id, :position, :description, :amount, :category, :date, :created_at, :updated_at)",
                        [
                            {**transaction_to_dict(txn), "position": position}
                            for position, txn in enumerate(transactions)
                        ],
                    )
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not save transactions to %s: %s", self.db_path, e)
            return False

        return True

    def load_settings(self) -> Settings:
        """Load settings.

        Returns:
            Stored settings, or defaults if absent or corrupt.
        """
        if not database_exists(self.db_path):
            return Settings()

        try:
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM settings WHERE key = ?", (_SETTINGS_KEY,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.warning("Could not read settings from %s: %s", self.db_path, e)
            return Settings()

        if row is None:
            return Settings()

        try:
            return settings_from_dict(json.loads(row["value"]))
        except ValueError as e:
            logger.warning("Ignoring corrupt settings: %s", e)
            return Settings()

    def save_settings(self, settings: Settings) -> bool:
        """Store settings.

        Args:
            settings: Settings to store.

        Returns:
            True if saved, False if the database or filesystem reported an error.
        """
        try:
            self._ensure_schema()
            with closing(self._connect()) as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(
                        "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                        (_SETTINGS_KEY, json.dumps(settings_to_dict(settings))),
                    )
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not save settings to %s: %s", self.db_path, e)
            return False

        return True
