"""JSON file persistence backend."""

import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from fintrack.domain.models import Settings, Transaction
from fintrack.logging_setup import get_logger
from fintrack.store.codec import (
    settings_from_dict,
    settings_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)

logger = get_logger(__name__)


class JsonFileBackend:
    """Stores transactions and settings in a single JSON document.

    Layout: {"transactions": [...], "settings": {...}}. Writes go to a
    temporary file that replaces the target, so a failed write never leaves a
    truncated document behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s: %s", self.path, e)
            return {}
        if not isinstance(document, dict):
            logger.warning("Ignoring %s: top level is not an object", self.path)
            return {}
        return document

    def _write(self, key: str, value: Any) -> bool:
        document = self._read()
        document[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.warning("Could not write %s: %s", self.path, e)
            return False
        return True

    def load_transactions(self) -> list[Transaction]:
        """Load all transactions in stored order.

        Returns:
            List of transactions. Empty if the file is missing or corrupt;
            records that fail to decode are skipped.
        """
        raw = self._read().get("transactions", [])
        if not isinstance(raw, list):
            logger.warning("Ignoring transactions in %s: not a list", self.path)
            return []

        transactions = []
        for item in raw:
            try:
                transactions.append(transaction_from_dict(item))
            except ValueError as e:
                logger.warning("Skipping corrupt transaction record: %s", e)
        return transactions

    def save_transactions(self, transactions: Sequence[Transaction]) -> bool:
        """Replace all stored transactions.

        Args:
            transactions: Complete transaction list in order.

        Returns:
            True if saved, False on a filesystem error.
        """
        return self._write("transactions", [transaction_to_dict(t) for t in transactions])

    def load_settings(self) -> Settings:
        """Load settings.

        Returns:
            Stored settings, or defaults if absent or corrupt.
        """
        raw = self._read().get("settings")
        if raw is None:
            return Settings()
        try:
            return settings_from_dict(raw)
        except ValueError as e:
            logger.warning("Ignoring corrupt settings: %s", e)
            return Settings()

    def save_settings(self, settings: Settings) -> bool:
        """Store settings.

        Args:
            settings: Settings to store.

        Returns:
            True if saved, False on a filesystem error.
        """
        return self._write("settings", settings_to_dict(settings))
