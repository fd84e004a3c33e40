"""Persistence contract consumed by the transaction store."""

from collections.abc import Sequence
from typing import Protocol

from fintrack.domain.models import Settings, Transaction


class Persistence(Protocol):
    """Load/save contract for transactions and settings.

    Loads never raise on missing or corrupt data: they return an empty list or
    default settings instead. Saves report failure by returning False.
    """

    def load_transactions(self) -> list[Transaction]: ...

    def save_transactions(self, transactions: Sequence[Transaction]) -> bool: ...

    def load_settings(self) -> Settings: ...

    def save_settings(self, settings: Settings) -> bool: ...
