"""Domain type definitions for fintrack.

These NewTypes provide semantic clarity and help with type checking:
- Amount: Signed decimal amount (negative for expenses, positive for income)
- TransactionId: Opaque store-generated identifier
- CategoryName: Name of a transaction category
- Description: Transaction description text
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType, TypedDict

# Amounts are Decimal to avoid floating point errors; the sign carries polarity
Amount = NewType("Amount", Decimal)

TransactionId = NewType("TransactionId", str)

CategoryName = NewType("CategoryName", str)

Description = NewType("Description", str)

DEFAULT_CATEGORIES: tuple[CategoryName, ...] = (
    CategoryName("Food"),
    CategoryName("Transport"),
    CategoryName("Housing"),
    CategoryName("Entertainment"),
    CategoryName("Utilities"),
    CategoryName("Health"),
    CategoryName("Shopping"),
    CategoryName("Income"),
    CategoryName("Other"),
)

DEFAULT_CURRENCY_RATES: dict[str, Decimal] = {
    "EUR": Decimal("0.85"),
    "GBP": Decimal("0.73"),
}


class Field(str, Enum):
    """User-editable transaction fields."""

    DESCRIPTION = "description"
    AMOUNT = "amount"
    CATEGORY = "category"
    DATE = "date"

    def __str__(self) -> str:
        return self.value


class TransactionInput(TypedDict):
    """Raw transaction fields as entered by the user."""

    description: str
    amount: str | int | float | Decimal
    category: str
    date: str


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record."""

    id: TransactionId
    description: Description
    amount: Amount
    category: CategoryName
    date: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Settings:
    """Immutable user settings."""

    budget_cap: Amount | None = None
    currency_rates: dict[str, Decimal] = field(default_factory=lambda: dict(DEFAULT_CURRENCY_RATES))

    def copy(self) -> "Settings":
        """Return a copy that shares no mutable state with this instance."""
        return Settings(budget_cap=self.budget_cap, currency_rates=dict(self.currency_rates))
