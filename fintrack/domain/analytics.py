"""Pure functions for dashboard statistics.

This module contains the functional core for analytics:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure folds over a transaction sequence

All amounts are signed Decimals (negative for expenses, positive for income).
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from fintrack.dates import parse_iso_date, trailing_window_start
from fintrack.dates import today as current_date
from fintrack.domain.models import Amount, CategoryName, Transaction

NO_CATEGORY = CategoryName("None")

TRAILING_WINDOW_DAYS = 7

BudgetState = Literal["not_set", "remaining", "over"]


@dataclass(frozen=True)
class BudgetStatus:
    """Immutable budget status derived from the budget cap and net total."""

    state: BudgetState
    amount: Amount | None = None

    def describe(self) -> str:
        """Describe the status, e.g. "40 remaining" or "50 over"."""
        if self.state == "not_set" or self.amount is None:
            return "not set"
        return f"{format_plain(self.amount)} {self.state}"


@dataclass(frozen=True)
class DashboardStats:
    """Immutable dashboard statistics."""

    total_count: int
    total_amount: Amount
    top_category: CategoryName
    top_category_amount: Amount
    last_7_days: Amount
    budget: BudgetStatus


def format_plain(amount: Decimal) -> str:
    """Format an amount without trailing zeros or exponent.

    Args:
        amount: Amount to format.

    Returns:
        Plain string (e.g., "40", "12.5").
    """
    if amount == amount.to_integral_value():
        return f"{amount.quantize(Decimal(1)):f}"
    return f"{amount.normalize():f}"


def total_amount(transactions: Sequence[Transaction]) -> Amount:
    """Calculate the net (signed) total of all transactions."""
    return Amount(sum((t.amount for t in transactions), Decimal(0)))


def top_category(transactions: Sequence[Transaction]) -> CategoryName:
    """Find the category with the most transactions.

    Ties are broken by the category encountered first.

    Args:
        transactions: Transactions in iteration order.

    Returns:
        Top category name, or "None" for an empty sequence.
    """
    counts: dict[CategoryName, int] = {}
    for txn in transactions:
        counts[txn.category] = counts.get(txn.category, 0) + 1

    best = NO_CATEGORY
    best_count = 0
    for category, count in counts.items():
        if count > best_count:
            best = category
            best_count = count

    return best


def top_category_amount(transactions: Sequence[Transaction]) -> Amount:
    """Calculate the net total of the top category.

    Args:
        transactions: Transactions in iteration order.

    Returns:
        Sum of amounts in the top category, 0 for an empty sequence.
    """
    if not transactions:
        return Amount(Decimal(0))

    category = top_category(transactions)
    return total_amount([t for t in transactions if t.category == category])


def trailing_total(
    transactions: Sequence[Transaction],
    today: date | None = None,
    days: int = TRAILING_WINDOW_DAYS,
) -> Amount:
    """Calculate the net total of transactions in a trailing window.

    Args:
        transactions: Transactions to sum.
        today: Reference date. Defaults to today.
        days: Window length; the boundary day is included.

    Returns:
        Sum of amounts dated on or after the window start.
    """
    start = trailing_window_start(today or current_date(), days)

    recent = []
    for txn in transactions:
        txn_date = parse_iso_date(txn.date)
        if txn_date is not None and txn_date >= start:
            recent.append(txn)

    return total_amount(recent)


def budget_status(budget_cap: Amount | None, total: Amount) -> BudgetStatus:
    """Compare the net total against the budget cap.

    Args:
        budget_cap: Configured budget cap, or None if not set.
        total: Net total of all transactions.

    Returns:
        BudgetStatus with the remaining or over amount.
    """
    if budget_cap is None:
        return BudgetStatus(state="not_set")

    remaining = budget_cap - total
    if remaining >= 0:
        return BudgetStatus(state="remaining", amount=Amount(remaining))
    return BudgetStatus(state="over", amount=Amount(abs(remaining)))


def category_totals(transactions: Sequence[Transaction]) -> dict[CategoryName, Amount]:
    """Sum amounts per category.

    Args:
        transactions: Transactions to group.

    Returns:
        Dictionary of category to net total, in first-encountered order.
    """
    totals: dict[CategoryName, Decimal] = {}
    for txn in transactions:
        totals[txn.category] = totals.get(txn.category, Decimal(0)) + txn.amount
    return {category: Amount(amount) for category, amount in totals.items()}


def compute_dashboard(
    transactions: Sequence[Transaction],
    budget_cap: Amount | None = None,
    today: date | None = None,
) -> DashboardStats:
    """Compute all dashboard statistics.

    Args:
        transactions: Current transactions.
        budget_cap: Configured budget cap, or None if not set.
        today: Reference date for the trailing window. Defaults to today.

    Returns:
        DashboardStats for the given transactions.
    """
    total = total_amount(transactions)

    return DashboardStats(
        total_count=len(transactions),
        total_amount=total,
        top_category=top_category(transactions),
        top_category_amount=top_category_amount(transactions),
        last_7_days=trailing_total(transactions, today),
        budget=budget_status(budget_cap, total),
    )
