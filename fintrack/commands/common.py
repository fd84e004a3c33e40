"""Shared helpers for CLI commands."""

import sys
from datetime import date
from decimal import Decimal

import typer
from rich.console import Console

from fintrack.config import AppConfig, get_app_config
from fintrack.domain.models import CategoryName, Field
from fintrack.domain.validation import validate_field
from fintrack.store import TransactionStore, create_backend

console = Console()

FIELD_LABELS: dict[Field, str] = {
    Field.DESCRIPTION: "Description",
    Field.AMOUNT: "Amount (negative for expenses)",
    Field.CATEGORY: "Category",
    Field.DATE: "Date (YYYY-MM-DD)",
}

FIELD_OPTIONS: dict[Field, str] = {
    Field.DESCRIPTION: "--description",
    Field.AMOUNT: "--amount",
    Field.CATEGORY: "--category",
    Field.DATE: "--date",
}


def load_config_or_exit() -> AppConfig:
    """Load the app config, exiting with an error message if it is invalid."""
    try:
        return get_app_config()
    except ValueError as e:
        console.print(f"[red]Config error: {e}[/red]", style="bold")
        sys.exit(1)


def open_store(config: AppConfig | None = None) -> TransactionStore:
    """Create and initialize the transaction store for the configured backend.

    Args:
        config: App config. If None, loads it from the default location.

    Returns:
        Initialized TransactionStore.
    """
    if config is None:
        config = load_config_or_exit()
    store = TransactionStore(create_backend(config.backend, config.data_path))
    store.initialize()
    return store


def format_amount(amount: Decimal, colored: bool = True) -> str:
    """Format an amount for display.

    Args:
        amount: Signed amount.
        colored: Whether to wrap in rich color markup.

    Returns:
        Formatted string (e.g., "-$12.50" or "+$100.00").
    """
    formatted = f"${abs(amount):,.2f}"
    if amount < 0:
        return f"[red]-{formatted}[/red]" if colored else f"-{formatted}"
    return f"[green]+{formatted}[/green]" if colored else f"+{formatted}"


def print_validation_errors(errors: dict[Field, str]) -> None:
    """Print every field error, in field order."""
    for field in Field:
        if field in errors:
            console.print(f"  [red]{FIELD_OPTIONS[field]}: {errors[field]}[/red]")


def prompt_field(
    field: Field,
    categories: tuple[CategoryName, ...],
    today: date,
    default: str | None = None,
) -> str:
    """Prompt for a field until the entered value validates.

    Args:
        field: Field to prompt for.
        categories: Known category names.
        today: Reference date for the future-date check.
        default: Value used when the user just presses Enter.

    Returns:
        The validated raw value.
    """
    if field is Field.CATEGORY:
        console.print(f"[cyan]Categories:[/cyan] {', '.join(categories)}")

    while True:
        value: str = typer.prompt(FIELD_LABELS[field], default=default, type=str)
        error = validate_field(field, value, categories, today)
        if error is None:
            return value
        console.print(f"[red]{error}[/red]")
