"""Transaction management commands (add, edit, delete)."""

import sys

import typer

from fintrack.commands.common import (
    console,
    format_amount,
    load_config_or_exit,
    open_store,
    print_validation_errors,
    prompt_field,
)
from fintrack.dates import today as current_date
from fintrack.domain.models import Field, Transaction, TransactionInput
from fintrack.domain.validation import validate_transaction
from fintrack.store import StoreError


def print_transaction(txn: Transaction) -> None:
    """Print transaction details."""
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.date}")
    console.print(f"  Description: {txn.description}")
    console.print(f"  Category: {txn.category}")
    console.print(f"  Amount: {format_amount(txn.amount)}")


def add_command(
    description: str | None = None,
    amount: str | None = None,
    category: str | None = None,
    date: str | None = None,
) -> None:
    """Add a transaction, prompting for any field not given."""
    config = load_config_or_exit()
    today = current_date()

    given = {
        Field.DESCRIPTION: description,
        Field.AMOUNT: amount,
        Field.CATEGORY: category,
        Field.DATE: date,
    }
    defaults = {Field.DATE: today.isoformat()}

    values = {
        field: value if value is not None else prompt_field(field, config.categories, today, defaults.get(field))
        for field, value in given.items()
    }
    data = TransactionInput(
        description=values[Field.DESCRIPTION],
        amount=values[Field.AMOUNT],
        category=values[Field.CATEGORY],
        date=values[Field.DATE],
    )

    errors = validate_transaction(data, config.categories, today)
    if errors:
        console.print("[red]Please fix all errors before saving:[/red]", style="bold")
        print_validation_errors(errors)
        sys.exit(1)

    try:
        store = open_store(config)
        txn = store.add_transaction(data)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction added:")
    print_transaction(txn)


def edit_command(
    txn_id: str,
    description: str | None = None,
    amount: str | None = None,
    category: str | None = None,
    date: str | None = None,
) -> None:
    """Edit a transaction.

    With no field options, prompts for every field using the current values
    as defaults. Otherwise only the given fields change.
    """
    config = load_config_or_exit()
    today = current_date()

    store = open_store(config)

    txn = store.get_transaction_by_id(txn_id)
    if txn is None:
        console.print(f"[red]Transaction {txn_id} not found[/red]")
        sys.exit(1)

    store.set_editing_id(txn.id)

    current = {
        Field.DESCRIPTION: str(txn.description),
        Field.AMOUNT: str(txn.amount),
        Field.CATEGORY: str(txn.category),
        Field.DATE: txn.date,
    }
    given = {
        Field.DESCRIPTION: description,
        Field.AMOUNT: amount,
        Field.CATEGORY: category,
        Field.DATE: date,
    }

    if all(value is None for value in given.values()):
        console.print(f"[cyan]Editing {txn.id}[/cyan] [dim](press Enter to keep the current value)[/dim]")
        values = {field: prompt_field(field, config.categories, today, current[field]) for field in Field}
    else:
        values = {field: value if value is not None else current[field] for field, value in given.items()}

    data = TransactionInput(
        description=values[Field.DESCRIPTION],
        amount=values[Field.AMOUNT],
        category=values[Field.CATEGORY],
        date=values[Field.DATE],
    )

    errors = validate_transaction(data, config.categories, today)
    if errors:
        store.clear_editing_id()
        console.print("[red]Please fix all errors before saving:[/red]", style="bold")
        print_validation_errors(errors)
        sys.exit(1)

    editing_id = store.get_editing_id()
    if editing_id is None:
        console.print("[red]No transaction is being edited[/red]")
        sys.exit(1)

    try:
        updated = store.update_transaction(editing_id, data)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)
    finally:
        store.clear_editing_id()

    if updated is None:
        console.print(f"[red]Transaction {editing_id} not found[/red]")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction updated:")
    print_transaction(updated)


def delete_command(txn_id: str, yes: bool = False) -> None:
    """Delete a transaction after confirmation."""
    store = open_store()

    txn = store.get_transaction_by_id(txn_id)
    if txn is None:
        console.print(f"[red]Transaction {txn_id} not found[/red]")
        sys.exit(1)

    if not yes and not typer.confirm(f'Delete "{txn.description}"?', default=False):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        deleted = store.delete_transaction(txn.id)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)

    if not deleted:
        console.print(f"[red]Transaction {txn_id} not found[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted: {txn.description} ({format_amount(txn.amount)})")
