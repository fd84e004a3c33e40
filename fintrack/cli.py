"""CLI entry point for fintrack."""

import logging

import typer

from fintrack.commands.admin import export_command, import_command, init_command
from fintrack.commands.report import list_command, stats_command
from fintrack.commands.settings import budget_command, rates_command
from fintrack.commands.transactions import add_command, delete_command, edit_command
from fintrack.config import get_app_config
from fintrack.logging_setup import configure_logging, resolve_level

app = typer.Typer(
    name="fintrack",
    help="Personal finance tracker - record transactions and watch your budget",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show informational log messages"),
) -> None:
    """Personal finance tracker - record transactions and watch your budget."""
    if verbose:
        configure_logging(logging.INFO)
        return
    try:
        configured = get_app_config().log_level
    except ValueError:
        # Commands that need the config report the error themselves
        configured = None
    configure_logging(resolve_level(configured))


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize fintrack configuration and data store."""
    init_command(force)


@app.command()
def add(
    description: str = typer.Option(None, "--description", "-d", help="What the transaction was for"),
    amount: str = typer.Option(None, "--amount", "-a", help="Amount (negative for expenses, positive for income)"),
    category: str = typer.Option(None, "--category", "-c", help="Category name"),
    date: str = typer.Option(None, "--date", help="Date (YYYY-MM-DD, default: today)"),
) -> None:
    """Add a transaction. Prompts for any field not given."""
    add_command(description, amount, category, date)


@app.command()
def edit(
    txn_id: str = typer.Argument(..., metavar="ID", help="Transaction ID (from 'fintrack list')"),
    description: str = typer.Option(None, "--description", "-d", help="New description"),
    amount: str = typer.Option(None, "--amount", "-a", help="New amount"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    date: str = typer.Option(None, "--date", help="New date (YYYY-MM-DD)"),
) -> None:
    """Edit a transaction. Prompts for every field when no options are given."""
    edit_command(txn_id, description, amount, category, date)


@app.command()
def delete(
    txn_id: str = typer.Argument(..., metavar="ID", help="Transaction ID (from 'fintrack list')"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a transaction."""
    delete_command(txn_id, yes)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(None, min=0, help="Show only the most recently added transactions"),
) -> None:
    """List your transactions."""
    list_command(limit)


@app.command()
def stats(
    breakdown: bool = typer.Option(True, help="Show totals by category"),
) -> None:
    """Show your dashboard statistics."""
    stats_command(breakdown)


@app.command()
def budget(
    set_cap: str = typer.Option(None, "--set", help="Set the budget cap"),
    clear: bool = typer.Option(False, "--clear", help="Remove the budget cap"),
) -> None:
    """Show or change your budget cap."""
    budget_command(set_cap, clear)


@app.command()
def rates(
    assignments: list[str] = typer.Option(None, "--set", help="Set a rate as CODE=RATE (repeatable)"),
) -> None:
    """Show or change currency exchange rates."""
    rates_command(assignments)


@app.command(name="export")
def export(
    output: str = typer.Argument(..., help="Output JSON file"),
) -> None:
    """Export transactions and settings to JSON."""
    export_command(output)


@app.command(name="import")
def import_(
    input_path: str = typer.Argument(..., metavar="PATH", help="JSON file from 'fintrack export'"),
    with_settings: bool = typer.Option(False, "--with-settings", help="Also import budget cap and rates"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace all transactions with those from an export file."""
    import_command(input_path, with_settings, yes)


if __name__ == "__main__":
    app()
