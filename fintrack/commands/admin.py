"""Admin commands for init, export and import."""

import sys
from pathlib import Path

import typer

from fintrack.commands.common import console, load_config_or_exit, open_store
from fintrack.config import create_default_config, get_config_path
from fintrack.store import StoreError, init_database
from fintrack.store.codec import dump_export, load_export


def init_command(force: bool = False) -> None:
    """Initialize fintrack configuration and data store."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'fintrack init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        config = load_config_or_exit()
        console.print(f"[cyan]Initializing {config.backend} store at {config.data_path}...[/cyan]")
        if config.backend == "sqlite":
            init_database(config.data_path)
        else:
            store = open_store(config)
            store.flush()
        console.print("[green]✓[/green] Data store initialized")
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Data: {config.data_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def export_command(output: str) -> None:
    """Export transactions and settings to a JSON file."""
    store = open_store()
    output_path = Path(output).expanduser()

    transactions = store.get_all_transactions()
    try:
        output_path.write_text(dump_export(transactions, store.get_settings()), encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {len(transactions)} transactions to {output_path}")


def import_command(input_path: str, with_settings: bool = False, yes: bool = False) -> None:
    """Replace all transactions with those from an export file."""
    path = Path(input_path).expanduser()

    try:
        transactions, settings = load_export(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Could not read {path}: {e}[/red]", style="bold")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid export file: {e}[/red]", style="bold")
        sys.exit(1)

    store = open_store()
    existing = len(store.get_all_transactions())

    if existing and not yes:
        confirmed = typer.confirm(
            f"Replace {existing} existing transactions with {len(transactions)} from {path.name}?",
            default=False,
        )
        if not confirmed:
            console.print("[dim]Cancelled[/dim]")
            return

    try:
        store.set_transactions(transactions)
        if with_settings:
            store.update_settings({"budget_cap": settings.budget_cap, "currency_rates": settings.currency_rates})
    except ValueError as e:
        console.print(f"[red]Invalid export file: {e}[/red]", style="bold")
        sys.exit(1)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Imported {len(transactions)} transactions")
    if with_settings:
        console.print("[green]✓[/green] Imported settings")
