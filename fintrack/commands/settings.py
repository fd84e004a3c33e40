"""Settings commands for the budget cap and currency rates."""

import sys

from rich.table import Table

from fintrack.commands.common import console, open_store
from fintrack.commands.report import format_budget_status
from fintrack.domain.analytics import budget_status, total_amount
from fintrack.domain.parsing import parse_amount
from fintrack.domain.validation import validate_budget_cap
from fintrack.store import StoreError


def parse_rate_assignment(assignment: str) -> tuple[str, str]:
    """Split a CODE=RATE assignment.

    Args:
        assignment: Text such as "EUR=0.85".

    Returns:
        Tuple of (upper-cased code, raw rate).

    Raises:
        ValueError: If the text is not of the form CODE=RATE.
    """
    code, sep, rate = assignment.partition("=")
    code = code.strip().upper()
    if not sep or not code or not rate.strip():
        raise ValueError(f"Expected CODE=RATE, got '{assignment}'")
    return code, rate.strip()


def budget_command(set_cap: str | None = None, clear: bool = False) -> None:
    """Show, set or clear the budget cap."""
    if set_cap is not None and clear:
        console.print("[red]Use either --set or --clear, not both[/red]")
        sys.exit(1)

    store = open_store()

    try:
        if set_cap is not None:
            error = validate_budget_cap(set_cap)
            if error:
                console.print(f"[red]{error}[/red]")
                sys.exit(1)
            store.update_settings({"budget_cap": set_cap})
            console.print("[green]✓[/green] Budget cap updated")
        elif clear:
            store.update_settings({"budget_cap": None})
            console.print("[green]✓[/green] Budget cap cleared")
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)

    settings = store.get_settings()
    total = total_amount(store.get_all_transactions())
    cap_display = "[dim]-[/dim]" if settings.budget_cap is None else f"${settings.budget_cap:,.2f}"
    console.print(f"Budget cap: {cap_display}")
    console.print(f"Status: {format_budget_status(budget_status(settings.budget_cap, total))}")


def rates_command(assignments: list[str] | None = None) -> None:
    """Show or update currency exchange rates."""
    store = open_store()

    if assignments:
        rates = dict(store.get_settings().currency_rates)
        for assignment in assignments:
            try:
                code, raw_rate = parse_rate_assignment(assignment)
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
                sys.exit(1)
            parsed = parse_amount(raw_rate)
            if parsed.value is None or parsed.value <= 0:
                console.print(f"[red]Invalid rate for {code}: {raw_rate}[/red]")
                sys.exit(1)
            rates[code] = parsed.value

        try:
            store.update_settings({"currency_rates": rates})
        except StoreError as e:
            console.print(f"[red]Error: {e}[/red]", style="bold")
            sys.exit(1)
        console.print("[green]✓[/green] Currency rates updated")

    settings = store.get_settings()
    if not settings.currency_rates:
        console.print("[yellow]No currency rates configured[/yellow]")
        return

    table = Table(title="Currency rates")
    table.add_column("Currency", style="cyan")
    table.add_column("Rate", justify="right")
    for code, rate in sorted(settings.currency_rates.items()):
        table.add_row(code, str(rate))
    console.print(table)
