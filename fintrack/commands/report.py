"""List and stats commands for viewing transaction data."""

from rich.table import Table

from fintrack.commands.common import console, format_amount, open_store
from fintrack.domain.analytics import BudgetStatus, category_totals, compute_dashboard


def format_budget_status(status: BudgetStatus) -> str:
    """Format budget status with color.

    Args:
        status: Budget status to display.

    Returns:
        Colored string for budget display.
    """
    if status.state == "not_set" or status.amount is None:
        return "[dim]Not set[/dim]"
    if status.state == "over":
        return f"[red]${status.amount:,.2f} over![/red]"
    return f"[green]${status.amount:,.2f} remaining[/green]"


def list_command(limit: int | None = None) -> None:
    """List transactions in the order they were added."""
    store = open_store()
    transactions = store.get_all_transactions()

    if not transactions:
        console.print('[yellow]No transactions yet. Run "fintrack add" to get started![/yellow]')
        return

    shown = transactions if limit is None else transactions[max(len(transactions) - limit, 0) :]
    table = Table(title=f"Transactions (showing {len(shown)} of {len(transactions)})")
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for txn in shown:
        table.add_row(txn.id, txn.date, txn.description, txn.category, format_amount(txn.amount))

    console.print(table)


def stats_command(breakdown: bool = True) -> None:
    """Show dashboard statistics."""
    store = open_store()
    transactions = store.get_all_transactions()
    settings = store.get_settings()

    stats = compute_dashboard(transactions, settings.budget_cap)

    table = Table(title="Dashboard", show_header=False)
    table.add_column("Statistic", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Transactions", str(stats.total_count))
    table.add_row("Net total", format_amount(stats.total_amount))
    table.add_row("Top category", stats.top_category)
    table.add_row(
        "Top category total",
        format_amount(stats.top_category_amount) if stats.total_count else "[dim]-[/dim]",
    )
    table.add_row("Last 7 days", format_amount(stats.last_7_days))
    table.add_row("Budget", format_budget_status(stats.budget))
    console.print(table)

    if breakdown and transactions:
        console.print("\n[bold]By category[/bold]")
        for category, amount in category_totals(transactions).items():
            console.print(f"  {category:20} {format_amount(amount):>24}")
