"""CLI commands for settling expense ledgers."""

import logging
import sys
from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config import load_settings
from ..exceptions import FxSettleError
from ..models import SettlementResult
from ..money import format_money
from .service import SettlementService
from .transfers import SETTLED_THRESHOLD_MINOR, apply_transfers

app = typer.Typer(
    name="settle",
    help="Compute balances and settlement transfers from a ledger file",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def display_result(result: SettlementResult, minor_factor: int = 100):
    """Display balances and transfers in table format."""
    currency = result.settlement_currency

    console.print(f"\n[bold]Balances ({currency}):[/bold]")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Participant", style="cyan")
    table.add_column("Balance", justify="right", width=20)
    table.add_column("Position", style="dim")

    for balance in sorted(result.balances, key=lambda b: -b.amount_minor):
        if balance.amount_minor > SETTLED_THRESHOLD_MINOR:
            position = "is owed"
        elif balance.amount_minor < -SETTLED_THRESHOLD_MINOR:
            position = "owes"
        else:
            position = "settled"
        table.add_row(
            balance.participant_id,
            format_money(balance.amount_minor, currency, minor_factor),
            position,
        )
    console.print(table)

    if not result.transfers:
        console.print("\n[green]Nothing to settle.[/green]")
        return

    console.print("\n[bold]Transfers:[/bold]")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right", width=20)
    for transfer in result.transfers:
        table.add_row(
            transfer.from_id,
            transfer.to_id,
            format_money(transfer.amount_minor, currency, minor_factor),
        )
    console.print(table)

    # Verification
    remaining = apply_transfers(result.balances, result.transfers)
    unsettled = {
        pid: amt
        for pid, amt in remaining.items()
        if abs(amt) > SETTLED_THRESHOLD_MINOR
    }
    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  Participants: {len(result.balances)}")
    console.print(f"  Transfers: {len(result.transfers)}")
    if not unsettled:
        console.print("  [green]✓ All balances settle within rounding[/green]")
    else:
        for pid, amt in unsettled.items():
            console.print(
                f"  [red]✗ {pid} left at {format_money(amt, currency, minor_factor)}"
                f"[/red]"
            )


@app.command()
def run(
    ledger_path: Path = typer.Argument(..., help="Path to a JSON ledger file"),
    currency: str | None = typer.Option(
        None, "--currency", "-c", help="Settlement currency (overrides ledger)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Settle a ledger file.

    Converts every expense into the settlement currency, computes each
    participant's net balance, and plans the transfers that zero them.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)

        ledger = service.load_ledger(ledger_path)
        result = service.settle_ledger(ledger, currency)

        if as_json:
            typer.echo(result.model_dump_json(indent=2, by_alias=True))
            return

        display_result(result, settings.minor_factor)

    except FxSettleError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def rate(
    ledger_path: Path = typer.Argument(..., help="Path to a JSON ledger file"),
    from_ccy: str = typer.Argument(..., help="Currency to convert from"),
    to_ccy: str = typer.Argument(..., help="Currency to convert to"),
    as_of: str = typer.Argument(..., help="Date (YYYY-MM-DD)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Look up the rate between two currencies in a ledger's rate table."""
    setup_logging(verbose)

    try:
        lookup_date = date.fromisoformat(as_of)
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] Invalid date '{as_of}'")
        sys.exit(1)

    try:
        service = SettlementService(load_settings())
        ledger = service.load_ledger(ledger_path)
        value = service.find_rate(ledger.rates, from_ccy, to_ccy, lookup_date)
        console.print(f"1 {from_ccy} = [bold]{value:.6f}[/bold] {to_ccy} on {as_of}")
    except FxSettleError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
