"""CLI for fx-settle."""

import typer

from .mcp_server import run_server
from .settle.cli import app as settle_app

app = typer.Typer(
    name="fx-settle",
    help="Multi-currency expense settlement",
)

app.add_typer(settle_app, name="settle", help="Settle an expense ledger")


@app.command()
def mcp():
    """Start the MCP server for assistant integration."""
    run_server()


if __name__ == "__main__":
    app()
