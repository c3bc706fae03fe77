"""MCP server for fx-settle — exposes ledger settlement as assistant tools."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .exceptions import FxSettleError
from .models import Ledger
from .money import format_money
from .settle.service import SettlementService

logger = logging.getLogger(__name__)

mcp_app = FastMCP("fx-settle")

# ---------------------------------------------------------------------------
# Session state — one MCP server process = one conversation
# ---------------------------------------------------------------------------

WORKFLOW_INSTRUCTIONS = """\
You are helping a group settle shared expenses. Follow this workflow:

1. LOAD: Call load_ledger with the path to the group's JSON ledger.
   Summarize how many expenses and rates it holds.

2. BALANCES: Call show_balances to see each participant's net position.
   Positive = the group owes them, negative = they owe the group.
   If a rate is missing, tell the user exactly which currency pair and date
   must be added to the rate table. Do not guess a rate.

3. TRANSFERS: Call plan_transfers and present who pays whom.

Use lookup_rate to answer questions about a specific conversion.\
"""


@dataclass
class SessionState:
    """Holds state between MCP tool calls within a single conversation."""

    service: SettlementService | None = None
    ledger: Ledger | None = None


_state = SessionState()


def _ensure_service() -> SettlementService:
    """Lazily initialize the SettlementService (loads .env config)."""
    if _state.service is None:
        _state.service = SettlementService(load_settings())
    return _state.service


# ---------------------------------------------------------------------------
# MCP Tools
# ---------------------------------------------------------------------------


@mcp_app.tool()
def load_ledger(path: str) -> str:
    """Load a JSON ledger file of expenses and exchange rates.

    Args:
        path: Path to the ledger file.
    """
    try:
        service = _ensure_service()
        ledger = service.load_ledger(Path(path))
        _state.ledger = ledger

        participants = set()
        for exp in ledger.expenses:
            participants.add(exp.payer_id)
            participants.update(s.participant_id for s in exp.splits)
        currencies = sorted({exp.currency for exp in ledger.expenses})

        return (
            f"Loaded {len(ledger.expenses)} expenses and {len(ledger.rates)} rates.\n"
            f"Participants: {', '.join(sorted(participants)) or 'none'}\n"
            f"Expense currencies: {', '.join(currencies) or 'none'}\n"
            f"Settlement currency: "
            f"{service.resolve_currency(ledger.settlement_currency)}"
        )
    except FxSettleError as e:
        return f"Error: {e}"


@mcp_app.tool()
def show_balances(currency: str | None = None) -> str:
    """Show each participant's net balance for the loaded ledger.

    Args:
        currency: Settlement currency; defaults to the ledger's or configured one.
    """
    try:
        service = _ensure_service()
        if _state.ledger is None:
            return "Error: No ledger loaded. Call load_ledger first."

        result = service.settle_ledger(_state.ledger, currency)
        factor = service.settings.minor_factor

        lines = [f"Balances ({result.settlement_currency}):"]
        for b in result.balances:
            amount = format_money(
                b.amount_minor, result.settlement_currency, factor, use_color=False
            )
            lines.append(f"  - {b.participant_id}: {amount.strip()}")
        return "\n".join(lines)
    except FxSettleError as e:
        return f"Error: {e}"


@mcp_app.tool()
def plan_transfers(currency: str | None = None) -> str:
    """Plan the transfers that settle the loaded ledger.

    Args:
        currency: Settlement currency; defaults to the ledger's or configured one.
    """
    try:
        service = _ensure_service()
        if _state.ledger is None:
            return "Error: No ledger loaded. Call load_ledger first."

        result = service.settle_ledger(_state.ledger, currency)
        if not result.transfers:
            return "Everyone is settled up. No transfers needed."

        factor = service.settings.minor_factor
        lines = [f"Transfers ({len(result.transfers)}):"]
        for t in result.transfers:
            amount = format_money(
                t.amount_minor, result.settlement_currency, factor, use_color=False
            )
            lines.append(f"  - {t.from_id} pays {t.to_id} {amount.strip()}")
        return "\n".join(lines)
    except FxSettleError as e:
        return f"Error: {e}"


@mcp_app.tool()
def lookup_rate(from_ccy: str, to_ccy: str, as_of: str) -> str:
    """Look up a rate in the loaded ledger's rate table.

    Args:
        from_ccy: Currency to convert from.
        to_ccy: Currency to convert to.
        as_of: Date in YYYY-MM-DD format.
    """
    try:
        service = _ensure_service()
        if _state.ledger is None:
            return "Error: No ledger loaded. Call load_ledger first."

        try:
            lookup_date = date.fromisoformat(as_of)
        except ValueError:
            return f"Error: Invalid date '{as_of}'. Use YYYY-MM-DD."

        value = service.find_rate(_state.ledger.rates, from_ccy, to_ccy, lookup_date)
        return f"1 {from_ccy} = {value:.6f} {to_ccy} on {as_of}"
    except FxSettleError as e:
        return f"Error: {e}"


# ---------------------------------------------------------------------------
# MCP Prompt
# ---------------------------------------------------------------------------


@mcp_app.prompt()
def settle_workflow() -> str:
    """Orchestration instructions for settling a group's expenses."""
    return WORKFLOW_INSTRUCTIONS


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server():
    """Start the MCP server (stdio transport)."""
    mcp_app.run(transport="stdio")
