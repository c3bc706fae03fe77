"""Service layer that composes rate lookup, balances and transfer planning.

The engine functions are pure; this layer adds ledger loading, currency
defaults, invariant verification and logging around them.
"""

import logging
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from ..config import Settings
from ..exceptions import LedgerError
from ..models import Expense, FxRate, Ledger, SettlementResult
from .balances import compute_balances
from .rates import resolve_rate
from .transfers import SETTLED_THRESHOLD_MINOR, apply_transfers, minimal_transfers

logger = logging.getLogger(__name__)


class SettlementService:
    """Service for settling expense ledgers."""

    def __init__(self, settings: Settings):
        """Initialize the settlement service."""
        self.settings = settings

    def load_ledger(self, path: Path) -> Ledger:
        """
        Load a ledger from a JSON file.

        Args:
            path: Path to the ledger file

        Returns:
            Parsed ledger

        Raises:
            LedgerError: If the file is missing or its contents are invalid
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise LedgerError(f"Cannot read ledger {path}: {e}") from e

        try:
            ledger = Ledger.model_validate_json(raw)
        except ValidationError as e:
            raise LedgerError(f"Invalid ledger {path}:\n{e}") from e

        logger.info(
            f"Loaded ledger {path.name}: {len(ledger.expenses)} expenses, "
            f"{len(ledger.rates)} rates"
        )
        return ledger

    def resolve_currency(self, *candidates: str | None) -> str:
        """Return the first currency given, falling back to the configured one."""
        for currency in candidates:
            if currency:
                return currency
        return self.settings.settlement_currency

    def find_rate(
        self, rates: list[FxRate], from_ccy: str, to_ccy: str, as_of: date
    ) -> float:
        """Resolve a single rate from a table."""
        rate = resolve_rate(rates, from_ccy, to_ccy, as_of)
        logger.info(f"Rate {from_ccy}/{to_ccy} @ {as_of}: {rate}")
        return rate

    def settle(
        self,
        expenses: list[Expense],
        rates: list[FxRate],
        settlement_currency: str | None = None,
    ) -> SettlementResult:
        """
        Compute balances and the transfers that settle them.

        Either every balance is computed or an error is raised; there is
        no partial result.

        Args:
            expenses: The ledger's expenses
            rates: Rate table covering every expense date
            settlement_currency: Overrides the configured currency

        Returns:
            Balances and transfers

        Raises:
            MissingRateError: If a rate can't be resolved
            SplitRatioError: If an expense's split ratios are unbalanced
        """
        currency = self.resolve_currency(settlement_currency)

        balances = compute_balances(expenses, currency, rates)
        transfers = minimal_transfers(balances)

        drift = sum(b.amount_minor for b in balances)
        if drift:
            logger.info(f"Per-split rounding drift: {drift} minor units")

        remaining = apply_transfers(balances, transfers)
        for participant_id, amount in remaining.items():
            if abs(amount) > SETTLED_THRESHOLD_MINOR:
                logger.warning(
                    f"{participant_id} still has {amount} {currency} minor units "
                    f"after transfers"
                )

        logger.info(
            f"Settled {len(expenses)} expenses in {currency}: "
            f"{len(balances)} participants, {len(transfers)} transfers"
        )

        return SettlementResult(
            settlement_currency=currency, balances=balances, transfers=transfers
        )

    def settle_ledger(
        self, ledger: Ledger, settlement_currency: str | None = None
    ) -> SettlementResult:
        """Settle a loaded ledger; an explicit currency beats the ledger's own."""
        currency = self.resolve_currency(
            settlement_currency, ledger.settlement_currency
        )
        return self.settle(ledger.expenses, ledger.rates, currency)
