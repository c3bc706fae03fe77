"""fx-settle - Settle shared multi-currency expenses with a few transfers."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .exceptions import FxSettleError, MissingRateError, SplitRatioError
from .models import Balance, Expense, FxRate, Ledger, Split, Transfer
from .settle import compute_balances, minimal_transfers, resolve_rate
from .settle.service import SettlementService

__all__ = [
    "Settings",
    "load_settings",
    "FxSettleError",
    "MissingRateError",
    "SplitRatioError",
    "Balance",
    "Expense",
    "FxRate",
    "Ledger",
    "Split",
    "Transfer",
    "compute_balances",
    "minimal_transfers",
    "resolve_rate",
    "SettlementService",
]
