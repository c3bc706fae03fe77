"""Custom exceptions for fx-settle."""

from datetime import date


class FxSettleError(Exception):
    """Base exception for all fx-settle errors."""

    pass


class ConfigurationError(FxSettleError):
    """Raised when configuration is invalid or missing."""

    pass


class LedgerError(FxSettleError):
    """Raised when a ledger file cannot be read or parsed."""

    pass


class MissingRateError(FxSettleError):
    """Raised when no direct or inverse rate exists for a currency pair on a date."""

    def __init__(self, from_ccy: str, to_ccy: str, as_of: date):
        self.from_ccy = from_ccy
        self.to_ccy = to_ccy
        self.as_of = as_of
        super().__init__(f"Missing FX rate {from_ccy}/{to_ccy} @ {as_of.isoformat()}")


class SplitRatioError(FxSettleError):
    """Raised when an expense's share ratios don't sum to 1.0."""

    def __init__(self, expense_ref: str, total: float):
        self.expense_ref = expense_ref
        self.total = total
        super().__init__(
            f"Share ratios for expense {expense_ref} must sum to 1.0 (got {total:.6f})"
        )
