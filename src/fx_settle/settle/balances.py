"""Net balance computation for a multi-currency expense ledger."""

import logging
from datetime import UTC, date

from ..exceptions import SplitRatioError
from ..models import Balance, Expense, FxRate
from ..money import scale
from .rates import resolve_rate

logger = logging.getLogger(__name__)

SHARE_RATIO_TOLERANCE = 1e-6


def expense_date(expense: Expense) -> date:
    """Calendar date (UTC) of an expense, used as the rate lookup date."""
    ts = expense.timestamp
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC)
    return ts.date()


def validate_splits(expense: Expense, position: int) -> None:
    """
    Check that an expense's share ratios sum to 1.0 within tolerance.

    Raises:
        SplitRatioError: Identifying the expense by id, or by ledger
                         position when it has none
    """
    total = sum(split.share_ratio for split in expense.splits)
    if abs(total - 1.0) > SHARE_RATIO_TOLERANCE:
        ref = expense.id if expense.id is not None else f"#{position}"
        raise SplitRatioError(ref, total)


def compute_balances(
    expenses: list[Expense], settlement_currency: str, rates: list[FxRate]
) -> list[Balance]:
    """
    Compute each participant's net balance in the settlement currency.

    Steps, per expense in input order:
    1. Resolve the rate for the expense's UTC date
    2. Convert the whole amount once, rounding to a minor unit (ties up)
    3. Validate the split ratios
    4. Credit the payer with the converted amount
    5. Debit each split participant their independently rounded share

    Per-split rounding is not redistributed, so an expense's debits may
    differ from its credit by up to (splits - 1) minor units.

    Args:
        expenses: The ledger
        settlement_currency: Currency all balances are expressed in
        rates: Rate table

    Returns:
        One balance per participant, in order of first appearance

    Raises:
        MissingRateError: If any expense's rate can't be resolved
        SplitRatioError: If any expense's split ratios don't sum to 1.0
    """
    balances: dict[str, int] = {}

    for position, expense in enumerate(expenses):
        as_of = expense_date(expense)
        rate = resolve_rate(rates, expense.currency, settlement_currency, as_of)
        amount_settle = scale(expense.amount_minor, rate)

        validate_splits(expense, position)

        balances[expense.payer_id] = balances.get(expense.payer_id, 0) + amount_settle

        for split in expense.splits:
            share_minor = scale(amount_settle, split.share_ratio)
            balances[split.participant_id] = (
                balances.get(split.participant_id, 0) - share_minor
            )

        logger.debug(
            f"Expense {expense.id or position}: {expense.amount_minor} "
            f"{expense.currency} -> {amount_settle} {settlement_currency}"
        )

    return [
        Balance(participant_id=participant_id, amount_minor=amount)
        for participant_id, amount in balances.items()
    ]
