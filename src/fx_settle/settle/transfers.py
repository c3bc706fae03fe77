"""Greedy debt netting: turn net balances into a short list of transfers."""

from ..models import Balance, Transfer

# Residuals this small come from per-split rounding and count as settled
SETTLED_THRESHOLD_MINOR = 1


def minimal_transfers(balances: list[Balance]) -> list[Transfer]:
    """
    Plan transfers that settle every balance.

    Debtors and creditors are each sorted largest-first and walked with two
    cursors, moving min(debt, credit) at every step. This yields at most
    (debtors + creditors - 1) transfers but is not guaranteed to be the
    fewest possible.

    Balances within [-1, 1] minor units are treated as already settled.

    Args:
        balances: Net balances (positive = owed money)

    Returns:
        Transfers, each with a strictly positive amount
    """
    debtors: list[list] = []
    creditors: list[list] = []
    for balance in balances:
        if balance.amount_minor < -SETTLED_THRESHOLD_MINOR:
            debtors.append([balance.participant_id, -balance.amount_minor])
        elif balance.amount_minor > SETTLED_THRESHOLD_MINOR:
            creditors.append([balance.participant_id, balance.amount_minor])

    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amt = min(debtor[1], creditor[1])
        if amt > 0:
            transfers.append(
                Transfer(from_id=debtor[0], to_id=creditor[0], amount_minor=amt)
            )

        debtor[1] -= amt
        creditor[1] -= amt

        if debtor[1] <= SETTLED_THRESHOLD_MINOR:
            i += 1
        if creditor[1] <= SETTLED_THRESHOLD_MINOR:
            j += 1

    return transfers


def apply_transfers(
    balances: list[Balance], transfers: list[Transfer]
) -> dict[str, int]:
    """
    Apply transfers to balances and return what's left per participant.

    Paying raises the sender's balance and lowers the receiver's.
    """
    remaining = {b.participant_id: b.amount_minor for b in balances}
    for transfer in transfers:
        amount = transfer.amount_minor
        remaining[transfer.from_id] = remaining.get(transfer.from_id, 0) + amount
        remaining[transfer.to_id] = remaining.get(transfer.to_id, 0) - amount
    return remaining
