"""Turn net balances into a short list of transfers so everyone is settled (who owes whom)."""
import logging
from typing import Mapping, Sequence

from settleup.schemas import Transfer

logger = logging.getLogger(__name__)

# Differences at or below one cent count as settled.
EPSILON = 0.01


def compute_settlements(balances: Mapping[str, float]) -> list[Transfer]:
    """
    balances: participant id -> net balance (positive = is owed money, negative = owes money).

    Greedy matching of the largest debt against the largest credit. Equal amounts are
    ordered by participant id so the same balances always give the same transfers.
    Produces at most len(debtors) + len(creditors) - 1 transfers; this is not always
    the global minimum.
    """
    debtors = sorted(
        ((pid, bal) for pid, bal in balances.items() if bal < -EPSILON),
        key=lambda x: (x[1], x[0]),
    )
    creditors = sorted(
        ((pid, bal) for pid, bal in balances.items() if bal > EPSILON),
        key=lambda x: (-x[1], x[0]),
    )

    out: list[Transfer] = []
    i, j = 0, 0
    remaining_debt = -debtors[0][1] if debtors else 0.0
    remaining_credit = creditors[0][1] if creditors else 0.0
    while i < len(debtors) and j < len(creditors):
        amount = min(remaining_debt, remaining_credit)
        if amount > EPSILON:
            out.append(Transfer(from_id=debtors[i][0], to_id=creditors[j][0], amount=amount))
        remaining_debt -= amount
        remaining_credit -= amount
        if remaining_debt <= EPSILON:
            i += 1
            if i < len(debtors):
                remaining_debt = -debtors[i][1]
        if remaining_credit <= EPSILON:
            j += 1
            if j < len(creditors):
                remaining_credit = creditors[j][1]

    logger.debug(
        "Settled %d debtors against %d creditors with %d transfers",
        len(debtors), len(creditors), len(out),
    )
    return out


def apply_transfers(balances: Mapping[str, float], transfers: Sequence[Transfer]) -> dict[str, float]:
    """Return a copy of balances after every transfer has been paid."""
    after = dict(balances)
    for t in transfers:
        after[t.from_id] = after.get(t.from_id, 0.0) + t.amount
        after[t.to_id] = after.get(t.to_id, 0.0) - t.amount
    return after
