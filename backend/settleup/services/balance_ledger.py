"""Fold a list of expenses into one net balance per participant."""
import logging
from typing import Sequence

from settleup.schemas import Expense, Participant

logger = logging.getLogger(__name__)


def compute_balances(
    participants: Sequence[Participant],
    expenses: Sequence[Expense],
) -> dict[str, float]:
    """
    Returns participant id -> net balance (positive = is owed money, negative = owes money),
    with one entry per participant in input order.

    Split ids that are not participants are ignored and the share is taken over the
    remaining ones; an expense with no known split id is skipped. An unknown payer is
    not credited, so the result only sums to zero when every payer is a participant.
    """
    balances: dict[str, float] = {p.id: 0.0 for p in participants}

    for index, e in enumerate(expenses):
        # Set semantics, first-appearance order.
        valid_split = [pid for pid in dict.fromkeys(e.split_between) if pid in balances]
        if not valid_split:
            logger.debug("Skipping expense %d: no known participant in split", index)
            continue

        share = e.amount / len(valid_split)
        if e.paid_by in balances:
            balances[e.paid_by] += e.amount
        else:
            logger.warning("Expense %d: payer %r is not a participant, credit dropped", index, e.paid_by)
        for pid in valid_split:
            balances[pid] -= share

    return balances
