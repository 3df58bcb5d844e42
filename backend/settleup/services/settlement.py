"""Participants and expenses in, balances and transfers out."""
from typing import Sequence

from settleup.schemas import Expense, Participant, SettlementPlan
from settleup.services.balance_ledger import compute_balances
from settleup.services.settlement_calculator import compute_settlements
from settleup.services.validation import validate_settlement_input


def settle(
    participants: Sequence[Participant],
    expenses: Sequence[Expense],
    strict: bool = True,
) -> SettlementPlan:
    """
    Compute balances and the transfers that clear them.

    With strict=True the input is validated first and ValidationError is raised for
    anything that would break conservation of money. With strict=False unknown payers
    and unattributable expenses are tolerated the way compute_balances tolerates them.
    """
    if strict:
        validate_settlement_input(participants, expenses)
    balances = compute_balances(participants, expenses)
    return SettlementPlan(balances=balances, transfers=compute_settlements(balances))
