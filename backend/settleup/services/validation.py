"""Input checks run before balances are computed.

The ledger itself is lenient: it drops split ids it does not know and skips
the credit of an unknown payer. Callers that need money to be conserved run
``validate_settlement_input`` first, which rejects anything the ledger would
otherwise silently degrade.
"""
import math
from enum import Enum
from typing import Optional, Sequence

from settleup.schemas import Expense, Participant


class ValidationReason(str, Enum):
    NO_PARTICIPANTS = "no_participants"
    DUPLICATE_PARTICIPANT = "duplicate_participant"
    NON_FINITE_AMOUNT = "non_finite_amount"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    EMPTY_SPLIT = "empty_split"
    NO_VALID_SPLIT = "no_valid_split"
    UNKNOWN_PAYER = "unknown_payer"


class ValidationError(Exception):
    """Raised when participants or expenses cannot be settled as given."""

    def __init__(
        self,
        reason: ValidationReason,
        message: str,
        expense_index: Optional[int] = None,
        participant_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.expense_index = expense_index
        self.participant_id = participant_id

    def __repr__(self) -> str:
        return f"ValidationError({self.reason.value!r}, {self.message!r})"


def validate_settlement_input(
    participants: Sequence[Participant],
    expenses: Sequence[Expense],
) -> None:
    """Raise ValidationError on the first problem found, else return None."""
    if not participants:
        raise ValidationError(ValidationReason.NO_PARTICIPANTS, "At least one participant required")

    known: set[str] = set()
    for p in participants:
        if p.id in known:
            raise ValidationError(
                ValidationReason.DUPLICATE_PARTICIPANT,
                f"Duplicate participant id {p.id!r}",
                participant_id=p.id,
            )
        known.add(p.id)

    for index, e in enumerate(expenses):
        if not math.isfinite(e.amount):
            raise ValidationError(
                ValidationReason.NON_FINITE_AMOUNT,
                f"Expense {index}: amount must be a finite number",
                expense_index=index,
            )
        if e.amount <= 0:
            raise ValidationError(
                ValidationReason.NON_POSITIVE_AMOUNT,
                f"Expense {index}: amount must be positive, got {e.amount}",
                expense_index=index,
            )
        if not e.split_between:
            raise ValidationError(
                ValidationReason.EMPTY_SPLIT,
                f"Expense {index}: split must name at least one participant",
                expense_index=index,
            )
        if not any(pid in known for pid in e.split_between):
            raise ValidationError(
                ValidationReason.NO_VALID_SPLIT,
                f"Expense {index}: no split participant is a known participant",
                expense_index=index,
            )
        if e.paid_by not in known:
            raise ValidationError(
                ValidationReason.UNKNOWN_PAYER,
                f"Expense {index}: payer {e.paid_by!r} is not a participant",
                expense_index=index,
                participant_id=e.paid_by,
            )
