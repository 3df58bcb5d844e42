import pytest

from settleup.schemas import Expense, Participant
from settleup.services.validation import ValidationError, ValidationReason, validate_settlement_input

PARTICIPANTS = [Participant(id="u1", name="Max"), Participant(id="u2", name="Erika")]


def test_valid_input_passes():
    expenses = [Expense(amount=30, paid_by="u1", split_between=["u1", "u2", "ghost"])]
    assert validate_settlement_input(PARTICIPANTS, expenses) is None


def test_no_expenses_is_valid():
    assert validate_settlement_input(PARTICIPANTS, []) is None


def test_no_participants():
    with pytest.raises(ValidationError) as exc:
        validate_settlement_input([], [])
    assert exc.value.reason is ValidationReason.NO_PARTICIPANTS


def test_duplicate_participant():
    with pytest.raises(ValidationError) as exc:
        validate_settlement_input(PARTICIPANTS + [Participant(id="u1", name="Other Max")], [])
    assert exc.value.reason is ValidationReason.DUPLICATE_PARTICIPANT
    assert exc.value.participant_id == "u1"


@pytest.mark.parametrize("expense, reason", [
    (Expense(amount=0, paid_by="u1", split_between=["u1"]), ValidationReason.NON_POSITIVE_AMOUNT),
    (Expense(amount=-5, paid_by="u1", split_between=["u1"]), ValidationReason.NON_POSITIVE_AMOUNT),
    (Expense(amount=float("nan"), paid_by="u1", split_between=["u1"]), ValidationReason.NON_FINITE_AMOUNT),
    (Expense(amount=float("inf"), paid_by="u1", split_between=["u1"]), ValidationReason.NON_FINITE_AMOUNT),
    (Expense(amount=10, paid_by="u1", split_between=[]), ValidationReason.EMPTY_SPLIT),
    (Expense(amount=10, paid_by="u1", split_between=["ghost"]), ValidationReason.NO_VALID_SPLIT),
    (Expense(amount=10, paid_by="ghost", split_between=["u1", "u2"]), ValidationReason.UNKNOWN_PAYER),
])
def test_invalid_expense(expense, reason):
    ok = Expense(amount=10, paid_by="u2", split_between=["u1", "u2"])
    with pytest.raises(ValidationError) as exc:
        validate_settlement_input(PARTICIPANTS, [ok, expense])
    assert exc.value.reason is reason
    assert exc.value.expense_index == 1


def test_unknown_payer_reports_id():
    with pytest.raises(ValidationError) as exc:
        validate_settlement_input(PARTICIPANTS, [Expense(amount=10, paid_by="ghost", split_between=["u1"])])
    assert exc.value.participant_id == "ghost"
    assert "ghost" in str(exc.value)
