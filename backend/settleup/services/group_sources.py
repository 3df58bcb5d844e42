"""Load a group's participants and expenses from the store in the shape the engine takes."""
from sqlalchemy.orm import Session

from settleup import models
from settleup.schemas import Expense, Participant


def resolve_participants(group: models.Group) -> list[Participant]:
    members = sorted(group.members, key=lambda u: u.id)
    return [Participant(id=u.username, name=u.display_name) for u in members]


def resolve_expenses(db: Session, group_id: int) -> list[Expense]:
    rows = (
        db.query(models.Expense)
        .filter(models.Expense.group_id == group_id)
        .order_by(models.Expense.id)
        .all()
    )
    return [
        Expense(
            amount=e.amount,
            paid_by=e.payer.username,
            split_between=[u.username for u in e.participants],
        )
        for e in rows
    ]
