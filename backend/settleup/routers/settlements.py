"""Settlements: who owes whom for a group, and a stateless compute endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from settleup.database import get_db
from settleup.models import User
from settleup.schemas import (
    SettlementSummary, SettlementRequest, SettlementPlan, BalanceEntry, MemberInfo,
    Transfer, DashboardStats,
)
from settleup.auth import get_current_user
from settleup.routers.groups import get_member_group
from settleup.services.group_sources import resolve_participants, resolve_expenses
from settleup.services.settlement import settle

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.get("/group/{group_id}", response_model=SettlementSummary)
def get_settlements(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, group_id, current_user)
    participants = resolve_participants(group)
    plan = settle(participants, resolve_expenses(db, group_id))

    names = {p.id: p.name for p in participants}
    return SettlementSummary(
        group_id=group_id,
        members=[MemberInfo(id=m.id, username=m.username, name=m.name) for m in group.members],
        balances=[
            BalanceEntry(participant_id=pid, name=names[pid], balance=round(bal, 2))
            for pid, bal in plan.balances.items()
        ],
        transfers=[
            Transfer(from_id=t.from_id, to_id=t.to_id, amount=round(t.amount, 2))
            for t in plan.transfers
        ],
    )


@router.post("/compute", response_model=SettlementPlan)
def compute(data: SettlementRequest):
    return settle(data.participants, data.expenses, strict=data.strict)


@router.get("/dashboard/{group_id}", response_model=DashboardStats)
def get_dashboard(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, group_id, current_user)
    expenses = group.expenses

    total = sum(e.amount for e in expenses)
    cat_totals: dict[str, float] = {}
    member_paid: dict[int, float] = {m.id: 0.0 for m in group.members}

    for e in expenses:
        cat = e.category or "other"
        cat_totals[cat] = round(cat_totals.get(cat, 0) + e.amount, 2)
        member_paid[e.payer_id] += e.amount

    plan = settle(resolve_participants(group), resolve_expenses(db, group_id))
    member_map = {m.id: m for m in group.members}
    member_spending = [
        {
            "user_id": uid,
            "username": member_map[uid].username,
            "name": member_map[uid].display_name,
            "paid": round(paid, 2),
        }
        for uid, paid in member_paid.items()
    ]

    return DashboardStats(
        total_expenses=round(total, 2),
        expense_count=len(expenses),
        category_totals=cat_totals,
        member_spending=member_spending,
        your_balance=round(plan.balances.get(current_user.username, 0.0), 2),
    )
