"""Expenses: create, list, update, delete, export."""
import csv
import io
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from settleup.database import get_db
from settleup.models import User, Group, Expense
from settleup.schemas import ExpenseCreate, ExpenseUpdate, ExpenseResponse, EXPENSE_CATEGORIES
from settleup.auth import get_current_user
from settleup.routers.groups import get_member_group

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _expense_response(exp: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=exp.id,
        group_id=exp.group_id,
        amount=exp.amount,
        description=exp.description,
        category=exp.category,
        paid_by=exp.payer.username,
        split_between=[p.username for p in exp.participants],
        created_at=exp.created_at,
    )


def _resolve_payer(group: Group, username: str) -> User:
    payer = next((m for m in group.members if m.username == username), None)
    if not payer:
        raise HTTPException(status_code=400, detail="Payer must be a group member")
    return payer


def _resolve_split(group: Group, usernames: Optional[list[str]]) -> list[User]:
    if usernames is None:
        return list(group.members)
    if not usernames:
        raise HTTPException(status_code=400, detail="At least one participant required")
    wanted = set(usernames)
    participants = [m for m in group.members if m.username in wanted]
    if len(participants) != len(wanted):
        raise HTTPException(status_code=400, detail="All participants must be group members")
    return participants


def _check_amount(amount: float) -> None:
    if not math.isfinite(amount) or amount <= 0:
        raise HTTPException(status_code=400, detail="Amount must be a positive number")


def _check_category(category: Optional[str]) -> None:
    if category and category not in EXPENSE_CATEGORIES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid category. Must be one of: {', '.join(EXPENSE_CATEGORIES)}",
        )


@router.post("", response_model=ExpenseResponse)
def create_expense(
    data: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, data.group_id, current_user)
    payer = _resolve_payer(group, data.paid_by)
    participants = _resolve_split(group, data.split_between)
    _check_amount(data.amount)
    _check_category(data.category)

    expense = Expense(
        group_id=data.group_id,
        payer_id=payer.id,
        amount=data.amount,
        description=data.description,
        category=data.category,
    )
    expense.participants = participants
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Expense %d (%.2f) added to group %d", expense.id, expense.amount, expense.group_id)
    return _expense_response(expense)


@router.get("", response_model=list[ExpenseResponse])
def list_expenses(
    group_id: int,
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_member_group(db, group_id, current_user)
    q = db.query(Expense).filter(Expense.group_id == group_id)

    if search:
        q = q.filter(Expense.description.ilike(f"%{search}%"))
    if category:
        q = q.filter(Expense.category == category)

    expenses = q.order_by(Expense.id.desc()).offset(offset).limit(limit).all()
    return [_expense_response(e) for e in expenses]


@router.get("/export")
def export_expenses(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_member_group(db, group_id, current_user)
    expenses = (
        db.query(Expense)
        .filter(Expense.group_id == group_id)
        .order_by(Expense.id.desc())
        .all()
    )

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Date", "Description", "Category", "Amount", "Paid By", "Split Between"])
    for e in expenses:
        date_str = e.created_at.strftime("%Y-%m-%d %H:%M") if e.created_at else ""
        writer.writerow([
            date_str,
            e.description or "",
            e.category or "",
            f"{e.amount:.2f}",
            e.payer.display_name,
            ", ".join(p.display_name for p in e.participants),
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=expenses-group-{group_id}.csv"},
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    get_member_group(db, expense.group_id, current_user)
    return _expense_response(expense)


@router.patch("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    group = get_member_group(db, expense.group_id, current_user)

    if data.amount is not None:
        _check_amount(data.amount)
        expense.amount = data.amount
    if data.description is not None:
        expense.description = data.description
    if data.category is not None:
        _check_category(data.category)
        expense.category = data.category or None
    if data.paid_by is not None:
        expense.payer_id = _resolve_payer(group, data.paid_by).id
    if data.split_between is not None:
        expense.participants = _resolve_split(group, data.split_between)

    db.commit()
    db.refresh(expense)
    return _expense_response(expense)


@router.delete("/{expense_id}", status_code=204)
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    group = get_member_group(db, expense.group_id, current_user)
    db.delete(expense)
    db.commit()
    logger.info("Expense %d deleted from group %d", expense_id, group.id)
