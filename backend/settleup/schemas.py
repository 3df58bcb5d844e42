"""Pydantic schemas for request/response and the settlement engine's value types."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# ----- User -----
class UserBase(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: EmailStr
    name: Optional[str] = None


class UserCreate(UserBase):
    password: str


class UserLogin(BaseModel):
    username: str
    password: str


class UserResponse(UserBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class MemberInfo(BaseModel):
    id: int
    username: str
    name: Optional[str] = None


# ----- Group -----
class GroupBase(BaseModel):
    name: str
    description: Optional[str] = None


class GroupCreate(GroupBase):
    member_usernames: list[str] = []


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupAddMember(BaseModel):
    username: str


class GroupJoin(BaseModel):
    code: str


class GroupResponse(GroupBase):
    id: int
    code: str
    created_at: Optional[datetime] = None
    member_ids: list[int] = []
    members: list[MemberInfo] = []

    class Config:
        from_attributes = True


# ----- Expense -----
EXPENSE_CATEGORIES = [
    "food",
    "transport",
    "housing",
    "entertainment",
    "utilities",
    "shopping",
    "health",
    "travel",
    "education",
    "other",
]


class ExpenseBase(BaseModel):
    amount: float
    description: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    group_id: int
    paid_by: str
    # None splits between every current member of the group.
    split_between: Optional[list[str]] = None
    category: Optional[str] = None


class ExpenseUpdate(BaseModel):
    amount: Optional[float] = None
    description: Optional[str] = None
    paid_by: Optional[str] = None
    split_between: Optional[list[str]] = None
    category: Optional[str] = None


class ExpenseResponse(ExpenseBase):
    id: int
    group_id: int
    paid_by: str
    split_between: list[str]
    category: Optional[str] = None
    created_at: Optional[datetime] = None


# ----- Settlement engine -----
class Participant(BaseModel):
    """A person taking part in a group. Identity is by ``id``; ``name`` is display only."""

    id: str
    name: str

    class Config:
        frozen = True


class Expense(BaseModel):
    """One expense paid by ``paid_by`` and shared equally among ``split_between``."""

    amount: float
    paid_by: str = Field(alias="paidBy")
    split_between: list[str] = Field(alias="splitBetween")

    class Config:
        frozen = True
        populate_by_name = True


class Transfer(BaseModel):
    """``from_id`` pays ``amount`` to ``to_id``."""

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: float

    class Config:
        frozen = True
        populate_by_name = True


class SettlementPlan(BaseModel):
    balances: dict[str, float]
    transfers: list[Transfer]


class SettlementRequest(BaseModel):
    participants: list[Participant]
    expenses: list[Expense] = []
    strict: bool = True


# ----- Settlement (group view) -----
class BalanceEntry(BaseModel):
    participant_id: str
    name: str
    balance: float


class SettlementSummary(BaseModel):
    group_id: int
    members: list[MemberInfo] = []
    balances: list[BalanceEntry]
    transfers: list[Transfer]


# ----- Dashboard -----
class DashboardStats(BaseModel):
    total_expenses: float
    expense_count: int
    category_totals: dict[str, float]
    member_spending: list[dict]
    your_balance: float
