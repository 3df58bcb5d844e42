"""Groups: create, list, get, update, delete, join by code, add/remove members."""
import logging
import secrets
import string

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from settleup.database import get_db
from settleup.models import User, Group, Expense
from settleup.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupAddMember, GroupJoin, MemberInfo,
)
from settleup.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


def _generate_code(db: Session) -> str:
    while True:
        code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        if not db.query(Group).filter(Group.code == code).first():
            return code


def _member_info(user: User) -> MemberInfo:
    return MemberInfo(id=user.id, username=user.username, name=user.name)


def _group_response(group: Group) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        code=group.code,
        created_at=group.created_at,
        member_ids=[u.id for u in group.members],
        members=[_member_info(u) for u in group.members],
    )


def get_member_group(db: Session, group_id: int, user: User) -> Group:
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    if user not in group.members:
        raise HTTPException(status_code=403, detail="Not a member of this group")
    return group


@router.get("", response_model=list[GroupResponse])
def list_groups(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    groups = (
        db.query(Group)
        .filter(Group.members.any(User.id == current_user.id))
        .order_by(Group.id)
        .all()
    )
    return [_group_response(g) for g in groups]


@router.post("", response_model=GroupResponse)
def create_group(
    data: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    members = [current_user]
    if data.member_usernames:
        others = db.query(User).filter(User.username.in_(data.member_usernames)).all()
        if len(others) != len(set(data.member_usernames)):
            raise HTTPException(status_code=404, detail="Unknown username in member list")
        for u in others:
            if u not in members:
                members.append(u)
    group = Group(
        name=data.name,
        description=data.description,
        code=_generate_code(db),
        created_by_id=current_user.id,
    )
    group.members = members
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Group %d created by %s", group.id, current_user.username)
    return _group_response(group)


@router.post("/join", response_model=GroupResponse)
def join_group(
    data: GroupJoin,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = db.query(Group).filter(Group.code == data.code.strip().upper()).first()
    if not group:
        raise HTTPException(status_code=404, detail="No group found with that code")
    if current_user in group.members:
        raise HTTPException(status_code=400, detail="Already a member of this group")
    group.members.append(current_user)
    db.commit()
    db.refresh(group)
    logger.info("%s joined group %d", current_user.username, group.id)
    return _group_response(group)


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _group_response(get_member_group(db, group_id, current_user))


@router.patch("/{group_id}", response_model=GroupResponse)
def update_group(
    group_id: int,
    data: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, group_id, current_user)
    if data.name is not None:
        group.name = data.name
    if data.description is not None:
        group.description = data.description
    db.commit()
    db.refresh(group)
    return _group_response(group)


@router.delete("/{group_id}", status_code=204)
def delete_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, group_id, current_user)
    db.delete(group)
    db.commit()
    logger.info("Group %d deleted by %s", group_id, current_user.username)


@router.post("/{group_id}/members", response_model=GroupResponse)
def add_group_member(
    group_id: int,
    data: GroupAddMember,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, group_id, current_user)
    user = db.query(User).filter(User.username == data.username).first()
    if not user:
        raise HTTPException(status_code=404, detail="No user found with that username")
    if user in group.members:
        raise HTTPException(status_code=400, detail="User already in group")
    group.members.append(user)
    db.commit()
    db.refresh(group)
    return _group_response(group)


@router.delete("/{group_id}/members/{user_id}", response_model=GroupResponse)
def remove_group_member(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_member_group(db, group_id, current_user)
    user = next((m for m in group.members if m.id == user_id), None)
    if not user:
        raise HTTPException(status_code=404, detail="User not in this group")
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot remove yourself")
    # Expenses must only ever reference current members, or balances stop adding up.
    involved = (
        db.query(Expense)
        .filter(Expense.group_id == group_id)
        .filter((Expense.payer_id == user.id) | Expense.participants.any(User.id == user.id))
        .first()
    )
    if involved:
        raise HTTPException(status_code=400, detail="Member still has expenses in this group")
    group.members.remove(user)
    db.commit()
    db.refresh(group)
    return _group_response(group)
