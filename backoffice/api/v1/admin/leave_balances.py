"""
Leave balance configuration endpoints (admin only)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, require_admin
from backoffice.models.profile import Profile
from backoffice.schemas.leave_balance import LeaveBalanceOut, LeaveBalanceSave
from backoffice.services.leave_balance_service import list_leave_balances, upsert_leave_balance

router = APIRouter()


@router.get("/{user_id}", response_model=List[LeaveBalanceOut])
async def get_leave_balances(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    return list_leave_balances(db, user_id)


@router.put("/{user_id}", response_model=LeaveBalanceOut)
async def save_leave_balance(
    user_id: int,
    balance_data: LeaveBalanceSave,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Set the balance for one year; an existing (user, year) row is overwritten"""
    return upsert_leave_balance(db, user_id, balance_data, current_user.id)
