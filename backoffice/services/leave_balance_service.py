"""
Leave balance service
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from backoffice.core.exceptions import NotFound
from backoffice.models.leave_balance import LeaveBalance
from backoffice.models.profile import Profile
from backoffice.schemas.leave_balance import LeaveBalanceSave
from backoffice.services.audit_service import log_audit


def get_leave_balance(db: Session, user_id: int, year: int) -> Optional[LeaveBalance]:
    return (
        db.query(LeaveBalance)
        .filter(LeaveBalance.user_id == user_id, LeaveBalance.year == year)
        .first()
    )


def list_leave_balances(db: Session, user_id: int) -> List[LeaveBalance]:
    return (
        db.query(LeaveBalance)
        .filter(LeaveBalance.user_id == user_id)
        .order_by(LeaveBalance.year.desc())
        .all()
    )


def upsert_leave_balance(
    db: Session,
    user_id: int,
    balance_data: LeaveBalanceSave,
    actor_id: int,
) -> LeaveBalance:
    """Create or overwrite the balance for (user_id, year)."""
    if not db.query(Profile.id).filter(Profile.id == user_id).first():
        raise NotFound(f"User with id {user_id} not found")

    balance = get_leave_balance(db, user_id, balance_data.year)
    action = "UPDATE"
    if balance is None:
        balance = LeaveBalance(user_id=user_id, year=balance_data.year)
        db.add(balance)
        action = "CREATE"

    balance.vacation_days = balance_data.vacation_days
    balance.sick_days = balance_data.sick_days
    balance.personal_days = balance_data.personal_days
    db.commit()
    db.refresh(balance)

    log_audit(
        db=db,
        actor_id=actor_id,
        action=action,
        entity_type="leave_balance",
        entity_id=balance.id,
        meta=balance_data,
    )
    return balance
