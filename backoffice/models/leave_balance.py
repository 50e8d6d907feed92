"""
Leave balance model

Yearly leave allowance configured per user by an admin.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from backoffice.db.base import Base

DEFAULT_VACATION_DAYS = 6
DEFAULT_SICK_DAYS = 30
DEFAULT_PERSONAL_DAYS = 3


class LeaveBalance(Base):
    __tablename__ = "leave_balances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    vacation_days = Column(Integer, nullable=False, default=DEFAULT_VACATION_DAYS)
    sick_days = Column(Integer, nullable=False, default=DEFAULT_SICK_DAYS)
    personal_days = Column(Integer, nullable=False, default=DEFAULT_PERSONAL_DAYS)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "year", name="uq_leave_balances_user_year"),
    )
