"""
Leave balance schemas
"""
from pydantic import BaseModel, Field, ConfigDict

from backoffice.models.leave_balance import (
    DEFAULT_PERSONAL_DAYS,
    DEFAULT_SICK_DAYS,
    DEFAULT_VACATION_DAYS,
)


class LeaveBalanceSave(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    vacation_days: int = Field(default=DEFAULT_VACATION_DAYS, ge=0, le=366)
    sick_days: int = Field(default=DEFAULT_SICK_DAYS, ge=0, le=366)
    personal_days: int = Field(default=DEFAULT_PERSONAL_DAYS, ge=0, le=366)


class LeaveBalanceOut(BaseModel):
    user_id: int
    year: int
    vacation_days: int
    sick_days: int
    personal_days: int

    model_config = ConfigDict(from_attributes=True)
