"""
User profile schemas
"""
import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, ConfigDict

from backoffice.core.security import validate_password
from backoffice.models.profile import Role

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class UserCreate(BaseModel):
    """Schema for provisioning a user"""
    email: str = Field(..., description="Login email (unique)")
    password: str = Field(..., description="Initial password")
    full_name: str = Field(..., min_length=1, description="Full name")
    position: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    role: Role = Field(default=Role.WORKER, description="Primary role, also assigned for authorization")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_field(cls, v: str) -> str:
        return validate_password(v)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v


class ProfileOut(BaseModel):
    id: int
    full_name: str
    email: str
    role: Role
    position: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Row in the admin editors' user pickers"""
    id: int
    full_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)
