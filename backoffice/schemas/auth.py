"""
Authentication schemas
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from backoffice.models.profile import Role


class LoginRequest(BaseModel):
    """Login request schema"""
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"


class SessionOut(BaseModel):
    """Current user plus the state of their authorization session"""
    user_id: int
    full_name: str
    email: str
    role: Role
    roles: List[Role]
    is_admin: bool
    state: str
    visible_features: List[str]


class NavigationItem(BaseModel):
    title: str
    url: str
    feature_code: Optional[str] = None
