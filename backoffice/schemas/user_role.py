"""
Role assignment schemas
"""
from typing import List

from pydantic import BaseModel, Field

from backoffice.models.profile import Role


class UserRolesOut(BaseModel):
    user_id: int
    full_name: str
    email: str
    roles: List[Role]


class UserRoleAssign(BaseModel):
    role: Role


class UserRolesSave(BaseModel):
    roles: List[Role] = Field(default_factory=list)
