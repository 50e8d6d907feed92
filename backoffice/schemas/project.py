"""
Project and project access schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    code: Optional[str] = Field(default=None, description="Optional unique project code")


class ProjectOut(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectAccessOut(BaseModel):
    project_id: int
    user_ids: List[int]


class ProjectAccessSave(BaseModel):
    """Users granted access to the project; everyone else is removed"""

    user_ids: List[int] = Field(default_factory=list)
