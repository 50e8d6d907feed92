"""
Per-user feature visibility schemas
"""
from typing import List

from pydantic import BaseModel, Field


class UserVisibilityOut(BaseModel):
    user_id: int
    feature_codes: List[str]


class UserVisibilitySave(BaseModel):
    """Features the user may see; everything else is hidden"""

    feature_codes: List[str] = Field(default_factory=list)
