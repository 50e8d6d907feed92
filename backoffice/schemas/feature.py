"""
Feature catalog schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class FeatureBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=100, description="Unique feature code, e.g. payroll.view")
    name: str = Field(..., min_length=1, description="Display name")
    category: str = Field(default="general", description="Grouping shown in the admin editors")
    description: Optional[str] = Field(default=None, description="Free text description")
    is_active: bool = Field(default=True, description="Inactive features are hidden from editors")


class FeatureCreate(FeatureBase):
    """Schema for creating a feature"""


class FeatureUpdate(BaseModel):
    """Schema for updating a feature (code is immutable)"""

    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class FeatureOut(BaseModel):
    id: int
    code: str
    name: str
    category: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeatureSummary(BaseModel):
    """Catalog entry as listed to editors"""

    code: str
    name: str
    category: str
