"""
Role-permission matrix and effective permission schemas
"""
from typing import Dict, List

from pydantic import BaseModel, Field

from backoffice.models.profile import Role
from backoffice.schemas.feature import FeatureSummary


class RolePermissionRecord(BaseModel):
    role: Role
    feature_code: str = Field(..., min_length=1)
    can_access: bool


class FeatureMatrixOut(BaseModel):
    """Grid of role x feature checkboxes"""

    roles: List[Role]
    features: List[FeatureSummary]
    matrix: Dict[str, Dict[str, bool]]


class FeatureMatrixSave(BaseModel):
    """Full matrix; every (role, feature) pair the editor shows"""

    records: List[RolePermissionRecord] = Field(..., min_length=1)


class EffectivePermission(BaseModel):
    feature_code: str
    can_access: bool


class EffectivePermissionsOut(BaseModel):
    user_id: int
    is_admin: bool
    permissions: List[EffectivePermission]


class PermissionCheckOut(BaseModel):
    feature_code: str
    granted: bool
