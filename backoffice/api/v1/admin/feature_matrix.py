"""
Role-permission matrix editor endpoints (admin only)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.constants import ALL_ROLES
from backoffice.core.deps import get_db, require_admin
from backoffice.models.profile import Profile, Role
from backoffice.schemas.permission import FeatureMatrixOut, FeatureMatrixSave
from backoffice.services.authorization_session import registry
from backoffice.services.feature_service import list_active_features
from backoffice.services.matrix_service import load_matrix, replace_role_permissions

router = APIRouter()


@router.get("", response_model=FeatureMatrixOut)
async def get_feature_matrix(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Full role x feature grid over active features"""
    return FeatureMatrixOut(
        roles=[Role(r) for r in ALL_ROLES],
        features=list_active_features(db),
        matrix=load_matrix(db),
    )


@router.put("", response_model=FeatureMatrixOut)
async def save_feature_matrix(
    matrix_data: FeatureMatrixSave,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Replace the whole matrix.

    Every cell sent is stored, false cells included; cells not sent are gone.
    """
    replace_role_permissions(db, matrix_data.records, current_user.id)
    registry.invalidate()
    return await get_feature_matrix(db=db, current_user=current_user)
