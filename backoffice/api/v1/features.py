"""
Feature catalog endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, get_current_user, require_admin
from backoffice.models.profile import Profile
from backoffice.schemas.feature import FeatureCreate, FeatureUpdate, FeatureOut
from backoffice.services.authorization_session import registry
from backoffice.services.feature_service import create_feature, list_features, update_feature

router = APIRouter()


@router.get("", response_model=List[FeatureOut])
async def list_features_endpoint(
    active_only: Optional[bool] = Query(True, description="If true, return only active features"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """List the feature catalog (any signed-in user)"""
    return list_features(db, active_only=active_only)


@router.post("", response_model=FeatureOut, status_code=201)
async def create_feature_endpoint(
    feature_data: FeatureCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Add a feature (admin only)"""
    return create_feature(db, feature_data, current_user.id)


@router.patch("/{code}", response_model=FeatureOut)
async def update_feature_endpoint(
    code: str,
    feature_data: FeatureUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Update a feature (admin only); activation changes affect every session"""
    feature = update_feature(db, code, feature_data, current_user.id)
    registry.invalidate()
    return feature
