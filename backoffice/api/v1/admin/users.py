"""
User provisioning endpoints (admin only)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, require_admin
from backoffice.models.profile import Profile
from backoffice.schemas.profile import ProfileOut, UserCreate
from backoffice.services.authorization_session import registry
from backoffice.services.profile_service import create_user, deactivate_user, list_users

router = APIRouter()


@router.get("", response_model=List[ProfileOut])
async def list_users_endpoint(
    active_only: Optional[bool] = Query(True, description="If true, return only active users"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    return list_users(db, active_only=active_only)


@router.post("", response_model=ProfileOut, status_code=201)
async def create_user_endpoint(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Create a profile and its role assignment"""
    return create_user(db, user_data, current_user.id)


@router.post("/{user_id}/deactivate", response_model=ProfileOut)
async def deactivate_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Soft-deactivate; the user's open sessions stop granting anything"""
    profile = deactivate_user(db, user_id, current_user.id)
    registry.invalidate([user_id])
    return profile
