"""
Per-user feature visibility editor endpoints (admin only)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, require_admin
from backoffice.core.exceptions import NotFound
from backoffice.models.profile import Profile
from backoffice.schemas.profile import UserSummary
from backoffice.schemas.visibility import UserVisibilityOut, UserVisibilitySave
from backoffice.services.authorization_session import registry
from backoffice.services.profile_service import get_profile
from backoffice.services.visibility_service import (
    get_user_visibility,
    list_visibility_candidates,
    replace_user_visibility,
)

router = APIRouter()


@router.get("/users", response_model=List[UserSummary])
async def list_visibility_users(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Users the editor can pick (active, non-admin)"""
    return list_visibility_candidates(db)


@router.get("/{user_id}", response_model=UserVisibilityOut)
async def get_visibility(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    if not get_profile(db, user_id):
        raise NotFound(f"User with id {user_id} not found")
    return UserVisibilityOut(user_id=user_id, feature_codes=sorted(get_user_visibility(db, user_id)))


@router.put("/{user_id}", response_model=UserVisibilityOut)
async def save_visibility(
    user_id: int,
    visibility_data: UserVisibilitySave,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Replace the user's visible features with exactly the codes sent"""
    codes = replace_user_visibility(db, user_id, visibility_data.feature_codes, current_user.id)
    registry.invalidate([user_id])
    return UserVisibilityOut(user_id=user_id, feature_codes=codes)
