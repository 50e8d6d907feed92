"""
Endpoints about the caller's own permissions
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, get_current_user, get_authorization, require_feature
from backoffice.models.profile import Profile
from backoffice.schemas.auth import NavigationItem
from backoffice.schemas.permission import EffectivePermissionsOut, PermissionCheckOut
from backoffice.schemas.project import ProjectOut
from backoffice.services.authorization_session import AuthorizationSession
from backoffice.services.feature_service import active_feature_codes
from backoffice.services.navigation_service import visible_menu
from backoffice.services.project_access_service import list_accessible_projects

router = APIRouter()


@router.get("/permissions", response_model=EffectivePermissionsOut)
async def my_permissions(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    authz: AuthorizationSession = Depends(get_authorization),
):
    """Effective permission of every active feature, from the session cache"""
    return EffectivePermissionsOut(
        user_id=current_user.id,
        is_admin=authz.is_admin,
        permissions=[
            {"feature_code": code, "can_access": authz.has_permission(code)}
            for code in active_feature_codes(db)
        ],
    )


@router.post("/permissions/reload", response_model=EffectivePermissionsOut)
async def reload_my_permissions(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    authz: AuthorizationSession = Depends(get_authorization),
):
    """Re-check after a token refresh"""
    authz.on_auth_state_change(db, current_user.id)
    return await my_permissions(db=db, current_user=current_user, authz=authz)


@router.get("/permissions/{feature_code}", response_model=PermissionCheckOut)
async def check_my_permission(
    feature_code: str,
    authz: AuthorizationSession = Depends(get_authorization),
):
    return PermissionCheckOut(feature_code=feature_code, granted=authz.has_permission(feature_code))


@router.get("/navigation", response_model=List[NavigationItem])
async def my_navigation(
    authz: AuthorizationSession = Depends(get_authorization),
):
    """Sidebar entries the caller may see"""
    return visible_menu(authz)


@router.get("/projects", response_model=List[ProjectOut])
async def my_projects(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_feature("projects.view")),
):
    """Projects the caller may open; needs the projects screen itself"""
    return list_accessible_projects(db, current_user.id)
