"""
Role assignment endpoints (admin only)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, require_admin
from backoffice.core.exceptions import NotFound
from backoffice.models.profile import Profile, Role
from backoffice.schemas.user_role import UserRoleAssign, UserRolesOut, UserRolesSave
from backoffice.services.authorization_session import registry
from backoffice.services.profile_service import get_profile, list_users
from backoffice.services.role_service import (
    add_user_role,
    get_user_roles,
    list_role_assignments,
    remove_user_role,
    replace_user_roles,
)

router = APIRouter()


def _user_roles_out(db: Session, user_id: int) -> UserRolesOut:
    profile = get_profile(db, user_id)
    if not profile:
        raise NotFound(f"User with id {user_id} not found")
    return UserRolesOut(
        user_id=profile.id,
        full_name=profile.full_name,
        email=profile.email,
        roles=get_user_roles(db, user_id),
    )


@router.get("", response_model=List[UserRolesOut])
async def list_user_roles(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Every user with their role assignments"""
    assignments = list_role_assignments(db)
    return [
        UserRolesOut(
            user_id=profile.id,
            full_name=profile.full_name,
            email=profile.email,
            roles=assignments.get(profile.id, []),
        )
        for profile in list_users(db, active_only=None)
    ]


@router.post("/{user_id}", response_model=UserRolesOut, status_code=201)
async def assign_role(
    user_id: int,
    role_data: UserRoleAssign,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    add_user_role(db, user_id, role_data.role, current_user.id)
    registry.invalidate([user_id])
    return _user_roles_out(db, user_id)


@router.delete("/{user_id}/{role}", response_model=UserRolesOut)
async def unassign_role(
    user_id: int,
    role: Role,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    remove_user_role(db, user_id, role, current_user.id)
    registry.invalidate([user_id])
    return _user_roles_out(db, user_id)


@router.put("/{user_id}", response_model=UserRolesOut)
async def save_roles(
    user_id: int,
    roles_data: UserRolesSave,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Replace the user's role assignments"""
    replace_user_roles(db, user_id, roles_data.roles, current_user.id)
    registry.invalidate([user_id])
    return _user_roles_out(db, user_id)
