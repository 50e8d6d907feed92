"""
Project access editor endpoints (admin only)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, require_admin
from backoffice.core.exceptions import NotFound
from backoffice.models.profile import Profile
from backoffice.models.project import Project
from backoffice.schemas.profile import UserSummary
from backoffice.schemas.project import ProjectAccessOut, ProjectAccessSave
from backoffice.services.project_access_service import (
    get_project_access,
    list_access_candidates,
    replace_project_access,
)

router = APIRouter()


@router.get("/users", response_model=List[UserSummary])
async def list_project_access_users(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Users who need explicit grants (admins and managers see every project)"""
    return list_access_candidates(db)


@router.get("/{project_id}", response_model=ProjectAccessOut)
async def get_access(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    if not db.query(Project.id).filter(Project.id == project_id).first():
        raise NotFound(f"Project with id {project_id} not found")
    return ProjectAccessOut(project_id=project_id, user_ids=sorted(get_project_access(db, project_id)))


@router.put("/{project_id}", response_model=ProjectAccessOut)
async def save_access(
    project_id: int,
    access_data: ProjectAccessSave,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """Replace the project's access list with exactly the users sent"""
    user_ids = replace_project_access(db, project_id, access_data.user_ids, current_user.id)
    return ProjectAccessOut(project_id=project_id, user_ids=user_ids)
