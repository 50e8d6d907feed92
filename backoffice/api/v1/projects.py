"""
Project endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, require_admin, require_feature
from backoffice.core.exceptions import Forbidden
from backoffice.models.profile import Profile
from backoffice.schemas.project import ProjectCreate, ProjectOut
from backoffice.services.project_access_service import user_can_access_project
from backoffice.services.project_service import create_project, get_project, list_projects

router = APIRouter()


@router.get("", response_model=List[ProjectOut])
async def list_projects_endpoint(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """All active projects (admin only; others use /me/projects)"""
    return list_projects(db)


@router.post("", response_model=ProjectOut, status_code=201)
async def create_project_endpoint(
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    return create_project(db, project_data, current_user.id)


@router.get("/{project_id}", response_model=ProjectOut)
async def get_project_endpoint(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_feature("projects.view")),
):
    """
    One project, for anyone on its access list.

    Admins and managers reach every project.
    """
    project = get_project(db, project_id)
    if not user_can_access_project(db, current_user.id, project_id):
        raise Forbidden("Access denied. You are not on this project's access list.")
    return project
