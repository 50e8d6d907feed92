"""
Project records used by the project access editor
"""
from typing import List

from sqlalchemy.orm import Session

from backoffice.core.exceptions import Conflict, NotFound
from backoffice.models.project import Project
from backoffice.schemas.project import ProjectCreate
from backoffice.services.audit_service import log_audit


def list_projects(db: Session, active_only: bool = True) -> List[Project]:
    query = db.query(Project)
    if active_only:
        query = query.filter(Project.is_active.is_(True))
    return query.order_by(Project.name.asc()).all()


def create_project(db: Session, project_data: ProjectCreate, actor_id: int) -> Project:
    if project_data.code and db.query(Project.id).filter(Project.code == project_data.code).first():
        raise Conflict(f"Project with code '{project_data.code}' already exists")

    project = Project(name=project_data.name, code=project_data.code)
    db.add(project)
    db.commit()
    db.refresh(project)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="project",
        entity_id=project.id,
        meta=project_data,
    )
    return project


def get_project(db: Session, project_id: int) -> Project:
    """
    Raises:
        NotFound: unknown project
    """
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFound(f"Project with id {project_id} not found")
    return project
