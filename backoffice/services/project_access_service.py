"""
Project access list service
"""
import logging
from typing import Iterable, List, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.constants import PROJECT_BYPASS_ROLES
from backoffice.core.exceptions import NotFound, ValidationError
from backoffice.models.profile import Profile
from backoffice.models.project import Project, ProjectAccess
from backoffice.models.user_role import UserRole
from backoffice.services.override_store import replace_scope
from backoffice.services.role_service import effective_role_names

logger = logging.getLogger(__name__)


def _has_bypass_role(db: Session, user_id: int) -> bool:
    return not effective_role_names(db, user_id).isdisjoint(PROJECT_BYPASS_ROLES)


def get_project_access(db: Session, project_id: int) -> Set[int]:
    """User ids on the project's access list."""
    rows = db.query(ProjectAccess.user_id).filter(ProjectAccess.project_id == project_id).all()
    return {user_id for (user_id,) in rows}


def replace_project_access(
    db: Session,
    project_id: int,
    user_ids: Iterable[int],
    actor_id: int,
) -> List[int]:
    """
    Full-replace save of a project's access list.

    Raises:
        NotFound: unknown project
        ValidationError: unknown user id
    """
    if not db.query(Project.id).filter(Project.id == project_id).first():
        raise NotFound(f"Project with id {project_id} not found")

    ids = sorted(set(user_ids))
    if ids:
        existing = {uid for (uid,) in db.query(Profile.id).filter(Profile.id.in_(ids)).all()}
        unknown = [uid for uid in ids if uid not in existing]
        if unknown:
            raise ValidationError(
                f"Unknown users: {', '.join(str(u) for u in unknown)}",
                errors=[{"loc": ["user_ids"], "msg": f"Unknown user {uid}"} for uid in unknown],
            )

    replace_scope(
        db,
        ProjectAccess,
        [ProjectAccess.project_id == project_id],
        [{"project_id": project_id, "user_id": uid, "created_by": actor_id} for uid in ids],
        actor_id=actor_id,
        entity_type="project_access",
        entity_id=project_id,
        meta={"user_ids": ids},
    )
    return ids


def user_can_access_project(db: Session, user_id: int, project_id: int) -> bool:
    """
    Admins and managers reach every project; everyone else needs a row.
    A failed lookup denies.
    """
    try:
        if _has_bypass_role(db, user_id):
            return True
        return (
            db.query(ProjectAccess.user_id)
            .filter(ProjectAccess.project_id == project_id, ProjectAccess.user_id == user_id)
            .first()
            is not None
        )
    except (SQLAlchemyError, ValueError) as e:
        logger.error("Project access lookup failed for user %s: %s", user_id, e)
        return False


def list_accessible_projects(db: Session, user_id: int) -> List[Project]:
    """Active projects the user may open; empty when the lookup fails."""
    try:
        query = db.query(Project).filter(Project.is_active.is_(True))
        if not _has_bypass_role(db, user_id):
            granted = db.query(ProjectAccess.project_id).filter(ProjectAccess.user_id == user_id)
            query = query.filter(Project.id.in_(granted))
        return query.order_by(Project.name.asc()).all()
    except (SQLAlchemyError, ValueError) as e:
        logger.error("Project list lookup failed for user %s: %s", user_id, e)
        return []


def list_access_candidates(db: Session) -> List[Profile]:
    """Active users that need explicit grants (not admin, not manager)."""
    bypass_ids = db.query(UserRole.user_id).filter(UserRole.role.in_(PROJECT_BYPASS_ROLES))
    return (
        db.query(Profile)
        .filter(
            Profile.is_active.is_(True),
            Profile.id.notin_(bypass_ids),
            Profile.role.notin_(PROJECT_BYPASS_ROLES),
        )
        .order_by(Profile.full_name.asc())
        .all()
    )
