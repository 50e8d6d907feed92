"""
Role store - role assignments per user
"""
import logging
from typing import Dict, Iterable, List, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.constants import ROLE_ADMIN
from backoffice.core.exceptions import Conflict, NotFound
from backoffice.models.profile import Profile, Role
from backoffice.models.user_role import UserRole
from backoffice.services.audit_service import log_audit
from backoffice.services.override_store import replace_scope

logger = logging.getLogger(__name__)


def _require_profile(db: Session, user_id: int) -> Profile:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise NotFound(f"User with id {user_id} not found")
    return profile


def get_user_roles(db: Session, user_id: int) -> List[Role]:
    """Roles assigned to a user, in assignment order."""
    rows = (
        db.query(UserRole.role)
        .filter(UserRole.user_id == user_id)
        .order_by(UserRole.id.asc())
        .all()
    )
    return [Role(role) for (role,) in rows]


def effective_role_names(db: Session, user_id: int) -> Set[str]:
    """Assigned roles plus the profile's primary role."""
    roles = {role.value for role in get_user_roles(db, user_id)}
    primary = db.query(Profile.role).filter(Profile.id == user_id).scalar()
    if primary:
        roles.add(primary)
    return roles


def is_admin(db: Session, user_id: int) -> bool:
    """True iff the user holds an admin role assignment."""
    return (
        db.query(UserRole.id)
        .filter(UserRole.user_id == user_id, UserRole.role == ROLE_ADMIN)
        .first()
        is not None
    )


def list_role_assignments(db: Session) -> Dict[int, List[Role]]:
    """All assignments grouped by user id."""
    assignments: Dict[int, List[Role]] = {}
    for user_id, role in db.query(UserRole.user_id, UserRole.role).order_by(UserRole.id.asc()):
        assignments.setdefault(user_id, []).append(Role(role))
    return assignments


def add_user_role(db: Session, user_id: int, role: Role, actor_id: int) -> UserRole:
    """
    Assign a role to a user.

    Raises:
        NotFound: unknown user
        Conflict: the user already holds the role
    """
    _require_profile(db, user_id)

    existing = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role == role.value)
        .first()
    )
    if existing:
        raise Conflict(f"User already has role '{role.value}'")

    assignment = UserRole(user_id=user_id, role=role.value)
    db.add(assignment)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise Conflict(f"User already has role '{role.value}'")

    log_audit(
        db=db,
        actor_id=actor_id,
        action="ASSIGN",
        entity_type="user_role",
        entity_id=user_id,
        meta={"role": role},
    )
    db.refresh(assignment)
    logger.info("Role %s assigned to user %s by %s", role.value, user_id, actor_id)
    return assignment


def remove_user_role(db: Session, user_id: int, role: Role, actor_id: int) -> None:
    """
    Remove a role assignment.

    Raises:
        NotFound: the user does not hold the role
    """
    assignment = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role == role.value)
        .first()
    )
    if not assignment:
        raise NotFound(f"User {user_id} does not have role '{role.value}'")

    db.delete(assignment)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="UNASSIGN",
        entity_type="user_role",
        entity_id=user_id,
        meta={"role": role},
    )
    logger.info("Role %s removed from user %s by %s", role.value, user_id, actor_id)


def replace_user_roles(db: Session, user_id: int, roles: Iterable[Role], actor_id: int) -> List[Role]:
    """Full-replace save of a user's role assignments."""
    _require_profile(db, user_id)

    # Keep first occurrence order, drop duplicates
    unique_roles = list(dict.fromkeys(Role(r) for r in roles))
    replace_scope(
        db,
        UserRole,
        [UserRole.user_id == user_id],
        [{"user_id": user_id, "role": r.value} for r in unique_roles],
        actor_id=actor_id,
        entity_type="user_roles",
        entity_id=user_id,
        meta={"roles": unique_roles},
    )
    return unique_roles
