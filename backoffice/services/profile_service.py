"""
User provisioning service
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.core.exceptions import BackendUnavailable, Conflict, NotFound, ValidationError
from backoffice.core.security import hash_password
from backoffice.models.profile import Profile
from backoffice.models.user_role import UserRole
from backoffice.schemas.profile import UserCreate
from backoffice.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: int) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == user_id).first()


def get_profile_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.email == email.strip().lower()).first()


def list_users(db: Session, active_only: Optional[bool] = True) -> List[Profile]:
    query = db.query(Profile)
    if active_only is not None:
        query = query.filter(Profile.is_active == active_only)
    return query.order_by(Profile.full_name.asc()).all()


def create_user(db: Session, user_data: UserCreate, actor_id: Optional[int]) -> Profile:
    """
    Provision a user: profile plus a role assignment matching the primary role.

    Both rows go in one transaction; if either fails nothing is created.

    Raises:
        Conflict: email already registered
        BackendUnavailable: database failure
    """
    if get_profile_by_email(db, user_data.email):
        raise Conflict(f"A user with email '{user_data.email}' already exists")

    profile = Profile(
        full_name=user_data.full_name,
        email=user_data.email,
        role=user_data.role.value,
        position=user_data.position,
        department=user_data.department,
        phone=user_data.phone,
        password_hash=hash_password(user_data.password),
        is_active=True,
    )
    try:
        db.add(profile)
        db.flush()
        db.add(UserRole(user_id=profile.id, role=user_data.role.value))
        if actor_id is not None:
            log_audit(
                db=db,
                actor_id=actor_id,
                action="CREATE",
                entity_type="user",
                entity_id=profile.id,
                meta={"email": user_data.email, "role": user_data.role},
                commit=False,
            )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(f"A user with email '{user_data.email}' already exists")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create user %s: %s", user_data.email, e)
        raise BackendUnavailable("Could not create user")

    db.refresh(profile)
    logger.info("User %s (%s) created with role %s", profile.id, profile.email, profile.role)
    return profile


def deactivate_user(db: Session, user_id: int, actor_id: int) -> Profile:
    """
    Soft-deactivate a user. Profiles are never deleted.

    Raises:
        NotFound: unknown user
        ValidationError: an admin trying to deactivate themself
    """
    if user_id == actor_id:
        raise ValidationError.for_field("user_id", "You cannot deactivate your own account")

    profile = get_profile(db, user_id)
    if not profile:
        raise NotFound(f"User with id {user_id} not found")

    profile.is_active = False
    db.commit()
    db.refresh(profile)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="DEACTIVATE",
        entity_type="user",
        entity_id=user_id,
    )
    return profile
