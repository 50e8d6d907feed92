"""
Database initialization
Seeds the feature catalog, the default role matrix and the first admin
"""
import logging

from sqlalchemy.orm import Session

from backoffice.constants import (
    ALL_ROLES,
    DEFAULT_FEATURES,
    ROLE_ACCOUNTANT,
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_PURCHASER,
    ROLE_WORKER,
)
from backoffice.core.security import hash_password
from backoffice.models.feature import Feature
from backoffice.models.profile import Profile
from backoffice.models.role_permission import RolePermission
from backoffice.models.user_role import UserRole

logger = logging.getLogger(__name__)

_COMMON = {"dashboard.view", "mywork.view", "attendance.view", "chat.view", "leave.view"}

DEFAULT_ROLE_GRANTS = {
    ROLE_ADMIN: {code for code, _, _ in DEFAULT_FEATURES},
    ROLE_MANAGER: _COMMON | {
        "projects.view",
        "approvals.view",
        "purchase_requests.view",
        "hr_management.view",
        "foreign_workers.view",
    },
    ROLE_ACCOUNTANT: _COMMON | {
        "approvals.view",
        "accounting.view",
        "labor_accounting.view",
        "payroll.view",
        "daily_payments.view",
        "tax_documents.view",
        "tax_planning.view",
    },
    ROLE_PURCHASER: _COMMON | {
        "projects.view",
        "purchase_requests.view",
        "purchase_requests.create",
    },
    ROLE_WORKER: {"mywork.view", "attendance.view", "chat.view", "leave.view"},
}


def seed_features(db: Session) -> int:
    """Insert catalog entries that are missing; existing ones are left alone."""
    existing = {code for (code,) in db.query(Feature.code).all()}
    added = 0
    for code, name, category in DEFAULT_FEATURES:
        if code not in existing:
            db.add(Feature(code=code, name=name, category=category, is_active=True))
            added += 1
    db.flush()
    return added


def seed_role_matrix(db: Session) -> int:
    """Write the default grid, false cells included, only into an empty table."""
    if db.query(RolePermission).first():
        return 0
    rows = 0
    for role in ALL_ROLES:
        granted = DEFAULT_ROLE_GRANTS.get(role, set())
        for code, _, _ in DEFAULT_FEATURES:
            db.add(RolePermission(role=role, feature_code=code, can_access=code in granted))
            rows += 1
    db.flush()
    return rows


def ensure_initial_admin(db: Session, email: str, password: str) -> bool:
    """Create an admin profile when no admin assignment exists."""
    if db.query(UserRole.id).filter(UserRole.role == ROLE_ADMIN).first():
        return False

    admin = db.query(Profile).filter(Profile.email == email.lower()).first()
    if admin is None:
        admin = Profile(
            full_name="System Administrator",
            email=email.lower(),
            role=ROLE_ADMIN,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(admin)
        db.flush()
    db.add(UserRole(user_id=admin.id, role=ROLE_ADMIN))
    db.flush()
    return True


def init_db(db: Session, admin_email: str, admin_password: str) -> None:
    """Idempotent bootstrap; safe to run on every startup."""
    features = seed_features(db)
    cells = seed_role_matrix(db)
    admin_created = ensure_initial_admin(db, admin_email, admin_password)
    db.commit()
    logger.info(
        "Bootstrap done: %d features added, %d matrix cells seeded, admin created=%s",
        features, cells, admin_created,
    )
