"""
Per-user feature visibility service
"""
from typing import Iterable, List, Set

from sqlalchemy.orm import Session

from backoffice.constants import ROLE_ADMIN
from backoffice.core.exceptions import NotFound, ValidationError
from backoffice.models.profile import Profile
from backoffice.models.user_feature_visibility import UserFeatureVisibility
from backoffice.models.user_role import UserRole
from backoffice.services.feature_service import known_feature_codes
from backoffice.services.override_store import replace_scope


def get_user_visibility(db: Session, user_id: int) -> Set[str]:
    """Feature codes the user has been granted explicitly."""
    rows = (
        db.query(UserFeatureVisibility.feature_code)
        .filter(
            UserFeatureVisibility.user_id == user_id,
            UserFeatureVisibility.can_view.is_(True),
        )
        .all()
    )
    return {code for (code,) in rows}


def replace_user_visibility(
    db: Session,
    user_id: int,
    feature_codes: Iterable[str],
    actor_id: int,
) -> List[str]:
    """
    Full-replace save of one user's visibility; only granted rows are stored.

    Raises:
        NotFound: unknown user
        ValidationError: unknown feature code
    """
    if not db.query(Profile.id).filter(Profile.id == user_id).first():
        raise NotFound(f"User with id {user_id} not found")

    codes = sorted(set(feature_codes))
    known = known_feature_codes(db)
    unknown = [code for code in codes if code not in known]
    if unknown:
        raise ValidationError(
            f"Unknown feature codes: {', '.join(unknown)}",
            errors=[{"loc": ["feature_codes"], "msg": f"Unknown feature '{code}'"} for code in unknown],
        )

    replace_scope(
        db,
        UserFeatureVisibility,
        [UserFeatureVisibility.user_id == user_id],
        [{"user_id": user_id, "feature_code": code, "can_view": True} for code in codes],
        actor_id=actor_id,
        entity_type="user_visibility",
        entity_id=user_id,
        meta={"feature_codes": codes},
    )
    return codes


def list_visibility_candidates(db: Session) -> List[Profile]:
    """Active users who are not admins; admins see everything anyway."""
    admin_ids = db.query(UserRole.user_id).filter(UserRole.role == ROLE_ADMIN)
    return (
        db.query(Profile)
        .filter(Profile.is_active.is_(True), Profile.id.notin_(admin_ids))
        .order_by(Profile.full_name.asc())
        .all()
    )
