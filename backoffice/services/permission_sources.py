"""
Sources of feature grants

A source answers "which features does this user get from you?". Returning
None means the source has nothing to say about the user, which matters to
the precedence policy in permission_resolver.
"""
from typing import FrozenSet, Optional, Set

from sqlalchemy.orm import Session

from backoffice.models.feature import Feature
from backoffice.models.role_permission import RolePermission
from backoffice.models.user_feature_visibility import UserFeatureVisibility
from backoffice.services.role_service import effective_role_names


class PermissionSource:
    """Interface of a grant source"""

    name = "source"

    def granted_features(self, db: Session, user_id: int) -> Optional[FrozenSet[str]]:
        raise NotImplementedError


class RoleDefaultSource(PermissionSource):
    """Grants from the role-permission matrix, over every role the user holds"""

    name = "role_default"

    def user_roles(self, db: Session, user_id: int) -> Set[str]:
        return effective_role_names(db, user_id)

    def granted_features(self, db: Session, user_id: int) -> Optional[FrozenSet[str]]:
        roles = self.user_roles(db, user_id)
        if not roles:
            return frozenset()
        rows = (
            db.query(RolePermission.feature_code)
            .join(Feature, Feature.code == RolePermission.feature_code)
            .filter(
                RolePermission.role.in_(roles),
                RolePermission.can_access.is_(True),
                Feature.is_active.is_(True),
            )
            .all()
        )
        return frozenset(code for (code,) in rows)


class UserOverrideSource(PermissionSource):
    """Explicit per-user grants; None when the user has no rows at all"""

    name = "user_override"

    def granted_features(self, db: Session, user_id: int) -> Optional[FrozenSet[str]]:
        rows = (
            db.query(UserFeatureVisibility.feature_code, Feature.is_active)
            .join(Feature, Feature.code == UserFeatureVisibility.feature_code)
            .filter(
                UserFeatureVisibility.user_id == user_id,
                UserFeatureVisibility.can_view.is_(True),
            )
            .all()
        )
        if not rows:
            return None
        return frozenset(code for code, is_active in rows if is_active)
