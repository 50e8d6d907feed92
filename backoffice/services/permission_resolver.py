"""
Effective permission resolver

Resolution order:

1. An admin role assignment grants every feature.
2. Otherwise the role defaults and the per-user overrides are combined by
   the configured PrecedencePolicy:
   - OVERRIDE: a user with any visibility rows gets exactly those; a user
     without rows falls back to the role defaults.
   - UNION: role defaults plus per-user grants.
3. Anything not granted is denied.

Lookups that fail resolve to "no features, not admin"; callers never see
the database error.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.constants import ALL_FEATURES
from backoffice.core.config import settings
from backoffice.models.profile import Profile
from backoffice.services.feature_service import active_feature_codes
from backoffice.services.permission_sources import (
    PermissionSource,
    RoleDefaultSource,
    UserOverrideSource,
)
from backoffice.services.role_service import is_admin

logger = logging.getLogger(__name__)


class PrecedencePolicy(str, enum.Enum):
    OVERRIDE = "override"
    UNION = "union"


@dataclass(frozen=True)
class ResolvedPermissions:
    user_id: Optional[int]
    is_admin: bool = False
    features: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def denied(cls, user_id: Optional[int] = None) -> "ResolvedPermissions":
        return cls(user_id=user_id)

    def allows(self, feature_code: str) -> bool:
        return self.is_admin or feature_code in self.features

    @property
    def visible_features(self) -> FrozenSet[str]:
        """The feature set as shown to the UI; admins get the ALL sentinel."""
        if self.is_admin:
            return frozenset({ALL_FEATURES})
        return self.features


class PermissionResolver:
    """Combines the admin bypass with the grant sources under one policy"""

    def __init__(
        self,
        role_source: Optional[PermissionSource] = None,
        override_source: Optional[PermissionSource] = None,
        policy: Union[PrecedencePolicy, str, None] = None,
    ):
        self.role_source = role_source or RoleDefaultSource()
        self.override_source = override_source or UserOverrideSource()
        self.policy = PrecedencePolicy(policy or settings.VISIBILITY_PRECEDENCE)

    def resolve(self, db: Session, user_id: int) -> ResolvedPermissions:
        try:
            profile_active = (
                db.query(Profile.is_active).filter(Profile.id == user_id).scalar()
            )
            if not profile_active:
                return ResolvedPermissions.denied(user_id)

            if is_admin(db, user_id):
                return ResolvedPermissions(user_id=user_id, is_admin=True)

            overrides = self.override_source.granted_features(db, user_id)
            if self.policy is PrecedencePolicy.OVERRIDE and overrides is not None:
                return ResolvedPermissions(user_id=user_id, features=overrides)

            defaults = self.role_source.granted_features(db, user_id) or frozenset()
            return ResolvedPermissions(user_id=user_id, features=defaults | (overrides or frozenset()))
        except (SQLAlchemyError, ValueError) as e:
            # ValueError: a role string outside the Role enum
            logger.error("Permission lookup failed for user %s, denying: %s", user_id, e)
            return ResolvedPermissions.denied(user_id)

    def has_permission(self, db: Session, user_id: int, feature_code: str) -> bool:
        return self.resolve(db, user_id).allows(feature_code)

    def get_effective_permissions(self, db: Session, user_id: int) -> List[Dict[str, object]]:
        """[{feature_code, can_access}] for every active feature."""
        resolved = self.resolve(db, user_id)
        try:
            codes = active_feature_codes(db)
        except SQLAlchemyError as e:
            logger.error("Feature catalog lookup failed: %s", e)
            return []
        return [{"feature_code": code, "can_access": resolved.allows(code)} for code in codes]


def get_permission_resolver() -> PermissionResolver:
    """Resolver configured from settings; FastAPI dependency."""
    return PermissionResolver()
