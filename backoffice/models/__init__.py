"""
Database models
"""
from backoffice.models.profile import Profile, Role
from backoffice.models.user_role import UserRole
from backoffice.models.feature import Feature
from backoffice.models.role_permission import RolePermission
from backoffice.models.user_feature_visibility import UserFeatureVisibility
from backoffice.models.project import Project, ProjectAccess
from backoffice.models.leave_balance import LeaveBalance
from backoffice.models.audit_log import AuditLog

__all__ = [
    "Profile",
    "Role",
    "UserRole",
    "Feature",
    "RolePermission",
    "UserFeatureVisibility",
    "Project",
    "ProjectAccess",
    "LeaveBalance",
    "AuditLog",
]
