"""Admin API (admin role assignment required)."""
from fastapi import APIRouter
from backoffice.api.v1.admin import feature_matrix
from backoffice.api.v1.admin import visibility
from backoffice.api.v1.admin import project_access
from backoffice.api.v1.admin import user_roles
from backoffice.api.v1.admin import users
from backoffice.api.v1.admin import leave_balances

admin_router = APIRouter(prefix="/admin", tags=["admin"])
admin_router.include_router(feature_matrix.router, prefix="/feature-matrix", tags=["admin-feature-matrix"])
admin_router.include_router(visibility.router, prefix="/visibility", tags=["admin-visibility"])
admin_router.include_router(project_access.router, prefix="/project-access", tags=["admin-project-access"])
admin_router.include_router(user_roles.router, prefix="/user-roles", tags=["admin-user-roles"])
admin_router.include_router(users.router, prefix="/users", tags=["admin-users"])
admin_router.include_router(leave_balances.router, prefix="/leave-balances", tags=["admin-leave-balances"])
