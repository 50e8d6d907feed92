"""
Tests for effective permission resolution
"""
import pytest
from sqlalchemy.exc import OperationalError

from backoffice.models.feature import Feature
from backoffice.models.role_permission import RolePermission
from backoffice.models.user_feature_visibility import UserFeatureVisibility
from backoffice.services.permission_resolver import (
    PermissionResolver,
    PrecedencePolicy,
    ResolvedPermissions,
)
from backoffice.services.permission_sources import PermissionSource, RoleDefaultSource


def _grant(db, user_id, *codes):
    for code in codes:
        db.add(UserFeatureVisibility(user_id=user_id, feature_code=code, can_view=True))
    db.commit()


class BrokenSource(PermissionSource):
    name = "broken"

    def granted_features(self, db, user_id):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))


@pytest.fixture
def resolver():
    return PermissionResolver(policy=PrecedencePolicy.OVERRIDE)


def test_explicit_visibility_replaces_role_defaults(db, resolver, worker_user):
    _grant(db, worker_user.id, "purchase_requests.create")

    assert resolver.has_permission(db, worker_user.id, "purchase_requests.create") is True
    assert resolver.has_permission(db, worker_user.id, "payroll.view") is False
    # A worker default, hidden once the user has their own list
    assert resolver.has_permission(db, worker_user.id, "leave.view") is False


def test_role_default_applies_without_visibility_rows(db, resolver, manager_user):
    assert resolver.has_permission(db, manager_user.id, "approvals.view") is True
    assert resolver.has_permission(db, manager_user.id, "payroll.view") is False


def test_admin_is_granted_everything(db, resolver, admin_user):
    resolved = resolver.resolve(db, admin_user.id)

    assert resolved.is_admin is True
    assert resolved.allows("payroll.view")
    assert resolved.allows("not.in.catalog")
    assert resolved.visible_features == frozenset({"all"})


def test_admin_bypass_ignores_visibility_rows(db, resolver, admin_user):
    _grant(db, admin_user.id, "chat.view")

    assert resolver.has_permission(db, admin_user.id, "payroll.view") is True


def test_unknown_user_is_denied(db, resolver):
    resolved = resolver.resolve(db, 9999)

    assert resolved == ResolvedPermissions.denied(9999)


def test_inactive_user_is_denied(db, resolver, user_factory):
    user = user_factory("old-admin@test.com", role="admin", is_active=False)

    assert resolver.has_permission(db, user.id, "dashboard.view") is False


def test_role_without_matrix_rows_gets_nothing(db, resolver, worker_user):
    db.query(RolePermission).filter(RolePermission.role == "worker").delete()
    db.commit()

    assert resolver.resolve(db, worker_user.id).features == frozenset()


def test_inactive_feature_is_never_granted(db, resolver, worker_user, manager_user):
    _grant(db, worker_user.id, "chat.view", "payroll.view")
    db.query(Feature).filter(Feature.code.in_(["chat.view", "approvals.view"])).update(
        {Feature.is_active: False}, synchronize_session=False
    )
    db.commit()

    assert resolver.has_permission(db, worker_user.id, "chat.view") is False
    assert resolver.has_permission(db, worker_user.id, "payroll.view") is True
    assert resolver.has_permission(db, manager_user.id, "approvals.view") is False


def test_extra_role_assignments_add_defaults(db, resolver, user_factory):
    user = user_factory("both@test.com", role="worker", extra_roles=["accountant"])

    assert resolver.has_permission(db, user.id, "leave.view") is True
    assert resolver.has_permission(db, user.id, "payroll.view") is True


def test_union_policy_combines_sources(db, worker_user):
    _grant(db, worker_user.id, "payroll.view")
    resolver = PermissionResolver(policy="union")

    assert resolver.has_permission(db, worker_user.id, "payroll.view") is True
    assert resolver.has_permission(db, worker_user.id, "leave.view") is True
    assert resolver.has_permission(db, worker_user.id, "approvals.view") is False


def test_failed_lookup_denies(db, worker_user):
    resolver = PermissionResolver(override_source=BrokenSource())

    resolved = resolver.resolve(db, worker_user.id)

    assert resolved.is_admin is False
    assert resolved.features == frozenset()


def test_effective_permissions_cover_active_catalog(db, resolver, manager_user):
    permissions = resolver.get_effective_permissions(db, manager_user.id)

    by_code = {p["feature_code"]: p["can_access"] for p in permissions}
    assert len(by_code) == db.query(Feature).filter(Feature.is_active.is_(True)).count()
    assert by_code["approvals.view"] is True
    assert by_code["payroll.view"] is False


def test_role_default_source_includes_primary_role(db, user_factory):
    user = user_factory("primary@test.com", role="purchaser", extra_roles=["worker"])

    assert RoleDefaultSource().user_roles(db, user.id) == {"purchaser", "worker"}
