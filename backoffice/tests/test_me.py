"""
Tests for the caller's own permissions and navigation
"""
from fastapi import status

from backoffice.constants import NAVIGATION_MENU
from backoffice.models.user_feature_visibility import UserFeatureVisibility


def test_my_permissions_worker(client, worker_headers):
    response = client.get("/api/v1/me/permissions", headers=worker_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["is_admin"] is False
    granted = {p["feature_code"] for p in data["permissions"] if p["can_access"]}
    assert granted == {"mywork.view", "attendance.view", "chat.view", "leave.view"}


def test_my_permissions_admin(client, admin_headers):
    data = client.get("/api/v1/me/permissions", headers=admin_headers).json()

    assert data["is_admin"] is True
    assert all(p["can_access"] for p in data["permissions"])


def test_check_single_permission(client, manager_user, login_as):
    headers = login_as(manager_user.email)

    response = client.get("/api/v1/me/permissions/approvals.view", headers=headers)

    assert response.json() == {"feature_code": "approvals.view", "granted": True}


def test_reload_picks_up_direct_changes(client, db, worker_user, worker_headers):
    db.add(UserFeatureVisibility(user_id=worker_user.id, feature_code="payroll.view", can_view=True))
    db.commit()
    assert client.get("/api/v1/me/permissions/payroll.view", headers=worker_headers).json()["granted"] is False

    response = client.post("/api/v1/me/permissions/reload", headers=worker_headers)

    granted = {p["feature_code"] for p in response.json()["permissions"] if p["can_access"]}
    assert granted == {"payroll.view"}


def test_navigation_worker(client, worker_headers):
    response = client.get("/api/v1/me/navigation", headers=worker_headers)

    assert response.status_code == status.HTTP_200_OK
    titles = [item["title"] for item in response.json()]
    assert titles == ["Home", "My work", "Check-in / check-out", "Company chat", "Leave", "Profile"]


def test_navigation_admin_sees_every_entry(client, admin_headers):
    items = client.get("/api/v1/me/navigation", headers=admin_headers).json()

    assert [item["url"] for item in items] == [url for _, _, url in NAVIGATION_MENU]


def test_navigation_requires_auth(client):
    assert client.get("/api/v1/me/navigation").status_code == status.HTTP_401_UNAUTHORIZED
