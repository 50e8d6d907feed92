"""
Tests for project access lists
"""
from fastapi import status

from backoffice.models.project import Project, ProjectAccess
from backoffice.models.user_role import UserRole
from backoffice.services.project_access_service import user_can_access_project

URL = "/api/v1/admin/project-access"


def test_access_candidates_exclude_bypass_roles(client, admin_headers, worker_user, manager_user, purchaser_user):
    response = client.get(f"{URL}/users", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert {u["email"] for u in response.json()} == {"worker@test.com", "purchaser@test.com"}


def test_save_access_round_trip(client, db, admin_user, admin_headers, project, worker_user, purchaser_user):
    response = client.put(
        f"{URL}/{project.id}",
        json={"user_ids": [purchaser_user.id, worker_user.id]},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user_ids"] == sorted([worker_user.id, purchaser_user.id])

    response = client.get(f"{URL}/{project.id}", headers=admin_headers)
    assert response.json()["user_ids"] == sorted([worker_user.id, purchaser_user.id])

    row = db.query(ProjectAccess).filter(ProjectAccess.user_id == worker_user.id).one()
    assert row.created_by == admin_user.id


def test_save_access_replaces_list(client, db, admin_headers, project, worker_user, purchaser_user):
    client.put(f"{URL}/{project.id}", json={"user_ids": [worker_user.id]}, headers=admin_headers)
    client.put(f"{URL}/{project.id}", json={"user_ids": [purchaser_user.id]}, headers=admin_headers)

    assert user_can_access_project(db, worker_user.id, project.id) is False
    assert user_can_access_project(db, purchaser_user.id, project.id) is True


def test_save_access_unknown_project(client, admin_headers, worker_user):
    response = client.put(f"{URL}/9999", json={"user_ids": [worker_user.id]}, headers=admin_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_get_access_unknown_project(client, admin_headers):
    assert client.get(f"{URL}/9999", headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND


def test_save_access_unknown_user(client, db, admin_headers, project):
    response = client.put(f"{URL}/{project.id}", json={"user_ids": [9999]}, headers=admin_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert db.query(ProjectAccess).count() == 0


def test_admin_and_manager_bypass_access_list(db, project, admin_user, manager_user, worker_user):
    assert user_can_access_project(db, admin_user.id, project.id) is True
    assert user_can_access_project(db, manager_user.id, project.id) is True
    assert user_can_access_project(db, worker_user.id, project.id) is False


def test_my_projects_lists_granted_projects(client, db, admin_headers, project, purchaser_user, login_as):
    db.add(Project(name="South Yard", code="SY-02"))
    db.commit()
    client.put(f"{URL}/{project.id}", json={"user_ids": [purchaser_user.id]}, headers=admin_headers)

    response = client.get("/api/v1/me/projects", headers=login_as(purchaser_user.email))

    assert response.status_code == status.HTTP_200_OK
    assert [p["name"] for p in response.json()] == ["North Tower"]


def test_my_projects_manager_sees_all(client, db, project, manager_user, login_as):
    response = client.get("/api/v1/me/projects", headers=login_as(manager_user.email))

    assert response.status_code == status.HTTP_200_OK
    assert [p["id"] for p in response.json()] == [project.id]


def test_my_projects_needs_projects_feature(client, project, worker_headers):
    response = client.get("/api/v1/me/projects", headers=worker_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_and_list_projects(client, admin_headers):
    response = client.post("/api/v1/projects", json={"name": "Bridge", "code": "BR-1"}, headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED

    duplicate = client.post("/api/v1/projects", json={"name": "Bridge 2", "code": "BR-1"}, headers=admin_headers)
    assert duplicate.status_code == status.HTTP_409_CONFLICT

    names = [p["name"] for p in client.get("/api/v1/projects", headers=admin_headers).json()]
    assert names == ["Bridge"]


def _primary_role_only(db, user):
    db.query(UserRole).filter(UserRole.user_id == user.id).delete()
    db.commit()
    return user


def test_primary_manager_role_bypasses_access_list(db, project, manager_user):
    _primary_role_only(db, manager_user)

    assert user_can_access_project(db, manager_user.id, project.id) is True


def test_access_candidates_exclude_primary_manager(client, db, admin_headers, manager_user, worker_user):
    _primary_role_only(db, manager_user)

    response = client.get(f"{URL}/users", headers=admin_headers)

    assert [u["email"] for u in response.json()] == ["worker@test.com"]


def test_open_project_needs_access_row(client, admin_headers, project, purchaser_user, login_as):
    purchaser_headers = login_as(purchaser_user.email)

    response = client.get(f"/api/v1/projects/{project.id}", headers=purchaser_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["access_denied"] is True

    client.put(f"{URL}/{project.id}", json={"user_ids": [purchaser_user.id]}, headers=admin_headers)

    response = client.get(f"/api/v1/projects/{project.id}", headers=purchaser_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "North Tower"


def test_open_project_as_primary_manager(client, db, project, manager_user, login_as):
    _primary_role_only(db, manager_user)

    response = client.get(f"/api/v1/projects/{project.id}", headers=login_as(manager_user.email))

    assert response.status_code == status.HTTP_200_OK


def test_open_project_needs_projects_feature(client, project, worker_headers):
    response = client.get(f"/api/v1/projects/{project.id}", headers=worker_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_open_unknown_project(client, admin_headers):
    response = client.get("/api/v1/projects/9999", headers=admin_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
