"""
Tests for user provisioning
"""
from fastapi import status

from backoffice.models.user_role import UserRole

URL = "/api/v1/admin/users"


def _payload(**overrides):
    data = {
        "email": "New.Hire@Test.com",
        "password": "welcome123",
        "full_name": "  New Hire ",
        "role": "purchaser",
        "department": "Procurement",
    }
    data.update(overrides)
    return data


def test_create_user(client, db, admin_headers):
    response = client.post(URL, json=_payload(), headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "new.hire@test.com"
    assert data["full_name"] == "New Hire"
    assert data["role"] == "purchaser"
    assert data["is_active"] is True
    assert "password_hash" not in data

    roles = [r for (r,) in db.query(UserRole.role).filter(UserRole.user_id == data["id"])]
    assert roles == ["purchaser"]


def test_created_user_can_sign_in(client, admin_headers, login_as):
    client.post(URL, json=_payload(), headers=admin_headers)

    headers = login_as("new.hire@test.com", "welcome123")

    assert client.get("/api/v1/auth/me", headers=headers).json()["role"] == "purchaser"


def test_create_user_defaults_to_worker(client, admin_headers):
    payload = _payload()
    del payload["role"]

    response = client.post(URL, json=payload, headers=admin_headers)

    assert response.json()["role"] == "worker"


def test_create_user_duplicate_email(client, admin_headers, worker_user):
    response = client.post(URL, json=_payload(email="WORKER@test.com"), headers=admin_headers)

    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_user_rejects_short_password(client, admin_headers):
    response = client.post(URL, json=_payload(password="123"), headers=admin_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_user_rejects_bad_email(client, admin_headers):
    response = client.post(URL, json=_payload(email="not-an-email"), headers=admin_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_deactivate_user(client, admin_headers, worker_user, worker_headers):
    response = client.post(f"{URL}/{worker_user.id}/deactivate", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_active"] is False
    assert client.get("/api/v1/auth/me", headers=worker_headers).status_code == status.HTTP_403_FORBIDDEN

    active = [u["email"] for u in client.get(URL, headers=admin_headers).json()]
    assert "worker@test.com" not in active


def test_admin_cannot_deactivate_self(client, admin_user, admin_headers):
    response = client.post(f"{URL}/{admin_user.id}/deactivate", headers=admin_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["errors"][0]["loc"] == ["user_id"]


def test_deactivate_unknown_user(client, admin_headers):
    response = client.post(f"{URL}/9999/deactivate", headers=admin_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
