"""
Tests for leave balance configuration
"""
from fastapi import status

URL = "/api/v1/admin/leave-balances"


def test_save_leave_balance_uses_defaults(client, admin_headers, worker_user):
    response = client.put(f"{URL}/{worker_user.id}", json={"year": 2026}, headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user_id"] == worker_user.id
    assert (data["vacation_days"], data["sick_days"], data["personal_days"]) == (6, 30, 3)


def test_save_leave_balance_overwrites_same_year(client, admin_headers, worker_user):
    client.put(f"{URL}/{worker_user.id}", json={"year": 2026}, headers=admin_headers)
    client.put(f"{URL}/{worker_user.id}", json={"year": 2026, "vacation_days": 10}, headers=admin_headers)
    client.put(f"{URL}/{worker_user.id}", json={"year": 2025}, headers=admin_headers)

    response = client.get(f"{URL}/{worker_user.id}", headers=admin_headers)

    balances = response.json()
    assert [b["year"] for b in balances] == [2026, 2025]
    assert balances[0]["vacation_days"] == 10


def test_save_leave_balance_rejects_negative_days(client, admin_headers, worker_user):
    response = client.put(
        f"{URL}/{worker_user.id}",
        json={"year": 2026, "sick_days": -1},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_save_leave_balance_unknown_user(client, admin_headers):
    response = client.put(f"{URL}/9999", json={"year": 2026}, headers=admin_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
