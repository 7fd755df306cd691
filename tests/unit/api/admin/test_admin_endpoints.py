import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_users_permissions(async_client: AsyncClient, user_headers, admin_headers):
    forbidden = await async_client.get("/api/admin/users", headers=user_headers)
    assert forbidden.status_code == 403

    response = await async_client.get("/api/admin/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {
        "user@example.com",
        "admin@example.com",
        "super@example.com",
    }
    assert all("hashed_password" not in u for u in response.json())


@pytest.mark.asyncio
async def test_create_user_as_superadmin(async_client: AsyncClient, superadmin_headers, admin_headers):
    payload = {"name": "Rita Recruiter", "email": "Rita@Example.com", "password": "secret123", "role": "admin"}

    forbidden = await async_client.post("/api/admin/create-user", json=payload, headers=admin_headers)
    assert forbidden.status_code == 403

    response = await async_client.post("/api/admin/create-user", json=payload, headers=superadmin_headers)
    assert response.status_code == 201
    assert response.json()["email"] == "rita@example.com"
    assert response.json()["role"] == "admin"

    duplicate = await async_client.post("/api/admin/create-user", json=payload, headers=superadmin_headers)
    assert duplicate.status_code == 409

    login = await async_client.post(
        "/api/auth/login", json={"email": "rita@example.com", "password": "secret123"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_create_user_rejects_unknown_role(async_client: AsyncClient, superadmin_headers):
    payload = {"name": "X", "email": "x@example.com", "password": "secret123", "role": "owner"}

    response = await async_client.post("/api/admin/create-user", json=payload, headers=superadmin_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_change_role(async_client: AsyncClient, superadmin_headers, users):
    target = users["user"]

    response = await async_client.patch(
        f"/api/admin/users/{target.id}/role", json={"role": "admin"}, headers=superadmin_headers
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_cannot_change_own_role(async_client: AsyncClient, superadmin_headers, users):
    response = await async_client.patch(
        f"/api/admin/users/{users['superadmin'].id}/role", json={"role": "user"}, headers=superadmin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_cannot_change_roles(async_client: AsyncClient, admin_headers, users):
    response = await async_client.patch(
        f"/api/admin/users/{users['user'].id}/role", json={"role": "admin"}, headers=admin_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_deactivate_user_blocks_access(async_client: AsyncClient, admin_headers, user_headers, users):
    response = await async_client.patch(
        f"/api/admin/users/{users['user'].id}/status", json={"is_active": False}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False

    blocked = await async_client.get("/api/contacts/", headers=user_headers)
    assert blocked.status_code in (401, 403)


@pytest.mark.asyncio
async def test_admin_cannot_change_superadmin_status(async_client: AsyncClient, admin_headers, users):
    response = await async_client.patch(
        f"/api/admin/users/{users['superadmin'].id}/status", json={"is_active": False}, headers=admin_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cannot_change_own_status(async_client: AsyncClient, admin_headers, users):
    response = await async_client.patch(
        f"/api/admin/users/{users['admin'].id}/status", json={"is_active": False}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_user(async_client: AsyncClient, superadmin_headers, admin_headers, users):
    forbidden = await async_client.delete(f"/api/admin/users/{users['user'].id}", headers=admin_headers)
    assert forbidden.status_code == 403

    response = await async_client.delete(f"/api/admin/users/{users['user'].id}", headers=superadmin_headers)
    assert response.status_code == 200

    missing = await async_client.delete(f"/api/admin/users/{users['user'].id}", headers=superadmin_headers)
    assert missing.status_code == 404

    own = await async_client.delete(f"/api/admin/users/{users['superadmin'].id}", headers=superadmin_headers)
    assert own.status_code == 400


@pytest.mark.asyncio
async def test_audit_log_records_admin_changes(async_client: AsyncClient, superadmin_headers, admin_headers, users):
    await async_client.patch(
        f"/api/admin/users/{users['user'].id}/role", json={"role": "admin"}, headers=superadmin_headers
    )

    forbidden = await async_client.get("/api/admin/audit-logs", headers=admin_headers)
    assert forbidden.status_code == 403

    response = await async_client.get("/api/admin/audit-logs", headers=superadmin_headers)
    assert response.status_code == 200
    entry = response.json()[0]
    assert entry["action_type"] == "role_changed"
    assert entry["admin_id"] == users["superadmin"].id
    assert entry["target_user_id"] == users["user"].id
    assert entry["old_value"] == "user"
    assert entry["new_value"] == "admin"


@pytest.mark.asyncio
async def test_activities_record_contact_work(async_client: AsyncClient, user_headers, admin_headers, users):
    created = await async_client.post(
        "/api/contacts/", json={"name": "Alice", "email": "alice@x.com"}, headers=user_headers
    )
    contact_id = created.json()["contact"]["id"]
    await async_client.post(f"/api/contacts/{contact_id}/log", json={"response": "yes"}, headers=user_headers)

    response = await async_client.get(
        "/api/admin/activities", params={"user_id": users["user"].id}, headers=admin_headers
    )

    assert response.status_code == 200
    actions = [a["action_type"] for a in response.json()]
    assert actions == ["contact_logged", "contact_created"]
    assert response.json()[1]["contact_id"] == contact_id
    assert response.json()[1]["user_name"] == "Una User"

    filtered = await async_client.get(
        "/api/admin/activities", params={"action_type": "contact_created"}, headers=admin_headers
    )
    assert len(filtered.json()) == 1


@pytest.mark.asyncio
async def test_analytics(async_client: AsyncClient, user_headers, admin_headers, users):
    for i in range(3):
        await async_client.post(
            "/api/contacts/", json={"name": f"Contact {i}", "phone": f"55{i}"}, headers=user_headers
        )

    response = await async_client.get("/api/admin/analytics", params={"days": 7}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["period"]["days"] == 7
    assert body["summary"] == [
        {"user_id": users["user"].id, "user_name": "Una User", "action_type": "contact_created", "total_count": 3}
    ]
    assert body["activities"][0]["count"] == 3


@pytest.mark.asyncio
async def test_user_analytics(async_client: AsyncClient, user_headers, admin_headers, users):
    await async_client.post("/api/contacts/", json={"name": "Alice", "phone": "555"}, headers=user_headers)

    response = await async_client.get(f"/api/admin/users/{users['admin'].id}/analytics", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["summary"] == []

    missing = await async_client.get("/api/admin/users/user-missing/analytics", headers=admin_headers)
    assert missing.status_code == 404
