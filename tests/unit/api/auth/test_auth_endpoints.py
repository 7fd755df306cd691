import pytest
from httpx import AsyncClient

TEST_PASSWORD = "secret123"


@pytest.mark.asyncio
async def test_register_creates_plain_user(async_client: AsyncClient):
    response = await async_client.post(
        "/api/auth/register",
        json={"name": "New Person", "email": "New@Example.com", "password": "hunter22"},
    )
    assert response.status_code == 201
    assert response.json()["user_id"].startswith("user-")

    login = await async_client.post(
        "/api/auth/login", json={"email": "new@example.com", "password": "hunter22"}
    )
    assert login.status_code == 200
    assert login.json()["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_register_duplicate_email_conflicts(async_client: AsyncClient, users):
    response = await async_client.post(
        "/api/auth/register",
        json={"name": "Again", "email": "user@example.com", "password": "hunter22"},
    )
    assert response.status_code == 409
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_register_short_password_rejected(async_client: AsyncClient):
    response = await async_client.post(
        "/api/auth/register",
        json={"name": "Shorty", "email": "short@example.com", "password": "123"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_sets_refresh_cookie(async_client: AsyncClient, users):
    response = await async_client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "admin@example.com"
    assert "jid" in response.cookies


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient, users):
    response = await async_client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": "wrong-pass"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_oauth2_token_form(async_client: AsyncClient, users):
    response = await async_client.post(
        "/api/auth/token", data={"username": "user@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["access_token"]


@pytest.mark.asyncio
async def test_refresh_uses_cookie(async_client: AsyncClient, users):
    login = await async_client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": TEST_PASSWORD}
    )
    assert "jid" in login.cookies

    # The client keeps the http-only cookie from login
    response = await async_client.post("/api/auth/refresh")
    assert response.status_code == 200

    me = await async_client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {response.json()['access_token']}"}
    )
    assert me.json()["email"] == "user@example.com"


@pytest.mark.asyncio
async def test_refresh_without_cookie(async_client: AsyncClient):
    response = await async_client.post("/api/auth/refresh")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(async_client: AsyncClient, users):
    login = await async_client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": TEST_PASSWORD}
    )
    response = await async_client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {login.cookies['jid']}"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_token(async_client: AsyncClient):
    response = await async_client.get("/api/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_current_user(async_client: AsyncClient, admin_headers):
    response = await async_client.get("/api/auth/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["auth_provider"] == "local"


@pytest.mark.asyncio
async def test_inactive_user_rejected(async_client: AsyncClient, users, user_headers, superadmin_headers):
    await async_client.patch(
        f"/api/admin/users/{users['user'].id}/status",
        json={"is_active": False},
        headers=superadmin_headers,
    )

    response = await async_client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(async_client: AsyncClient):
    response = await async_client.post("/api/auth/logout")
    assert response.status_code == 200
    assert "jid" in response.headers.get("set-cookie", "")
