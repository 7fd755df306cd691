import os

# Configure the app for tests before anything imports settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AZURE_AUTH_ENABLED"] = "true"
os.environ["AZURE_TENANT_ID"] = "test-tenant"
os.environ["AZURE_CLIENT_ID"] = "test-client"
os.environ["IMPORT_TEMP_CLEANUP_DELAY"] = "0"

from collections.abc import AsyncGenerator
from io import BytesIO
from typing import Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook

from tracker.core.security import create_access_token
from tracker.db.repositories.users import UserRepository
from tracker.db.session import (
    close_database_connections,
    get_repository_context,
    initialize_database,
)
from tracker.main import app

TEST_PASSWORD = "secret123"

TEST_USERS = {
    "user": {"name": "Una User", "email": "user@example.com", "role": "user"},
    "admin": {"name": "Ada Admin", "email": "admin@example.com", "role": "admin"},
    "superadmin": {"name": "Sam Super", "email": "super@example.com", "role": "superadmin"},
}


def build_workbook(rows) -> bytes:
    """Serialise rows into .xlsx bytes."""
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest_asyncio.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    # In-memory database lives as long as the pooled connection
    await initialize_database()
    yield
    await close_database_connections()


@pytest_asyncio.fixture()
async def users(database) -> Dict[str, object]:
    created = {}
    async with get_repository_context(UserRepository) as user_repo:
        for key, data in TEST_USERS.items():
            created[key] = await user_repo.create_user(
                name=data["name"],
                email=data["email"],
                password=TEST_PASSWORD,
                role=data["role"],
            )
    return created


def _auth_headers(user) -> Dict[str, str]:
    token, _ = create_access_token(data={"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user_headers(users) -> Dict[str, str]:
    return _auth_headers(users["user"])


@pytest.fixture()
def admin_headers(users) -> Dict[str, str]:
    return _auth_headers(users["admin"])


@pytest.fixture()
def superadmin_headers(users) -> Dict[str, str]:
    return _auth_headers(users["superadmin"])


@pytest_asyncio.fixture()
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://testserver", transport=transport) as client:
        yield client


@pytest.fixture()
def xlsx_file(tmp_path):
    """Write rows to a workbook on disk and return its path."""
    def _write(rows, name: str = "contacts.xlsx") -> str:
        path = tmp_path / name
        path.write_bytes(build_workbook(rows))
        return str(path)
    return _write


@pytest.fixture()
def workbook_bytes():
    """Serialise rows into .xlsx bytes for upload tests."""
    return build_workbook
