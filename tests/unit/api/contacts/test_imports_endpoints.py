import pytest
from httpx import AsyncClient

from tracker.core.config import settings

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ROWS = [
    ["Full Name", "E-mail", "Mobile Number", "Company", "Job Title"],
    ["Alice", "alice@x.com", "111-222-333", "Acme", "CTO"],
    ["Bob", "", "222-333-444", "Globex", "VP"],
    ["Carol", "carol@x.com", "", "Initech", ""],
]


async def _upload(client: AsyncClient, headers, workbook_bytes, rows=ROWS, filename="contacts.xlsx"):
    files = {"file": (filename, workbook_bytes(rows), XLSX_TYPE)}
    return await client.post("/api/contacts/import", files=files, headers=headers)


@pytest.mark.asyncio
async def test_import_workbook(async_client: AsyncClient, user_headers, workbook_bytes):
    response = await _upload(async_client, user_headers, workbook_bytes)

    assert response.status_code == 200
    assert response.json() == {"added": 3, "skipped": 0, "errors": []}

    contacts = (await async_client.get("/api/contacts/", headers=user_headers)).json()
    by_name = {c["name"]: c for c in contacts}
    assert by_name["Alice"]["designation"] == "CTO"
    assert by_name["Bob"]["email"] is None
    assert by_name["Carol"]["import_id"].startswith("import-")


@pytest.mark.asyncio
async def test_reimport_skips_everything(async_client: AsyncClient, user_headers, workbook_bytes):
    await _upload(async_client, user_headers, workbook_bytes)

    response = await _upload(async_client, user_headers, workbook_bytes)

    assert response.json() == {"added": 0, "skipped": 3, "errors": []}
    count = await async_client.get("/api/contacts/count", headers=user_headers)
    assert count.json()["count"] == 3


@pytest.mark.asyncio
async def test_import_skips_rows_matching_manual_contacts(async_client: AsyncClient, user_headers, workbook_bytes):
    await async_client.post(
        "/api/contacts/", json={"name": "Bobby", "phone": "222-333-444"}, headers=user_headers
    )

    response = await _upload(async_client, user_headers, workbook_bytes)

    assert response.json()["added"] == 2
    assert response.json()["skipped"] == 1


@pytest.mark.asyncio
async def test_import_rejects_unsupported_extension(async_client: AsyncClient, user_headers):
    files = {"file": ("contacts.csv", b"name,email\nA,a@x.com\n", "text/csv")}
    response = await async_client.post("/api/contacts/import", files=files, headers=user_headers)

    assert response.status_code == 422
    assert response.json()["status"] == "error"
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_import_rejects_corrupt_workbook(async_client: AsyncClient, user_headers):
    files = {"file": ("broken.xlsx", b"definitely not a zip archive", XLSX_TYPE)}
    response = await async_client.post("/api/contacts/import", files=files, headers=user_headers)

    assert response.status_code == 422
    imports = await async_client.get("/api/contacts/imports", headers=user_headers)
    assert imports.json() == []


@pytest.mark.asyncio
async def test_import_rejects_oversized_upload(async_client: AsyncClient, user_headers, workbook_bytes, monkeypatch):
    monkeypatch.setattr(settings, "IMPORT_MAX_FILE_SIZE", 64)

    response = await _upload(async_client, user_headers, workbook_bytes)

    assert response.status_code == 413
    assert response.json()["code"] == "PAYLOAD_TOO_LARGE"


@pytest.mark.asyncio
async def test_import_requires_authentication(async_client: AsyncClient, workbook_bytes):
    files = {"file": ("contacts.xlsx", workbook_bytes(ROWS), XLSX_TYPE)}
    response = await async_client.post("/api/contacts/import", files=files)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_imports_with_contact_counts(async_client: AsyncClient, user_headers, workbook_bytes):
    await _upload(async_client, user_headers, workbook_bytes, filename="first.xlsx")
    second = ROWS[:1] + [["Dan", "dan@x.com", "", "", ""]]
    await _upload(async_client, user_headers, workbook_bytes, rows=second, filename="second.xlsx")

    response = await async_client.get("/api/contacts/imports", headers=user_headers)

    assert response.status_code == 200
    imports = response.json()
    assert [i["filename"] for i in imports] == ["second.xlsx", "first.xlsx"]
    assert imports[0]["contact_count"] == 1
    assert imports[1]["contact_count"] == 3
    assert imports[1]["added_count"] == 3


@pytest.mark.asyncio
async def test_import_contacts_listing(async_client: AsyncClient, user_headers, workbook_bytes):
    await _upload(async_client, user_headers, workbook_bytes)
    import_id = (await async_client.get("/api/contacts/imports", headers=user_headers)).json()[0]["id"]

    response = await async_client.get(f"/api/contacts/imports/{import_id}/contacts", headers=user_headers)

    assert response.status_code == 200
    assert sorted(c["name"] for c in response.json()) == ["Alice", "Bob", "Carol"]


@pytest.mark.asyncio
async def test_delete_import_cascades(async_client: AsyncClient, user_headers, workbook_bytes):
    manual = (
        await async_client.post("/api/contacts/", json={"name": "Manual", "email": "m@x.com"}, headers=user_headers)
    ).json()["contact"]
    await _upload(async_client, user_headers, workbook_bytes)
    import_id = (await async_client.get("/api/contacts/imports", headers=user_headers)).json()[0]["id"]
    imported = (
        await async_client.get(f"/api/contacts/imports/{import_id}/contacts", headers=user_headers)
    ).json()
    alice = next(c for c in imported if c["name"] == "Alice")
    await async_client.post(f"/api/contacts/{alice['id']}/log", json={"notes": "hello"}, headers=user_headers)
    await async_client.post(
        "/api/requirements/", json={"contact_id": alice["id"], "role": "QA"}, headers=user_headers
    )

    response = await async_client.delete(f"/api/contacts/imports/{import_id}", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["deleted_contacts"] == 3
    remaining = (await async_client.get("/api/contacts/", headers=user_headers)).json()
    assert [c["id"] for c in remaining] == [manual["id"]]
    assert (await async_client.get("/api/requirements/", headers=user_headers)).json() == []
    assert (await async_client.get("/api/contacts/imports", headers=user_headers)).json() == []
    listing = await async_client.get(f"/api/contacts/imports/{import_id}/contacts", headers=user_headers)
    assert listing.json() == []


@pytest.mark.asyncio
async def test_delete_unknown_import(async_client: AsyncClient, user_headers):
    response = await async_client.delete("/api/contacts/imports/import-missing", headers=user_headers)
    assert response.status_code == 404
