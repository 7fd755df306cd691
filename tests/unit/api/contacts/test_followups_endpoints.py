from datetime import timedelta

import pytest
from httpx import AsyncClient

from tracker.utils.datetime import utc_today


async def _contact_with_followups(client: AsyncClient, headers):
    contact = (
        await client.post("/api/contacts/", json={"name": "Alice", "email": "alice@x.com"}, headers=headers)
    ).json()["contact"]
    today = utc_today()
    logs = {}
    for label, due in (("overdue", today - timedelta(days=2)), ("today", today), ("later", today + timedelta(days=5))):
        response = await client.post(
            f"/api/contacts/{contact['id']}/log",
            json={"follow_up_date": due.isoformat(), "notes": label},
            headers=headers,
        )
        logs[label] = response.json()
    # A log without a follow-up never shows up
    await client.post(f"/api/contacts/{contact['id']}/log", json={"notes": "none"}, headers=headers)
    return contact, logs


@pytest.mark.asyncio
async def test_pending_followups_are_due_today_or_earlier(async_client: AsyncClient, user_headers):
    await _contact_with_followups(async_client, user_headers)

    response = await async_client.get("/api/contacts/followups/pending", headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert [f["notes"] for f in body] == ["overdue", "today"]
    assert body[0]["name"] == "Alice"
    assert body[0]["email"] == "alice@x.com"


@pytest.mark.asyncio
async def test_all_followups_sorted_by_date(async_client: AsyncClient, user_headers):
    await _contact_with_followups(async_client, user_headers)

    response = await async_client.get("/api/contacts/followups/all", headers=user_headers)

    assert [f["notes"] for f in response.json()] == ["overdue", "today", "later"]


@pytest.mark.asyncio
async def test_complete_followup(async_client: AsyncClient, user_headers):
    _, logs = await _contact_with_followups(async_client, user_headers)

    response = await async_client.patch(
        f"/api/contacts/followups/{logs['overdue']['id']}/complete", headers=user_headers
    )

    assert response.status_code == 200
    assert response.json()["follow_up_completed"] is True
    assert response.json()["follow_up_completed_at"] is not None
    assert response.json()["response"] == "pending"

    pending = await async_client.get("/api/contacts/followups/pending", headers=user_headers)
    assert [f["notes"] for f in pending.json()] == ["today"]


@pytest.mark.asyncio
async def test_complete_unknown_followup(async_client: AsyncClient, user_headers):
    response = await async_client.patch("/api/contacts/followups/log-missing/complete", headers=user_headers)
    assert response.status_code == 404
