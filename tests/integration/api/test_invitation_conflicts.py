import pytest
from httpx import AsyncClient

from tests.fixtures.api import create_invitation


@pytest.mark.asyncio
async def test_conflicts_are_listed_case_insensitively(
    client: AsyncClient, organization, inviter_headers, clock
):
    first = await create_invitation(
        client, organization["id"], inviter_headers, email="alice@example.com", role="employee"
    )
    clock.advance(minutes=5)
    second = await create_invitation(
        client, organization["id"], inviter_headers, email="ALICE@EXAMPLE.COM", role="admin"
    )
    await create_invitation(client, organization["id"], inviter_headers, email="bob@example.com")

    response = await client.get(
        f"/organizations/{organization['id']}/invitations/conflicts",
        headers=inviter_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["email"] == "alice@example.com"
    assert [item["id"] for item in data[0]["invitations"]] == [first["id"], second["id"]]


@pytest.mark.asyncio
async def test_resolve_keep_latest(client: AsyncClient, organization, inviter_headers, clock):
    older = await create_invitation(client, organization["id"], inviter_headers, role="admin")
    clock.advance(minutes=5)
    newer = await create_invitation(client, organization["id"], inviter_headers, role="employee")

    response = await client.post(
        f"/organizations/{organization['id']}/invitations/conflicts/resolve",
        json={"email": "Alice@Example.com", "strategy": "keep_latest"},
        headers=inviter_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data["kept"]] == [newer["id"]]
    assert [item["id"] for item in data["superseded"]] == [older["id"]]
    assert data["superseded"][0]["status"] == "superseded"

    superseded = await client.get("/invitations/lookup", params={"token": older["token"]})
    kept = await client.get("/invitations/lookup", params={"token": newer["token"]})
    assert superseded.status_code == 404
    assert kept.status_code == 200


@pytest.mark.asyncio
async def test_resolve_keep_highest_role(
    client: AsyncClient, organization, inviter_headers, clock
):
    admin = await create_invitation(client, organization["id"], inviter_headers, role="admin")
    clock.advance(minutes=5)
    employee = await create_invitation(
        client, organization["id"], inviter_headers, role="employee"
    )

    response = await client.post(
        f"/organizations/{organization['id']}/invitations/conflicts/resolve",
        json={"email": "alice@example.com", "strategy": "keep_highest_role"},
        headers=inviter_headers,
    )

    data = response.json()
    assert [item["id"] for item in data["kept"]] == [admin["id"]]
    assert [item["id"] for item in data["superseded"]] == [employee["id"]]


@pytest.mark.asyncio
async def test_resolve_with_unknown_strategy(client: AsyncClient, organization, inviter_headers):
    response = await client.post(
        f"/organizations/{organization['id']}/invitations/conflicts/resolve",
        json={"email": "alice@example.com", "strategy": "newest_wins"},
        headers=inviter_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_STRATEGY"
