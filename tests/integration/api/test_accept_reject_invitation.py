from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlmodel import select

from config import ApplicationConfig
from src.domain.entities import AuditEvent, JoinMethod, Membership, MembershipRole
from tests.fixtures.api import auth_headers, create_invitation, fetch_invitation


@pytest.mark.asyncio
async def test_accept_invitation_end_to_end(
    client: AsyncClient, db_session, organization, inviter_headers, clock
):
    """Alice is invited as manager, accepts, and becomes a manager of the organization"""
    created = await create_invitation(
        client, organization["id"], inviter_headers, team_id=organization["team_id"]
    )
    alice_id = uuid4()

    response = await client.post(
        "/invitations/accept",
        json={"token": created["token"]},
        headers=auth_headers("alice@example.com", alice_id),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["invitation_id"] == created["id"]
    assert data["status"] == "accepted"
    assert data["membership_reactivated"] is False
    membership = data["membership"]
    assert membership["user_id"] == str(alice_id)
    assert membership["organization_id"] == organization["id"]
    assert membership["organization_name"] == "Acme Corp"
    assert membership["role"] == "manager"
    assert membership["team_id"] == organization["team_id"]
    assert membership["is_active"] is True
    assert membership["is_default"] is True
    assert membership["joined_via"] == "invitation"

    invitation = await fetch_invitation(db_session, created["id"])
    assert invitation.status.value == "accepted"
    assert invitation.accepted_at == clock.now()

    result = await db_session.exec(
        select(AuditEvent).where(AuditEvent.action == "invitation_accepted")
    )
    events = result.all()
    assert len(events) == 1
    assert created["token"] not in str(events[0].event_metadata)


@pytest.mark.asyncio
async def test_accept_twice(client: AsyncClient, organization, inviter_headers):
    created = await create_invitation(client, organization["id"], inviter_headers)
    headers = auth_headers("alice@example.com")

    body = {"token": created["token"]}

    first = await client.post("/invitations/accept", json=body, headers=headers)
    second = await client.post("/invitations/accept", json=body, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "INVITATION_CONFLICT"


@pytest.mark.asyncio
async def test_accept_with_other_email(
    client: AsyncClient, db_session, organization, inviter_headers
):
    created = await create_invitation(client, organization["id"], inviter_headers)

    response = await client.post(
        "/invitations/accept",
        json={"token": created["token"]},
        headers=auth_headers("mallory@example.com"),
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "EMAIL_MISMATCH"
    invitation = await fetch_invitation(db_session, created["id"])
    assert invitation.status.value == "pending"


@pytest.mark.asyncio
async def test_accept_after_expiry_marks_expired(
    client: AsyncClient, db_session, organization, inviter_headers, clock
):
    created = await create_invitation(client, organization["id"], inviter_headers)
    clock.advance(days=7)

    response = await client.post(
        "/invitations/accept",
        json={"token": created["token"]},
        headers=auth_headers("alice@example.com"),
    )

    assert response.status_code == 410
    assert response.json()["error"]["code"] == "INVITATION_EXPIRED"
    invitation = await fetch_invitation(db_session, created["id"])
    assert invitation.status.value == "expired"
    result = await db_session.exec(select(Membership))
    assert result.all() == []


@pytest.mark.asyncio
async def test_accept_reactivates_inactive_membership(
    client: AsyncClient, db_session, organization, inviter_headers, clock
):
    alice_id = uuid4()
    former = Membership(
        id=uuid4(),
        user_id=alice_id,
        email="alice@example.com",
        organization_id=UUID(organization["id"]),
        role=MembershipRole.employee,
        is_active=False,
        joined_via=JoinMethod.created,
        created_at=clock.now(),
        updated_at=clock.now(),
    )
    former_id = former.id
    db_session.add(former)
    await db_session.commit()

    created = await create_invitation(client, organization["id"], inviter_headers)
    response = await client.post(
        "/invitations/accept",
        json={"token": created["token"]},
        headers=auth_headers("alice@example.com", alice_id),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["membership_reactivated"] is True
    assert data["membership"]["id"] == str(former_id)
    assert data["membership"]["role"] == "manager"
    assert data["membership"]["is_active"] is True
    assert data["membership"]["joined_via"] == "invitation"

    result = await db_session.exec(
        select(Membership).where(Membership.user_id == alice_id)
    )
    assert len(result.all()) == 1


@pytest.mark.asyncio
async def test_accept_requires_authentication(client: AsyncClient, organization, inviter_headers):
    created = await create_invitation(client, organization["id"], inviter_headers)

    missing = await client.post("/invitations/accept", json={"token": created["token"]})
    garbage = await client.post(
        "/invitations/accept",
        json={"token": created["token"]},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert missing.status_code == 401
    assert garbage.status_code == 401


@pytest.mark.asyncio
async def test_accept_without_token(client: AsyncClient):
    response = await client.post(
        "/invitations/accept", json={}, headers=auth_headers("alice@example.com")
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TOKEN_REQUIRED"


@pytest.mark.asyncio
async def test_reject_invitation(client: AsyncClient, db_session, organization, inviter_headers):
    created = await create_invitation(client, organization["id"], inviter_headers)

    response = await client.post("/invitations/reject", json={"token": created["token"]})

    assert response.status_code == 200
    assert response.json() == {"invitation_id": created["id"], "status": "rejected"}
    invitation = await fetch_invitation(db_session, created["id"])
    assert invitation.status.value == "rejected"

    accept = await client.post(
        "/invitations/accept",
        json={"token": created["token"]},
        headers=auth_headers("alice@example.com"),
    )
    assert accept.status_code == 409


@pytest.mark.asyncio
async def test_reinvite_after_rejection(client: AsyncClient, organization, inviter_headers):
    first = await create_invitation(client, organization["id"], inviter_headers)
    await client.post("/invitations/reject", json={"token": first["token"]})

    second = await create_invitation(client, organization["id"], inviter_headers)

    assert second["conflicting_invitation_ids"] == []
    lookup = await client.get("/invitations/lookup", params={"token": second["token"]})
    assert lookup.status_code == 200


@pytest.mark.asyncio
async def test_resend_invitation(
    client: AsyncClient, organization, inviter_headers, clock, notifier
):
    created = await create_invitation(client, organization["id"], inviter_headers)
    clock.advance(days=3)

    response = await client.post(
        f"/invitations/{created['id']}/resend", headers=inviter_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["notification_sent"] is True
    assert data["expires_at"] == created["expires_at"]
    assert len(notifier.notices) == 2
    assert notifier.notices[1].invitation_code == created["invitation_code"]


@pytest.mark.asyncio
async def test_reinvite_after_acceptance_and_expiry(
    client: AsyncClient, organization, inviter_headers, clock
):
    accepted = await create_invitation(client, organization["id"], inviter_headers)
    await client.post(
        "/invitations/accept",
        json={"token": accepted["token"]},
        headers=auth_headers("alice@example.com"),
    )
    expired = await create_invitation(
        client, organization["id"], inviter_headers, email="bob@example.com"
    )
    clock.advance(days=7)

    again_alice = await create_invitation(client, organization["id"], inviter_headers)
    again_bob = await create_invitation(
        client, organization["id"], inviter_headers, email="bob@example.com"
    )

    assert again_alice["conflicting_invitation_ids"] == []
    assert again_bob["conflicting_invitation_ids"] == []
    assert again_bob["id"] != expired["id"]
    lookup = await client.get("/invitations/lookup", params={"token": again_bob["token"]})
    assert lookup.status_code == 200


def _token_with_claims(**claims) -> dict:
    payload = {"exp": datetime.now(UTC) + timedelta(minutes=5), **claims}
    token = jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "claims",
    [
        {"user_id": 123, "email": "alice@example.com"},
        {"user_id": ["not", "a", "uuid"], "email": "alice@example.com"},
        {"user_id": "not-a-uuid", "email": "alice@example.com"},
        {"user_id": str(uuid4()), "email": 42},
    ],
)
async def test_malformed_identity_claims_are_unauthorized(
    client: AsyncClient, organization, inviter_headers, claims
):
    created = await create_invitation(client, organization["id"], inviter_headers)
    headers = _token_with_claims(**claims)

    accept = await client.post(
        "/invitations/accept", json={"token": created["token"]}, headers=headers
    )
    create = await client.post(
        f"/organizations/{organization['id']}/invitations",
        json={"email": "bob@example.com", "full_name": "Bob", "role": "employee"},
        headers=headers,
    )

    assert accept.status_code == 401
    assert accept.json()["error"]["code"] == "UNAUTHORIZED"
    assert create.status_code == 401
