from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.app.use_cases.invitations import RevokeInvitationUseCase
from src.domain.entities import InvitationStatus

from tests.fixtures.factories import make_invitation, make_organization, status_updater


@pytest.fixture
def organization():
    return make_organization()


@pytest.fixture
def invitation(mock_uow, clock, organization):
    invitation = make_invitation(organization, created_at=clock.now())
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.invitations.update_status.side_effect = status_updater(invitation)
    return invitation


@pytest.fixture
def use_case(mock_uow, clock):
    return RevokeInvitationUseCase(mock_uow, clock=clock)


@pytest.mark.asyncio
async def test_revoke_supersedes_pending_invitation(
    use_case, mock_uow, clock, organization, invitation
):
    admin_id = uuid4()

    result = await use_case.execute(admin_id, organization.id, invitation.id)

    assert result.is_ok()
    assert result.value.invitation_id == str(invitation.id)
    assert result.value.status == "superseded"
    assert invitation.status == InvitationStatus.superseded
    assert invitation.updated_at == clock.now()

    audit = mock_uow.audit_events.create.call_args[0][0]
    assert audit.action == "invitation_revoked"
    assert audit.user_id == admin_id
    assert audit.organization_id == organization.id
    assert audit.event_metadata["invitation_id"] == str(invitation.id)
    assert invitation.token not in str(audit.event_metadata)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_revoke_overdue_pending_invitation(
    use_case, clock, organization, invitation
):
    clock.advance(days=8)

    result = await use_case.execute(uuid4(), organization.id, invitation.id)

    assert result.is_ok()
    assert invitation.status == InvitationStatus.superseded


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status",
    [
        InvitationStatus.accepted,
        InvitationStatus.rejected,
        InvitationStatus.expired,
        InvitationStatus.superseded,
    ],
)
async def test_revoke_terminal_invitation_conflicts(
    use_case, mock_uow, organization, invitation, status
):
    invitation.status = status

    result = await use_case.execute(uuid4(), organization.id, invitation.id)

    assert result.error.code == "INVITATION_CONFLICT"
    assert status.value in result.error.message
    assert invitation.status == status
    mock_uow.invitations.update_status.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_revoke_unknown_invitation(use_case, mock_uow, organization):
    mock_uow.invitations.get_by_id.return_value = None

    result = await use_case.execute(uuid4(), organization.id, uuid4())

    assert result.error.code == "INVITATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_revoke_through_another_organization(use_case, mock_uow, invitation):
    result = await use_case.execute(uuid4(), uuid4(), invitation.id)

    assert result.error.code == "INVITATION_NOT_FOUND"
    assert invitation.status == InvitationStatus.pending
    mock_uow.invitations.update_status.assert_not_called()


@pytest.mark.asyncio
async def test_revoke_losing_race_rolls_back(
    use_case, mock_uow, organization, invitation
):
    mock_uow.invitations.update_status = AsyncMock(return_value=None)

    result = await use_case.execute(uuid4(), organization.id, invitation.id)

    assert result.error.code == "INVITATION_CONFLICT"
    mock_uow.rollback.assert_called_once()
    mock_uow.audit_events.create.assert_not_called()
    mock_uow.commit.assert_not_called()
