from datetime import timedelta

import pytest

from src.app.use_cases.invitations import LookupInvitationUseCase
from src.domain.entities import InvitationStatus

from tests.fixtures.factories import make_invitation, make_organization, make_team


@pytest.fixture
def use_case(mock_uow, clock):
    return LookupInvitationUseCase(mock_uow, clock=clock)


@pytest.mark.asyncio
async def test_lookup_by_token_returns_enriched_invitation(use_case, mock_uow, clock):
    organization = make_organization()
    team = make_team(organization)
    invitation = make_invitation(organization, team=team, created_at=clock.now())
    mock_uow.invitations.get_by_token.return_value = invitation
    mock_uow.organizations.get_by_id.return_value = organization
    mock_uow.teams.get_by_id.return_value = team

    result = await use_case.by_token(invitation.token)

    assert result.is_ok()
    found = result.value
    assert found.id == str(invitation.id)
    assert found.email == "alice@example.com"
    assert found.organization_name == "Acme Corp"
    assert found.team_name == "Platform"
    assert found.status == "pending"
    dumped = found.model_dump()
    assert "token" not in dumped
    assert "invitation_code" not in dumped
    mock_uow.invitations.update_status.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_lookup_by_code_behaves_like_token(use_case, mock_uow, clock):
    organization = make_organization()
    invitation = make_invitation(organization, created_at=clock.now())
    mock_uow.invitations.get_by_code.return_value = invitation
    mock_uow.organizations.get_by_id.return_value = organization

    result = await use_case.by_code(invitation.invitation_code)

    assert result.is_ok()
    assert result.value.id == str(invitation.id)
    assert result.value.team_name is None
    mock_uow.invitations.get_by_code.assert_called_once_with(invitation.invitation_code)


@pytest.mark.asyncio
async def test_missing_organization_name_falls_back(use_case, mock_uow, clock):
    invitation = make_invitation(created_at=clock.now())
    mock_uow.invitations.get_by_token.return_value = invitation
    mock_uow.organizations.get_by_id.return_value = make_organization(name=None)

    result = await use_case.by_token(invitation.token)

    assert result.value.organization_name == "Unknown Organization"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_token_required(use_case, mock_uow, token):
    result = await use_case.by_token(token)

    assert result.error.code == "TOKEN_REQUIRED"
    assert result.error.message == "Token is required"
    mock_uow.invitations.get_by_token.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [None, ""])
async def test_code_required(use_case, code):
    result = await use_case.by_code(code)

    assert result.error.code == "CODE_REQUIRED"
    assert result.error.message == "Invitation code is required"


@pytest.mark.asyncio
async def test_unknown_token_is_not_found(use_case, mock_uow):
    mock_uow.invitations.get_by_token.return_value = None

    result = await use_case.by_token("does-not-exist")

    assert result.error.code == "INVITATION_NOT_FOUND"
    assert result.error.message == "Invitation not found or invalid"


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
async def test_terminal_invitation_looks_absent(use_case, mock_uow, clock, status):
    mock_uow.invitations.get_by_token.return_value = make_invitation(
        status=status, created_at=clock.now()
    )

    result = await use_case.by_token("some-token")

    assert result.error.code == "INVITATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_pending_past_expiry_is_expired(use_case, mock_uow, clock):
    invitation = make_invitation(
        created_at=clock.now() - timedelta(days=8),
        expires_at=clock.now() - timedelta(days=1),
    )
    mock_uow.invitations.get_by_token.return_value = invitation

    result = await use_case.by_token(invitation.token)

    assert result.error.code == "INVITATION_EXPIRED"
    assert result.error.message == "Invitation has expired"
    assert invitation.status == InvitationStatus.pending
    mock_uow.invitations.update_status.assert_not_called()


@pytest.mark.asyncio
async def test_expiry_instant_counts_as_expired(use_case, mock_uow, clock):
    invitation = make_invitation(
        created_at=clock.now() - timedelta(days=7), expires_at=clock.now()
    )
    mock_uow.invitations.get_by_code.return_value = invitation

    result = await use_case.by_code(invitation.invitation_code)

    assert result.error.code == "INVITATION_EXPIRED"
