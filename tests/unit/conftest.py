import pytest
from unittest.mock import AsyncMock, MagicMock

from tests.fixtures.clock import FixedClock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.organizations = MagicMock()
    uow.organizations.get_by_id = AsyncMock()

    uow.teams = MagicMock()
    uow.teams.get_by_id = AsyncMock(return_value=None)

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock()
    uow.invitations.get_by_token = AsyncMock()
    uow.invitations.get_by_code = AsyncMock()
    uow.invitations.insert = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.update_status = AsyncMock()
    uow.invitations.find_pending_by_email_and_org = AsyncMock(return_value=[])
    uow.invitations.list_pending_by_organization = AsyncMock(return_value=[])
    uow.invitations.expire_overdue = AsyncMock(return_value=0)
    uow.invitations.find_stale_ids = AsyncMock(return_value=[])
    uow.invitations.delete_batch = AsyncMock(return_value=0)

    uow.memberships = MagicMock()
    uow.memberships.get_by_user_and_organization = AsyncMock(return_value=None)
    uow.memberships.get_active_by_email_and_organization = AsyncMock(return_value=None)
    uow.memberships.get_active_by_user_id = AsyncMock(return_value=[])
    uow.memberships.create = AsyncMock(side_effect=lambda membership: membership)
    uow.memberships.update = AsyncMock(side_effect=lambda membership: membership)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send_invitation = AsyncMock()
    return notifier
