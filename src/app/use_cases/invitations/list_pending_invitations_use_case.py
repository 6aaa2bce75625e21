"""
List Pending Invitations Use Case

Admin dashboard view of an organization's pending invitations.
"""

from typing import List, Optional
from uuid import UUID

from src.app.services.clock import Clock, SystemClock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Error, Result, Return

from .dtos import InvitationSummary, summarize


class ListPendingInvitationsUseCase:
    """Pending invitations of an organization, oldest first, with computed expiry"""

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(self, organization_id: UUID) -> Result[List[InvitationSummary]]:
        async with self.uow:
            organization = await self.uow.organizations.get_by_id(organization_id)
            if organization is None:
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization does not exist")
                )

            now = self.clock.now()
            invitations = await self.uow.invitations.list_pending_by_organization(
                organization_id
            )
            return Return.ok([summarize(inv, now) for inv in invitations])
