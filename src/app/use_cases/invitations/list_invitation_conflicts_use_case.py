"""
List Invitation Conflicts Use Case

Groups an organization's open invitations by email and returns the groups
that hold more than one, for an admin to review.
"""

from collections import defaultdict
from typing import List, Optional
from uuid import UUID

from src.app.services.clock import Clock, SystemClock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.invitation_state import is_open
from src.domain.result import Error, Result, Return

from .dtos import InvitationConflict, summarize


class ListInvitationConflictsUseCase:
    """
    Use case for surfacing duplicate pending invitations.

    Business Rules:
    - Only pending, unexpired invitations take part in a conflict
    - Emails are compared in their normalized (lowercased) form
    - Nothing is modified
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(self, organization_id: UUID) -> Result[List[InvitationConflict]]:
        async with self.uow:
            organization = await self.uow.organizations.get_by_id(organization_id)
            if organization is None:
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization does not exist")
                )

            now = self.clock.now()
            groups = defaultdict(list)
            for invitation in await self.uow.invitations.list_pending_by_organization(
                organization_id
            ):
                if is_open(invitation, now):
                    groups[invitation.email].append(invitation)

            return Return.ok(
                [
                    InvitationConflict(
                        email=email,
                        invitations=[summarize(inv, now) for inv in invitations],
                    )
                    for email, invitations in sorted(groups.items())
                    if len(invitations) > 1
                ]
            )
