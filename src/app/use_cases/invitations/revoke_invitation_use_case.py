"""
Revoke Invitation Use Case

Withdraws a pending invitation on behalf of an organization administrator.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.clock import Clock, SystemClock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, InvitationStatus
from src.domain.invitation_state import InvitationEvent, transition
from src.domain.result import Error, Result, Return

from .dtos import RevokeInvitationResponse

logger = logging.getLogger(__name__)

INVITATION_NOT_FOUND = Error("INVITATION_NOT_FOUND", "Invitation not found")


class RevokeInvitationUseCase:
    """
    Use case for revoking a pending invitation.

    Business Rules:
    - The invitation must belong to the given organization; otherwise it is
      reported as not found
    - Only a pending invitation can be revoked; accepted, rejected, expired
      and superseded ones yield INVITATION_CONFLICT
    - A pending invitation past expires_at can still be revoked
    - Revocation moves the invitation to superseded through the state machine
      and records an invitation_revoked audit event
    - Losing a race against acceptance or rejection yields INVITATION_CONFLICT
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(
        self, user_id: Optional[UUID], organization_id: UUID, invitation_id: UUID
    ) -> Result[RevokeInvitationResponse]:
        """
        Execute revoke invitation use case.

        Args:
            user_id: Administrator revoking the invitation
            organization_id: Organization the invitation must belong to
            invitation_id: ID of the invitation to revoke

        Returns:
            Result with RevokeInvitationResponse DTO, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)

            if invitation is None or invitation.organization_id != organization_id:
                return Return.err(INVITATION_NOT_FOUND)

            if invitation.status != InvitationStatus.pending:
                return Return.err(_cannot_revoke(invitation.status))

            new_status = transition(invitation.status, InvitationEvent.supersede)
            if new_status.is_err():
                return Return.err(new_status.error)

            now = self.clock.now()
            revoked = await self.uow.invitations.update_status(
                invitation_id, new_status.value, updated_at=now
            )
            if revoked is None:
                await self.uow.rollback()
                logger.info("Revocation lost race (invitation_id=%s)", invitation_id)
                return Return.err(
                    Error("INVITATION_CONFLICT", "Invitation is no longer pending")
                )

            audit = AuditEvent(
                organization_id=organization_id,
                user_id=user_id,
                action="invitation_revoked",
                event_metadata={
                    "invitation_id": str(invitation_id),
                    "email": revoked.email,
                },
                created_at=now,
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                RevokeInvitationResponse(
                    invitation_id=str(invitation_id), status=revoked.status.value
                )
            )


def _cannot_revoke(status: InvitationStatus) -> Error:
    return Error(
        "INVITATION_CONFLICT", f"Cannot revoke an invitation that is {status.value}"
    )
