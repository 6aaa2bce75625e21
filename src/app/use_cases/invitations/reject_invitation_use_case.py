"""
Reject Invitation Use Case

Lets the invitee decline an invitation.
"""

from typing import Optional

from src.app.services.clock import Clock, SystemClock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, InvitationStatus
from src.domain.invitation_state import InvitationEvent, is_expired, transition
from src.domain.result import Error, Result, Return

from .dtos import RejectInvitationResponse
from .lookup_invitation_use_case import INVITATION_EXPIRED, INVITATION_NOT_FOUND


class RejectInvitationUseCase:
    """
    Use case for declining an invitation.

    Business Rules:
    - Only a pending, unexpired invitation can be rejected
    - Not-found and expired outcomes match the lookup endpoints
    - A concurrent state change turns the rejection into INVITATION_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(self, token: Optional[str]) -> Result[RejectInvitationResponse]:
        if not token:
            return Return.err(Error("TOKEN_REQUIRED", "Token is required"))

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)

            if invitation is None or invitation.status != InvitationStatus.pending:
                return Return.err(INVITATION_NOT_FOUND)

            now = self.clock.now()
            if is_expired(invitation, now):
                return Return.err(INVITATION_EXPIRED)

            new_status = transition(invitation.status, InvitationEvent.reject)
            if new_status.is_err():
                return Return.err(new_status.error)

            rejected = await self.uow.invitations.update_status(
                invitation.id, new_status.value, updated_at=now, unexpired_at=now
            )
            if rejected is None:
                await self.uow.rollback()
                return Return.err(INVITATION_NOT_FOUND)

            audit = AuditEvent(
                organization_id=rejected.organization_id,
                action="invitation_rejected",
                event_metadata={"invitation_id": str(rejected.id)},
                created_at=now,
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                RejectInvitationResponse(
                    invitation_id=str(rejected.id), status=rejected.status.value
                )
            )
