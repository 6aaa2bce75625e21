"""
Resend Invitation Use Case

Dispatches the invitation notice again, e.g. after a delivery timeout.
"""

from typing import Optional
from uuid import UUID

from src.app.services.clock import Clock, SystemClock
from src.app.services.invitation_display import resolve_display_names
from src.app.services.invitation_notifier import (
    IInvitationNotifier,
    InvitationNotice,
    dispatch_notice,
)
from src.app.services.invitation_policy import InvitationPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, InvitationStatus
from src.domain.invitation_state import is_expired
from src.domain.result import Error, Result, Return

from .dtos import ResendInvitationResponse


class ResendInvitationUseCase:
    """
    Use case for re-sending a pending invitation.

    Business Rules:
    - Only a pending, unexpired invitation can be resent
    - Credentials and expires_at are left untouched
    - Delivery outcome is reported, never assumed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: IInvitationNotifier,
        policy: Optional[InvitationPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.notifier = notifier
        self.policy = policy or InvitationPolicy()
        self.clock = clock or SystemClock()

    async def execute(
        self, user_id: Optional[UUID], invitation_id: UUID
    ) -> Result[ResendInvitationResponse]:
        """
        Execute resend invitation use case.

        Args:
            user_id: Identity asking for the resend
            invitation_id: ID of the invitation to resend

        Returns:
            Result with ResendInvitationResponse DTO, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)

            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            if invitation.status != InvitationStatus.pending:
                return Return.err(
                    Error(
                        "INVITATION_CONFLICT",
                        f"Cannot resend an invitation that is {invitation.status.value}",
                    )
                )

            now = self.clock.now()
            if is_expired(invitation, now):
                return Return.err(Error("INVITATION_EXPIRED", "Invitation has expired"))

            organization_name, team_name = await resolve_display_names(
                self.uow, invitation
            )

            audit = AuditEvent(
                organization_id=invitation.organization_id,
                user_id=user_id,
                action="invitation_resent",
                event_metadata={"invitation_id": str(invitation.id)},
                created_at=now,
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

        notice = InvitationNotice(
            invitation_id=invitation.id,
            email=invitation.email,
            full_name=invitation.full_name,
            organization_name=organization_name,
            team_name=team_name,
            role=invitation.role.value,
            personal_message=invitation.personal_message,
            accept_url=self.policy.accept_url(invitation.token),
            invitation_code=invitation.invitation_code,
            expires_at=invitation.expires_at,
        )
        notification_sent = await dispatch_notice(
            self.notifier, notice, self.policy.notifier_timeout_seconds
        )

        return Return.ok(
            ResendInvitationResponse(
                invitation_id=str(invitation.id),
                status=invitation.status.value,
                expires_at=invitation.expires_at,
                notification_sent=notification_sent,
            )
        )
