"""
Accept Invitation Use Case

Turns a pending, unexpired invitation plus an authenticated identity into
an active organization membership.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.repositories.errors import DuplicateKeyError
from src.app.services.clock import Clock, SystemClock
from src.app.services.invitation_display import UNKNOWN_ORGANIZATION
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email
from src.domain.entities import (
    AuditEvent,
    InvitationStatus,
    JoinMethod,
    Membership,
)
from src.domain.invitation_state import InvitationEvent, is_expired, transition
from src.domain.result import Error, Result, Return

from .dtos import AcceptInvitationResponse, MembershipInfo

logger = logging.getLogger(__name__)

ALREADY_ACCEPTED = Error(
    "INVITATION_CONFLICT", "This invitation has already been accepted"
)
NO_LONGER_PENDING = Error("INVITATION_CONFLICT", "This invitation is no longer valid")


class AcceptInvitationUseCase:
    """
    Use case for accepting an organization invitation.

    Business Rules:
    - Invitation must be pending and unexpired at the moment of acceptance
    - A pending invitation found past expiry is marked expired on the spot
    - The accepting identity's email must equal the invitation email
    - An existing membership (active or not) is reactivated in place with
      the invitation's role and team; otherwise a new one is created
    - The first active membership of an identity becomes its default
    - The status compare-and-set is the linearization point: of two racing
      acceptances exactly one wins, the other gets INVITATION_CONFLICT
    - Membership change and status change commit together or not at all
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(
        self, token: Optional[str], user_id: UUID, user_email: str
    ) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            token: Invitation token presented by the caller
            user_id: Authenticated identity accepting the invitation
            user_email: Email of the authenticated identity

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        if not token:
            return Return.err(Error("TOKEN_REQUIRED", "Token is required"))

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)

            if invitation is None:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found or invalid")
                )

            invitation_id = invitation.id

            if invitation.status == InvitationStatus.accepted:
                return Return.err(ALREADY_ACCEPTED)

            if invitation.status != InvitationStatus.pending:
                return Return.err(NO_LONGER_PENDING)

            now = self.clock.now()

            if is_expired(invitation, now):
                expired = transition(invitation.status, InvitationEvent.expire)
                if expired.is_err():
                    return Return.err(expired.error)
                await self.uow.invitations.update_status(
                    invitation_id, expired.value, updated_at=now
                )
                await self.uow.commit()
                return Return.err(Error("INVITATION_EXPIRED", "Invitation has expired"))

            if normalize_email(user_email or "") != invitation.email:
                return Return.err(
                    Error(
                        "EMAIL_MISMATCH",
                        "This invitation was issued to a different email address",
                    )
                )

            organization = await self.uow.organizations.get_by_id(
                invitation.organization_id
            )
            if organization is None:
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization does not exist")
                )

            new_status = transition(invitation.status, InvitationEvent.accept)
            if new_status.is_err():
                return Return.err(new_status.error)

            accepted = await self.uow.invitations.update_status(
                invitation.id,
                new_status.value,
                updated_at=now,
                accepted_at=now,
                unexpired_at=now,
            )
            if accepted is None:
                # Another request moved the invitation first
                await self.uow.rollback()
                logger.info(
                    "Acceptance lost race (invitation_id=%s)", invitation_id
                )
                return Return.err(ALREADY_ACCEPTED)

            membership = await self.uow.memberships.get_by_user_and_organization(
                user_id, accepted.organization_id
            )
            reactivated = membership is not None

            try:
                if membership is not None:
                    membership.email = accepted.email
                    membership.role = accepted.role
                    membership.team_id = accepted.team_id
                    membership.joined_via = JoinMethod.invitation
                    membership.is_active = True
                    membership.updated_at = now
                    membership = await self.uow.memberships.update(membership)
                else:
                    active = await self.uow.memberships.get_active_by_user_id(user_id)
                    membership = await self.uow.memberships.create(
                        Membership(
                            user_id=user_id,
                            email=accepted.email,
                            organization_id=accepted.organization_id,
                            team_id=accepted.team_id,
                            role=accepted.role,
                            is_active=True,
                            is_default=len(active) == 0,
                            joined_via=JoinMethod.invitation,
                            created_at=now,
                            updated_at=now,
                        )
                    )
            except DuplicateKeyError:
                await self.uow.rollback()
                logger.info(
                    "Membership already created concurrently (invitation_id=%s)",
                    invitation_id,
                )
                return Return.err(ALREADY_ACCEPTED)

            audit = AuditEvent(
                organization_id=accepted.organization_id,
                user_id=user_id,
                action="invitation_accepted",
                event_metadata={
                    "invitation_id": str(accepted.id),
                    "role": accepted.role.value,
                    "membership_reactivated": reactivated,
                },
                created_at=now,
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(
                "Invitation accepted (invitation_id=%s, organization_id=%s)",
                accepted.id,
                accepted.organization_id,
            )

            return Return.ok(
                AcceptInvitationResponse(
                    invitation_id=str(accepted.id),
                    status=accepted.status.value,
                    accepted_at=accepted.accepted_at,
                    membership=MembershipInfo(
                        id=str(membership.id),
                        user_id=str(membership.user_id),
                        organization_id=str(membership.organization_id),
                        organization_name=organization.name or UNKNOWN_ORGANIZATION,
                        role=membership.role.value,
                        team_id=str(membership.team_id) if membership.team_id else None,
                        is_active=membership.is_active,
                        is_default=membership.is_default,
                        joined_via=membership.joined_via.value,
                    ),
                    membership_reactivated=reactivated,
                )
            )
