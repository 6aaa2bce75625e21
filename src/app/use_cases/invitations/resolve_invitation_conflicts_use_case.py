"""
Resolve Invitation Conflicts Use Case

Applies a caller-selected strategy to the open invitations of one
(email, organization) pair.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.clock import Clock, SystemClock
from src.app.services.conflict_resolution import get_resolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email
from src.domain.entities import AuditEvent, ConflictStrategy, InvitationStatus
from src.domain.invitation_state import InvitationEvent, is_open, transition
from src.domain.result import Error, Result, Return

from .dtos import ResolveConflictsResponse, summarize

logger = logging.getLogger(__name__)

STRATEGY_CHOICES = ", ".join(strategy.value for strategy in ConflictStrategy)


class ResolveInvitationConflictsUseCase:
    """
    Use case for resolving duplicate pending invitations.

    Business Rules:
    - keep_latest: all but the newest open invitation are superseded
    - keep_highest_role: every open invitation below the top role is superseded
    - manual_select: returns the set untouched, unless the admin names the
      invitation to keep, in which case the others are superseded
    - Invitations that left pending in the meantime are skipped, not errors
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(
        self,
        user_id: Optional[UUID],
        organization_id: UUID,
        email: Optional[str],
        strategy: Optional[str],
        keep_invitation_id: Optional[UUID] = None,
    ) -> Result[ResolveConflictsResponse]:
        """
        Execute resolve invitation conflicts use case.

        Args:
            user_id: Admin applying the resolution
            organization_id: Organization owning the invitations
            email: Invited email (any casing)
            strategy: keep_latest, keep_highest_role or manual_select
            keep_invitation_id: Survivor picked by the admin (manual_select only)

        Returns:
            Result with ResolveConflictsResponse DTO, or Error
        """
        if not email or not email.strip():
            return Return.err(Error("EMAIL_REQUIRED", "Email is required"))

        try:
            conflict_strategy = ConflictStrategy(strategy)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_STRATEGY",
                    f"Invalid strategy: {strategy}. Must be one of: {STRATEGY_CHOICES}",
                )
            )

        normalized = normalize_email(email)

        async with self.uow:
            organization = await self.uow.organizations.get_by_id(organization_id)
            if organization is None:
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization does not exist")
                )

            now = self.clock.now()
            pending = [
                inv
                for inv in await self.uow.invitations.find_pending_by_email_and_org(
                    normalized, organization_id
                )
                if is_open(inv, now)
            ]

            if keep_invitation_id is not None and not any(
                inv.id == keep_invitation_id for inv in pending
            ):
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found")
                )

            plan = get_resolver(conflict_strategy, keep_invitation_id).plan(pending)

            superseded = []
            for invitation in plan.supersede:
                new_status = transition(invitation.status, InvitationEvent.supersede)
                if new_status.is_err():
                    continue
                updated = await self.uow.invitations.update_status(
                    invitation.id, new_status.value, updated_at=now
                )
                if updated is None:
                    logger.info(
                        "Invitation left pending before it could be superseded "
                        "(invitation_id=%s)",
                        invitation.id,
                    )
                    continue
                superseded.append(updated)

            if superseded:
                audit = AuditEvent(
                    organization_id=organization_id,
                    user_id=user_id,
                    action="invitations_superseded",
                    event_metadata={
                        "strategy": conflict_strategy.value,
                        "email": normalized,
                        "invitation_ids": [str(inv.id) for inv in superseded],
                    },
                    created_at=now,
                )
                await self.uow.audit_events.create(audit)

            await self.uow.commit()

            kept = [inv for inv in plan.keep if inv.status == InvitationStatus.pending]
            return Return.ok(
                ResolveConflictsResponse(
                    email=normalized,
                    strategy=conflict_strategy.value,
                    kept=[summarize(inv, now) for inv in kept],
                    superseded=[summarize(inv, now) for inv in superseded],
                )
            )
