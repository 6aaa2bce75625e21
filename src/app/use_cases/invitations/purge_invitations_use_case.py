"""
Purge Invitations Use Case

Retention cleanup of invitations that can no longer be used.
"""

import logging
from typing import Optional

from src.app.services.clock import Clock, SystemClock
from src.app.services.invitation_policy import InvitationPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.result import Result, Return

from .dtos import PurgeInvitationsResponse

logger = logging.getLogger(__name__)


class PurgeInvitationsUseCase:
    """
    Use case for deleting invitations past their retention window.

    Business Rules:
    - Accepted invitations are kept as the record of how a member joined
    - Any other invitation whose expires_at is older than the retention
      window (90 days by default) is deleted
    - Audit events survive the purge
    """

    def __init__(
        self,
        uow: UnitOfWork,
        policy: Optional[InvitationPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.policy = policy or InvitationPolicy()
        self.clock = clock or SystemClock()

    async def execute(self) -> Result[PurgeInvitationsResponse]:
        async with self.uow:
            now = self.clock.now()
            cutoff = now - self.policy.retention

            stale_ids = await self.uow.invitations.find_stale_ids(cutoff)
            purged_count = 0
            if stale_ids:
                purged_count = await self.uow.invitations.delete_batch(stale_ids)

                audit = AuditEvent(
                    action="invitations_purged",
                    event_metadata={
                        "purged_count": purged_count,
                        "cutoff": cutoff.isoformat(),
                    },
                    created_at=now,
                )
                await self.uow.audit_events.create(audit)

            await self.uow.commit()

        logger.info("Retention purge deleted %d invitation(s)", purged_count)
        return Return.ok(
            PurgeInvitationsResponse(purged_count=purged_count, cutoff=cutoff)
        )
