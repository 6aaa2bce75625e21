"""
Expire Invitations Use Case

Batch sweep that marks overdue pending invitations as expired.
"""

import logging
from typing import Optional

from src.app.services.clock import Clock, SystemClock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.result import Result, Return

from .dtos import ExpireInvitationsResponse

logger = logging.getLogger(__name__)


class ExpireInvitationsUseCase:
    """
    Use case for the expiration sweep.

    Business Rules:
    - Touches only rows that are pending and past expires_at
    - Idempotent: a second run right after the first changes nothing
    - Optional for correctness; every read path computes expiry itself
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(self) -> Result[ExpireInvitationsResponse]:
        async with self.uow:
            now = self.clock.now()
            expired_count = await self.uow.invitations.expire_overdue(now)

            if expired_count:
                audit = AuditEvent(
                    action="invitations_expired",
                    event_metadata={"expired_count": expired_count},
                    created_at=now,
                )
                await self.uow.audit_events.create(audit)

            await self.uow.commit()

        logger.info("Expiration sweep marked %d invitation(s) expired", expired_count)
        return Return.ok(ExpireInvitationsResponse(expired_count=expired_count))
