"""
Lookup Invitation Use Case

Resolves a token or invitation code to a display-ready invitation.
"""

from typing import Awaitable, Callable, Optional

from src.app.services.clock import Clock, SystemClock
from src.app.services.invitation_display import resolve_display_names
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Invitation, InvitationStatus
from src.domain.invitation_state import is_expired
from src.domain.result import Error, Result, Return

from .dtos import EnrichedInvitation

INVITATION_NOT_FOUND = Error("INVITATION_NOT_FOUND", "Invitation not found or invalid")
INVITATION_EXPIRED = Error("INVITATION_EXPIRED", "Invitation has expired")


class LookupInvitationUseCase:
    """
    Use case for resolving invitation credentials on behalf of an invitee.

    Business Rules:
    - Token and code lookups behave identically
    - Unknown, malformed and non-pending keys all yield the same
      INVITATION_NOT_FOUND; consumed invitations look like absent ones
    - A pending invitation past expires_at yields INVITATION_EXPIRED even
      if no sweep has marked it yet
    - The response never carries the token or invitation code
    - Read only: lookup never changes invitation state
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def by_token(self, token: Optional[str]) -> Result[EnrichedInvitation]:
        if not token:
            return Return.err(Error("TOKEN_REQUIRED", "Token is required"))
        return await self._resolve(lambda: self.uow.invitations.get_by_token(token))

    async def by_code(self, code: Optional[str]) -> Result[EnrichedInvitation]:
        if not code:
            return Return.err(Error("CODE_REQUIRED", "Invitation code is required"))
        return await self._resolve(lambda: self.uow.invitations.get_by_code(code))

    async def _resolve(
        self, fetch: Callable[[], Awaitable[Optional[Invitation]]]
    ) -> Result[EnrichedInvitation]:
        async with self.uow:
            # Every key goes through the same query, whatever its shape
            invitation = await fetch()

            if invitation is None or invitation.status != InvitationStatus.pending:
                return Return.err(INVITATION_NOT_FOUND)

            if is_expired(invitation, self.clock.now()):
                return Return.err(INVITATION_EXPIRED)

            organization_name, team_name = await resolve_display_names(
                self.uow, invitation
            )

            return Return.ok(
                EnrichedInvitation(
                    id=str(invitation.id),
                    email=invitation.email,
                    full_name=invitation.full_name,
                    role=invitation.role.value,
                    organization_id=str(invitation.organization_id),
                    organization_name=organization_name,
                    team_id=str(invitation.team_id) if invitation.team_id else None,
                    team_name=team_name,
                    personal_message=invitation.personal_message,
                    status=invitation.status.value,
                    expires_at=invitation.expires_at,
                )
            )
