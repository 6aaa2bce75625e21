from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import (
    ConstraintViolationError,
    DuplicateKeyError,
    ForeignKeyError,
)
from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import Invitation, InvitationStatus


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        stmt = select(Invitation).where(Invitation.token == token)
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_code(self, code: str) -> Optional[Invitation]:
        """Get invitation by invitation code"""
        stmt = select(Invitation).where(Invitation.invitation_code == code)
        result = await self.session.exec(stmt)
        return result.first()

    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert inside a savepoint so a collision leaves the transaction usable"""
        try:
            async with self.session.begin_nested():
                self.session.add(invitation)
                await self.session.flush()
        except IntegrityError as exc:
            raise _translate_integrity_error(exc) from exc
        await self.session.refresh(invitation)
        return invitation

    async def update_status(
        self,
        invitation_id: UUID,
        new_status: InvitationStatus,
        updated_at: datetime,
        accepted_at: Optional[datetime] = None,
        unexpired_at: Optional[datetime] = None,
    ) -> Optional[Invitation]:
        """Compare-and-set on status=pending; None when another writer got there first"""
        stmt = update(Invitation).where(
            Invitation.id == invitation_id,
            Invitation.status == InvitationStatus.pending,
        )
        if unexpired_at is not None:
            stmt = stmt.where(Invitation.expires_at > unexpired_at)

        values = {"status": new_status, "updated_at": updated_at}
        if accepted_at is not None:
            values["accepted_at"] = accepted_at

        result = await self.session.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None

        refreshed = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.exec(
            refreshed.execution_options(populate_existing=True)
        )
        return result.first()

    async def find_pending_by_email_and_org(
        self, email: str, organization_id: UUID
    ) -> List[Invitation]:
        """Pending invitations for a normalized email, oldest first"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.email == email.strip().lower(),
                Invitation.organization_id == organization_id,
                Invitation.status == InvitationStatus.pending,
            )
            .order_by(Invitation.created_at.asc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_pending_by_organization(
        self, organization_id: UUID
    ) -> List[Invitation]:
        """All pending invitations of an organization, oldest first"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.organization_id == organization_id,
                Invitation.status == InvitationStatus.pending,
            )
            .order_by(Invitation.created_at.asc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def expire_overdue(self, now: datetime) -> int:
        """Flip pending invitations whose expiry has been reached"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at <= now,
            )
            .values(status=InvitationStatus.expired, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def find_stale_ids(self, expired_before: datetime) -> List[UUID]:
        """IDs of non-accepted invitations that expired before the cutoff"""
        stmt = select(Invitation.id).where(
            Invitation.status != InvitationStatus.accepted,
            Invitation.expires_at < expired_before,
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def delete(self, invitation_id: UUID) -> bool:
        """Delete one invitation"""
        return await self.delete_batch([invitation_id]) == 1

    async def delete_batch(self, invitation_ids: List[UUID]) -> int:
        """Delete several invitations"""
        if not invitation_ids:
            return 0
        stmt = (
            delete(Invitation)
            .where(Invitation.id.in_(invitation_ids))
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount


def _translate_integrity_error(exc: IntegrityError) -> Exception:
    message = str(exc.orig).lower()
    if "unique" in message or "duplicate" in message:
        if "invitation_code" in message:
            return DuplicateKeyError("invitation_code")
        if "token" in message:
            return DuplicateKeyError("token")
    if "foreign key" in message:
        if "team" in message:
            return ForeignKeyError("team_id")
        return ForeignKeyError("organization_id")
    # NOT NULL, CHECK and unrecognised unique keys are not worth a retry
    return ConstraintViolationError(message)
