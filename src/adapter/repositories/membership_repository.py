from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import DuplicateKeyError
from src.app.repositories.membership_repository import IMembershipRepository
from src.domain.entities import Membership


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_organization(
        self, user_id: UUID, organization_id: UUID
    ) -> Optional[Membership]:
        """Get membership by user and organization"""
        stmt = select(Membership).where(
            Membership.user_id == user_id,
            Membership.organization_id == organization_id,
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def get_active_by_email_and_organization(
        self, email: str, organization_id: UUID
    ) -> Optional[Membership]:
        """Get active membership by normalized email and organization"""
        stmt = select(Membership).where(
            Membership.email == email.strip().lower(),
            Membership.organization_id == organization_id,
            Membership.is_active == True,  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def get_active_by_user_id(self, user_id: UUID) -> List[Membership]:
        """Get all active memberships of a user"""
        stmt = select(Membership).where(
            Membership.user_id == user_id,
            Membership.is_active == True,  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        self.session.add(membership)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateKeyError("user_id,organization_id") from exc
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership
