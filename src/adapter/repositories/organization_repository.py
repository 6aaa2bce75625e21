from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.organization_repository import (
    IOrganizationRepository,
    ITeamRepository,
)
from src.domain.entities import Invitation, Membership, Organization, Team


class OrganizationRepository(IOrganizationRepository):
    """Organization repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        stmt = select(Organization).where(Organization.id == organization_id)
        result = await self.session.exec(stmt)
        return result.first()

    async def delete(self, organization_id: UUID) -> bool:
        """
        Delete an organization and everything scoped to it.

        Dependent rows are removed explicitly so the outcome does not rely on
        the engine enforcing ON DELETE CASCADE (SQLite ignores it by default).
        """
        for model in (Invitation, Membership, Team):
            await self.session.execute(
                delete(model)
                .where(model.organization_id == organization_id)
                .execution_options(synchronize_session="fetch")
            )
        result = await self.session.execute(
            delete(Organization)
            .where(Organization.id == organization_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1


class TeamRepository(ITeamRepository):
    """Team repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        """Get team by ID"""
        stmt = select(Team).where(Team.id == team_id)
        result = await self.session.exec(stmt)
        return result.first()

    async def delete(self, team_id: UUID) -> bool:
        """Delete a team; invitations and memberships keep existing without it"""
        for model in (Invitation, Membership):
            await self.session.execute(
                update(model)
                .where(model.team_id == team_id)
                .values(team_id=None)
                .execution_options(synchronize_session="fetch")
            )
        result = await self.session.execute(
            delete(Team)
            .where(Team.id == team_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1
