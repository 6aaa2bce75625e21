from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Organization, Team


class IOrganizationRepository(ABC):
    """Organization repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        pass

    @abstractmethod
    async def delete(self, organization_id: UUID) -> bool:
        """Delete an organization together with the invitations that target it"""
        pass


class ITeamRepository(ABC):
    """Team repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        """Get team by ID"""
        pass

    @abstractmethod
    async def delete(self, team_id: UUID) -> bool:
        """Delete a team, nulling team_id on every row that referenced it"""
        pass
