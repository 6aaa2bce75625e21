from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Membership


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_organization(
        self, user_id: UUID, organization_id: UUID
    ) -> Optional[Membership]:
        """Get membership (active or not) by user and organization"""
        pass

    @abstractmethod
    async def get_active_by_email_and_organization(
        self, email: str, organization_id: UUID
    ) -> Optional[Membership]:
        """Get active membership by normalized email and organization"""
        pass

    @abstractmethod
    async def get_active_by_user_id(self, user_id: UUID) -> List[Membership]:
        """Get all active memberships of a user"""
        pass

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        """Create a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        pass
