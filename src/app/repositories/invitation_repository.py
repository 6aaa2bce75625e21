from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Invitation, InvitationStatus


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Invitation]:
        """Get invitation by human-readable invitation code"""
        pass

    @abstractmethod
    async def insert(self, invitation: Invitation) -> Invitation:
        """
        Insert a new invitation.

        Raises:
            DuplicateKeyError: token or invitation_code already taken
            ForeignKeyError: organization or team does not exist
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        invitation_id: UUID,
        new_status: InvitationStatus,
        updated_at: datetime,
        accepted_at: Optional[datetime] = None,
        unexpired_at: Optional[datetime] = None,
    ) -> Optional[Invitation]:
        """
        Compare-and-set a pending invitation to ``new_status``.

        Only a row that is still pending (and, when ``unexpired_at`` is given,
        whose expires_at is later than it) is changed.

        Returns:
            The updated invitation, or None when no pending row matched
        """
        pass

    @abstractmethod
    async def find_pending_by_email_and_org(
        self, email: str, organization_id: UUID
    ) -> List[Invitation]:
        """Pending invitations for a normalized email, oldest first"""
        pass

    @abstractmethod
    async def list_pending_by_organization(
        self, organization_id: UUID
    ) -> List[Invitation]:
        """All pending invitations of an organization, oldest first"""
        pass

    @abstractmethod
    async def expire_overdue(self, now: datetime) -> int:
        """Flip every pending invitation with expires_at < now to expired"""
        pass

    @abstractmethod
    async def find_stale_ids(self, expired_before: datetime) -> List[UUID]:
        """IDs of non-accepted invitations whose expires_at precedes the cutoff"""
        pass

    @abstractmethod
    async def delete(self, invitation_id: UUID) -> bool:
        """Delete one invitation"""
        pass

    @abstractmethod
    async def delete_batch(self, invitation_ids: List[UUID]) -> int:
        """Delete several invitations, returning how many rows went away"""
        pass
