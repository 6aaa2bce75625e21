"""
Invitation Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the invitation domain.
Nothing returned to an invitee ever carries the token or invitation code;
only the creation response hands them to the inviter.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.entities import Invitation
from src.domain.invitation_state import is_expired


# ============================================================================
# Commands
# ============================================================================


class CreateInvitationCommand(BaseModel):
    """
    Create invitation command - validated by the use case, not by pydantic,
    so that every rejection comes back as a domain error code.
    """

    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    organization_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    personal_message: Optional[str] = None
    birth_date: Optional[date] = None


# ============================================================================
# Response DTOs
# ============================================================================


class InvitationCreatedResponse(BaseModel):
    """Full invitation as seen by the inviter, credentials included"""

    id: str
    email: str
    full_name: str
    role: str
    organization_id: str
    team_id: Optional[str] = None
    personal_message: Optional[str] = None
    birth_date: Optional[date] = None
    status: str
    token: str
    invitation_code: str
    created_at: datetime
    expires_at: datetime
    notification_sent: bool
    has_active_membership: bool = False
    conflicting_invitation_ids: List[str] = Field(default_factory=list)


class EnrichedInvitation(BaseModel):
    """Display-ready invitation for the invitee; never carries credentials"""

    id: str
    email: str
    full_name: str
    role: str
    organization_id: str
    organization_name: str
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    personal_message: Optional[str] = None
    status: str
    expires_at: datetime


class MembershipInfo(BaseModel):
    """Membership produced or reactivated by an acceptance"""

    id: str
    user_id: str
    organization_id: str
    organization_name: str
    role: str
    team_id: Optional[str] = None
    is_active: bool
    is_default: bool
    joined_via: str


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    invitation_id: str
    status: str
    accepted_at: datetime
    membership: MembershipInfo
    membership_reactivated: bool


class RejectInvitationResponse(BaseModel):
    """Response for reject invitation use case"""

    invitation_id: str
    status: str


class RevokeInvitationResponse(BaseModel):
    """Response for revoke invitation use case"""

    invitation_id: str
    status: str


class ResendInvitationResponse(BaseModel):
    """Response for resend invitation use case"""

    invitation_id: str
    status: str
    expires_at: datetime
    notification_sent: bool


class InvitationSummary(BaseModel):
    """Pending invitation as listed to organization admins"""

    id: str
    email: str
    full_name: str
    role: str
    team_id: Optional[str] = None
    invited_by: Optional[str] = None
    status: str
    created_at: datetime
    expires_at: datetime
    is_expired: bool


class InvitationConflict(BaseModel):
    """Several open invitations competing for one email"""

    email: str
    invitations: List[InvitationSummary]


class ResolveConflictsResponse(BaseModel):
    """Response for resolve invitation conflicts use case"""

    email: str
    strategy: str
    kept: List[InvitationSummary]
    superseded: List[InvitationSummary]


class ExpireInvitationsResponse(BaseModel):
    """Response for the expiration sweep"""

    expired_count: int


class PurgeInvitationsResponse(BaseModel):
    """Response for the retention purge"""

    purged_count: int
    cutoff: datetime


def summarize(invitation: Invitation, now: datetime) -> InvitationSummary:
    """Admin-facing view of an invitation, credentials stripped"""
    return InvitationSummary(
        id=str(invitation.id),
        email=invitation.email,
        full_name=invitation.full_name,
        role=invitation.role.value,
        team_id=str(invitation.team_id) if invitation.team_id else None,
        invited_by=str(invitation.invited_by) if invitation.invited_by else None,
        status=invitation.status.value,
        created_at=invitation.created_at,
        expires_at=invitation.expires_at,
        is_expired=is_expired(invitation, now),
    )
