"""
Invitation Use Cases

All invitation lifecycle business logic.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .create_invitation_use_case import CreateInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    CreateInvitationCommand,
    EnrichedInvitation,
    ExpireInvitationsResponse,
    InvitationConflict,
    InvitationCreatedResponse,
    InvitationSummary,
    MembershipInfo,
    PurgeInvitationsResponse,
    RejectInvitationResponse,
    ResendInvitationResponse,
    ResolveConflictsResponse,
    RevokeInvitationResponse,
)
from .expire_invitations_use_case import ExpireInvitationsUseCase
from .list_invitation_conflicts_use_case import ListInvitationConflictsUseCase
from .list_pending_invitations_use_case import ListPendingInvitationsUseCase
from .lookup_invitation_use_case import LookupInvitationUseCase
from .purge_invitations_use_case import PurgeInvitationsUseCase
from .reject_invitation_use_case import RejectInvitationUseCase
from .resend_invitation_use_case import ResendInvitationUseCase
from .resolve_invitation_conflicts_use_case import ResolveInvitationConflictsUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase

__all__ = [
    "CreateInvitationUseCase",
    "LookupInvitationUseCase",
    "AcceptInvitationUseCase",
    "RejectInvitationUseCase",
    "ResendInvitationUseCase",
    "RevokeInvitationUseCase",
    "ListPendingInvitationsUseCase",
    "ListInvitationConflictsUseCase",
    "ResolveInvitationConflictsUseCase",
    "ExpireInvitationsUseCase",
    "PurgeInvitationsUseCase",
    "CreateInvitationCommand",
    "InvitationCreatedResponse",
    "EnrichedInvitation",
    "AcceptInvitationResponse",
    "MembershipInfo",
    "RejectInvitationResponse",
    "ResendInvitationResponse",
    "RevokeInvitationResponse",
    "InvitationSummary",
    "InvitationConflict",
    "ResolveConflictsResponse",
    "ExpireInvitationsResponse",
    "PurgeInvitationsResponse",
]
