"""
Invitation Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    ConflictStrategy,
    InvitationStatus,
    JoinMethod,
    MembershipRole,
)

# Export all entities
from .organization import Organization, Team
from .membership import Membership
from .invitation import Invitation
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ConflictStrategy",
    "InvitationStatus",
    "JoinMethod",
    "MembershipRole",
    # Entities
    "Organization",
    "Team",
    "Membership",
    "Invitation",
    "AuditEvent",
]
