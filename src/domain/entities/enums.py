"""
Invitation Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class MembershipRole(str, Enum):
    """Role granted inside an organization"""

    employee = "employee"
    manager = "manager"
    admin = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK = {
    MembershipRole.employee: 0,
    MembershipRole.manager: 1,
    MembershipRole.admin: 2,
}


class InvitationStatus(str, Enum):
    """Invitation status; every status except pending is terminal"""

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"
    superseded = "superseded"


class JoinMethod(str, Enum):
    """How a membership came into existence"""

    invitation = "invitation"
    created = "created"


class ConflictStrategy(str, Enum):
    """Caller-selected policy for several pending invitations to one email"""

    keep_latest = "keep_latest"
    keep_highest_role = "keep_highest_role"
    manual_select = "manual_select"
