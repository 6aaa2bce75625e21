"""
Conflict Resolution Strategies

When several pending invitations target the same (email, organization),
the caller picks one of these strategies. None of them is ever applied
implicitly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from src.domain.entities import ConflictStrategy, Invitation


@dataclass
class ResolutionPlan:
    """Which invitations stay pending and which get superseded"""

    keep: List[Invitation] = field(default_factory=list)
    supersede: List[Invitation] = field(default_factory=list)


class ConflictResolver(ABC):
    strategy: ConflictStrategy

    @abstractmethod
    def plan(self, pending: List[Invitation]) -> ResolutionPlan:
        """Split the conflicting pending invitations into keep / supersede"""
        pass


class KeepLatest(ConflictResolver):
    """Newest invitation survives, all older ones are superseded"""

    strategy = ConflictStrategy.keep_latest

    def plan(self, pending: List[Invitation]) -> ResolutionPlan:
        if not pending:
            return ResolutionPlan()
        ordered = sorted(pending, key=lambda inv: inv.created_at)
        return ResolutionPlan(keep=[ordered[-1]], supersede=ordered[:-1])


class KeepHighestRole(ConflictResolver):
    """Every invitation ranked below the highest offered role is superseded"""

    strategy = ConflictStrategy.keep_highest_role

    def plan(self, pending: List[Invitation]) -> ResolutionPlan:
        if not pending:
            return ResolutionPlan()
        top_rank = max(inv.role.rank for inv in pending)
        return ResolutionPlan(
            keep=[inv for inv in pending if inv.role.rank == top_rank],
            supersede=[inv for inv in pending if inv.role.rank < top_rank],
        )


class ManualSelect(ConflictResolver):
    """
    Surfaces the whole set for a human decision.

    Without a selection nothing changes. When an admin names the invitation
    to keep, every other one is superseded.
    """

    strategy = ConflictStrategy.manual_select

    def __init__(self, keep_invitation_id: Optional[UUID] = None):
        self.keep_invitation_id = keep_invitation_id

    def plan(self, pending: List[Invitation]) -> ResolutionPlan:
        if self.keep_invitation_id is None:
            return ResolutionPlan(keep=list(pending))
        return ResolutionPlan(
            keep=[inv for inv in pending if inv.id == self.keep_invitation_id],
            supersede=[inv for inv in pending if inv.id != self.keep_invitation_id],
        )


def get_resolver(
    strategy: ConflictStrategy, keep_invitation_id: Optional[UUID] = None
) -> ConflictResolver:
    if strategy == ConflictStrategy.keep_latest:
        return KeepLatest()
    if strategy == ConflictStrategy.keep_highest_role:
        return KeepHighestRole()
    return ManualSelect(keep_invitation_id)
