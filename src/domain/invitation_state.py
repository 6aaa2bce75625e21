"""
Invitation State Machine

The transition table below is the only place where an invitation status
change is declared legal. Expiry is value based: a pending invitation whose
expires_at has passed is expired whether or not a sweep has flipped its
status yet.
"""

from datetime import datetime
from enum import Enum

from src.domain.entities import Invitation, InvitationStatus
from src.domain.result import Error, Result, Return


class InvitationEvent(str, Enum):
    """Events that move an invitation out of pending"""

    accept = "accept"
    reject = "reject"
    expire = "expire"
    supersede = "supersede"


TRANSITIONS = {
    (InvitationStatus.pending, InvitationEvent.accept): InvitationStatus.accepted,
    (InvitationStatus.pending, InvitationEvent.reject): InvitationStatus.rejected,
    (InvitationStatus.pending, InvitationEvent.expire): InvitationStatus.expired,
    (InvitationStatus.pending, InvitationEvent.supersede): InvitationStatus.superseded,
}

TERMINAL_STATUSES = frozenset(
    status for status in InvitationStatus if status != InvitationStatus.pending
)


def transition(
    current: InvitationStatus, event: InvitationEvent
) -> Result[InvitationStatus]:
    """
    Resolve the status reached by applying ``event`` to ``current``.

    Returns:
        Result with the new status, or ILLEGAL_TRANSITION
    """
    new_status = TRANSITIONS.get((current, event))
    if new_status is None:
        return Return.err(
            Error(
                "ILLEGAL_TRANSITION",
                f"Cannot {event.value} an invitation that is {current.value}",
            )
        )
    return Return.ok(new_status)


def is_expired(invitation: Invitation, now: datetime) -> bool:
    """A pending invitation is expired from the instant expires_at is reached"""
    return invitation.status == InvitationStatus.pending and now >= invitation.expires_at


def is_open(invitation: Invitation, now: datetime) -> bool:
    """Pending and not yet expired: the only state in which a credential works"""
    return invitation.status == InvitationStatus.pending and now < invitation.expires_at
