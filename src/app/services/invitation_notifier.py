"""
Invitation Notifier

Email delivery is an external collaborator. The core hands it a structured
notice and waits a bounded time; a timeout or delivery failure is reported
back to the caller, never assumed to have succeeded.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class InvitationNotice(BaseModel):
    """Everything a mail template needs to render an invitation"""

    invitation_id: UUID
    email: str
    full_name: str
    organization_name: str
    team_name: Optional[str] = None
    role: str
    personal_message: Optional[str] = None
    accept_url: str
    invitation_code: str
    expires_at: datetime


class NotificationError(Exception):
    """Raised by notifier adapters when delivery was refused"""


class IInvitationNotifier(ABC):
    @abstractmethod
    async def send_invitation(self, notice: InvitationNotice) -> None:
        """Deliver the invitation to its recipient"""
        pass


async def dispatch_notice(
    notifier: IInvitationNotifier, notice: InvitationNotice, timeout: float
) -> bool:
    """
    Send a notice with a timeout.

    Returns:
        True when the notifier confirmed delivery, False on timeout or refusal
    """
    try:
        await asyncio.wait_for(notifier.send_invitation(notice), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "Invitation notice timed out after %ss (invitation_id=%s)",
            timeout,
            notice.invitation_id,
        )
        return False
    except NotificationError as exc:
        logger.warning(
            "Invitation notice refused (invitation_id=%s): %s",
            notice.invitation_id,
            exc,
        )
        return False
    return True
