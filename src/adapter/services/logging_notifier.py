import logging

from src.app.services.invitation_notifier import IInvitationNotifier, InvitationNotice

logger = logging.getLogger(__name__)


class LoggingInvitationNotifier(IInvitationNotifier):
    """
    Default notifier used until a mail provider is wired in.

    Records that a notice would have been delivered. The accept URL and code
    are secrets and are never written to the log.
    """

    async def send_invitation(self, notice: InvitationNotice) -> None:
        logger.info(
            "Invitation notice dispatched (invitation_id=%s, email=%s, organization=%s)",
            notice.invitation_id,
            notice.email,
            notice.organization_name,
        )
