import asyncio
from datetime import datetime
from uuid import uuid4

import pytest

from src.app.services.invitation_notifier import (
    IInvitationNotifier,
    InvitationNotice,
    NotificationError,
    dispatch_notice,
)


def make_notice():
    return InvitationNotice(
        invitation_id=uuid4(),
        email="alice@example.com",
        full_name="Alice Example",
        organization_name="Acme Corp",
        role="manager",
        accept_url="http://localhost:3000/onboarding/join?token=abc",
        invitation_code="ABCDEFGH",
        expires_at=datetime(2026, 3, 9, 9, 30, 0),
    )


class RecordingNotifier(IInvitationNotifier):
    def __init__(self):
        self.notices = []

    async def send_invitation(self, notice):
        self.notices.append(notice)


class SlowNotifier(IInvitationNotifier):
    async def send_invitation(self, notice):
        await asyncio.sleep(10)


class RefusingNotifier(IInvitationNotifier):
    async def send_invitation(self, notice):
        raise NotificationError("mailbox unavailable")


@pytest.mark.asyncio
async def test_delivered_notice_reports_sent():
    notifier = RecordingNotifier()
    notice = make_notice()

    assert await dispatch_notice(notifier, notice, timeout=1) is True
    assert notifier.notices == [notice]


@pytest.mark.asyncio
async def test_timeout_reports_not_sent():
    assert await dispatch_notice(SlowNotifier(), make_notice(), timeout=0.01) is False


@pytest.mark.asyncio
async def test_refusal_reports_not_sent():
    assert await dispatch_notice(RefusingNotifier(), make_notice(), timeout=1) is False
