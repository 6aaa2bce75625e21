"""
Admin API Routes - Invitation Maintenance Endpoints

Called by schedulers. Authentication is via Admin API Key, not user JWTs.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.clock import Clock
from src.app.services.invitation_policy import InvitationPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import (
    ExpireInvitationsResponse,
    ExpireInvitationsUseCase,
    PurgeInvitationsResponse,
    PurgeInvitationsUseCase,
)
from src.depends import get_clock, get_invitation_policy, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/invitations/expire",
    status_code=status.HTTP_200_OK,
    response_model=ExpireInvitationsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def expire_invitations(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Expiration Sweep

    Marks every pending invitation past its expiry as expired. Safe to run
    at any frequency; lookups do not depend on it.

    Requires: X-Admin-API-Key header
    """
    use_case = ExpireInvitationsUseCase(uow, clock=clock)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/invitations/purge",
    status_code=status.HTTP_200_OK,
    response_model=PurgeInvitationsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_invitations(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    policy: InvitationPolicy = Depends(get_invitation_policy),
):
    """
    Retention Purge

    Deletes non-accepted invitations that expired more than the retention
    window ago.

    Requires: X-Admin-API-Key header
    """
    use_case = PurgeInvitationsUseCase(uow, policy=policy, clock=clock)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value
