from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError, raise_for_error
from src.app.services.clock import Clock
from src.app.services.invitation_notifier import IInvitationNotifier
from src.app.services.invitation_policy import InvitationPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    EnrichedInvitation,
    LookupInvitationUseCase,
    RejectInvitationResponse,
    RejectInvitationUseCase,
    ResendInvitationResponse,
    ResendInvitationUseCase,
)
from src.depends import (
    get_clock,
    get_current_user,
    get_current_user_id,
    get_invitation_policy,
    get_notifier,
    get_unit_of_work,
)
from src.domain.result import Error

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class TokenRequest(BaseModel):
    """
    Token-bearing HTTP request payload

    The token is optional at the schema level so that a missing token is
    reported as TOKEN_REQUIRED rather than a generic validation failure.
    """

    token: Optional[str] = Field(None, description="Invitation token")


@router.get(
    "/lookup",
    status_code=status.HTTP_200_OK,
    response_model=EnrichedInvitation,
)
async def lookup_invitation_by_token(
    token: Optional[str] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Lookup Invitation by Token

    Resolves an invitation link for the invite landing page.

    Raises:
        - 400 Bad Request: TOKEN_REQUIRED
        - 404 Not Found: INVITATION_NOT_FOUND (unknown or no longer pending)
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = LookupInvitationUseCase(uow, clock=clock)
    result = await use_case.by_token(token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/lookup",
    status_code=status.HTTP_200_OK,
    response_model=EnrichedInvitation,
)
async def lookup_invitation_by_code(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Lookup Invitation by Code

    Resolves a manually entered invitation code. Body: {"code": "..."}

    Raises:
        - 400 Bad Request: CODE_REQUIRED
        - 404 Not Found: INVITATION_NOT_FOUND (unknown or no longer pending)
        - 410 Gone: INVITATION_EXPIRED
        - 500 Internal Server Error: unparseable request body
    """
    try:
        body = await request.json()
    except ValueError:
        raise ServerError(Error("MALFORMED_BODY", "Request body could not be parsed"))

    code = body.get("code") if isinstance(body, dict) else None
    if code is not None and not isinstance(code, str):
        code = str(code)

    use_case = LookupInvitationUseCase(uow, clock=clock)
    result = await use_case.by_code(code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    request: TokenRequest,
    current_user: dict = Depends(get_current_user),
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Accept Invitation

    Binds the authenticated identity to the invitation's organization.

    Raises:
        - 400 Bad Request: TOKEN_REQUIRED
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 403 Forbidden: EMAIL_MISMATCH
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_CONFLICT (already accepted or no longer pending)
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = AcceptInvitationUseCase(uow, clock=clock)
    result = await use_case.execute(request.token, user_id, current_user["email"])

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/reject",
    status_code=status.HTTP_200_OK,
    response_model=RejectInvitationResponse,
)
async def reject_invitation(
    request: TokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Reject Invitation

    Declines an invitation. Holding the token is the authorization.

    Raises:
        - 400 Bad Request: TOKEN_REQUIRED
        - 404 Not Found: INVITATION_NOT_FOUND
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = RejectInvitationUseCase(uow, clock=clock)
    result = await use_case.execute(request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{invitation_id}/resend",
    status_code=status.HTTP_200_OK,
    response_model=ResendInvitationResponse,
)
async def resend_invitation(
    invitation_id: str,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    notifier: IInvitationNotifier = Depends(get_notifier),
    policy: InvitationPolicy = Depends(get_invitation_policy),
):
    """
    Resend Invitation

    Re-dispatches the invitation notice. Expiry and credentials are unchanged.

    Raises:
        - 400 Bad Request: Invalid invitation_id format
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_CONFLICT (no longer pending)
        - 410 Gone: INVITATION_EXPIRED
    """
    try:
        invitation_uuid = UUID(invitation_id)
    except ValueError:
        raise ClientError(
            Error("INVALID_INVITATION_ID", "Invalid invitation ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    use_case = ResendInvitationUseCase(uow, notifier, policy=policy, clock=clock)
    result = await use_case.execute(user_id, invitation_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
