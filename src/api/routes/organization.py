from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, raise_for_error
from src.app.services.clock import Clock
from src.app.services.invitation_notifier import IInvitationNotifier
from src.app.services.invitation_policy import InvitationPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import (
    CreateInvitationCommand,
    CreateInvitationUseCase,
    InvitationConflict,
    InvitationCreatedResponse,
    InvitationSummary,
    ListInvitationConflictsUseCase,
    ListPendingInvitationsUseCase,
    ResolveConflictsResponse,
    ResolveInvitationConflictsUseCase,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
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

router = APIRouter(prefix="/organizations", tags=["Organizations"])


class CreateInvitationRequest(BaseModel):
    """
    Create invitation HTTP request payload

    Fields stay loosely typed here; the use case reports each problem with
    its own error code.
    """

    email: Optional[str] = Field(None, description="Email address to invite")
    full_name: Optional[str] = Field(None, description="Invitee's full name")
    role: Optional[str] = Field(None, description="employee, manager or admin")
    team_id: Optional[str] = Field(None, description="Team to join (optional)")
    personal_message: Optional[str] = Field(None, max_length=2000)
    birth_date: Optional[date] = None


class ResolveConflictsRequest(BaseModel):
    """Resolve invitation conflicts HTTP request payload"""

    email: Optional[str] = Field(None, description="Invited email, any casing")
    strategy: Optional[str] = Field(
        None, description="keep_latest, keep_highest_role or manual_select"
    )
    keep_invitation_id: Optional[str] = Field(
        None, description="Invitation to keep (manual_select only)"
    )


def _parse_uuid(value: str, code: str, message: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise ClientError(Error(code, message), status_code=status.HTTP_400_BAD_REQUEST)


def _organization_uuid(organization_id: str) -> UUID:
    return _parse_uuid(
        organization_id, "ORGANIZATION_NOT_FOUND", "Organization does not exist"
    )


@router.post(
    "/{organization_id}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=InvitationCreatedResponse,
)
async def create_invitation(
    organization_id: str,
    request: CreateInvitationRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    notifier: IInvitationNotifier = Depends(get_notifier),
    policy: InvitationPolicy = Depends(get_invitation_policy),
):
    """
    Create Invitation

    Issues a pending invitation with a fresh token and invitation code.
    Existing pending invitations for the same email are reported in
    conflicting_invitation_ids; they are never resolved automatically.

    Raises:
        - 400 Bad Request: EMAIL_REQUIRED, INVALID_EMAIL, FULL_NAME_REQUIRED,
                           INVALID_ROLE, ORGANIZATION_NOT_FOUND, TEAM_NOT_FOUND
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 500 Internal Server Error: CODE_GENERATION_FAILED
    """
    team_id = None
    if request.team_id:
        team_id = _parse_uuid(
            request.team_id, "TEAM_NOT_FOUND", "Team does not exist in this organization"
        )

    command = CreateInvitationCommand(
        email=request.email,
        full_name=request.full_name,
        role=request.role,
        organization_id=_organization_uuid(organization_id),
        team_id=team_id,
        personal_message=request.personal_message,
        birth_date=request.birth_date,
    )

    use_case = CreateInvitationUseCase(uow, notifier, policy=policy, clock=clock)
    result = await use_case.execute(user_id, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{organization_id}/invitations",
    status_code=status.HTTP_200_OK,
    response_model=List[InvitationSummary],
)
async def list_pending_invitations(
    organization_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    List Pending Invitations

    Pending invitations of the organization, oldest first, without credentials.
    """
    use_case = ListPendingInvitationsUseCase(uow, clock=clock)
    result = await use_case.execute(_organization_uuid(organization_id))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{organization_id}/invitations/conflicts",
    status_code=status.HTTP_200_OK,
    response_model=List[InvitationConflict],
)
async def list_invitation_conflicts(
    organization_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    List Invitation Conflicts

    Emails holding more than one open invitation in the organization.
    """
    use_case = ListInvitationConflictsUseCase(uow, clock=clock)
    result = await use_case.execute(_organization_uuid(organization_id))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{organization_id}/invitations/conflicts/resolve",
    status_code=status.HTTP_200_OK,
    response_model=ResolveConflictsResponse,
)
async def resolve_invitation_conflicts(
    organization_id: str,
    request: ResolveConflictsRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Resolve Invitation Conflicts

    Applies keep_latest, keep_highest_role or manual_select to the open
    invitations of one email.

    Raises:
        - 400 Bad Request: EMAIL_REQUIRED, INVALID_STRATEGY, ORGANIZATION_NOT_FOUND
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 404 Not Found: INVITATION_NOT_FOUND (keep_invitation_id not in the set)
    """
    keep_invitation_id = None
    if request.keep_invitation_id:
        keep_invitation_id = _parse_uuid(
            request.keep_invitation_id,
            "INVALID_INVITATION_ID",
            "Invalid invitation ID format",
        )

    use_case = ResolveInvitationConflictsUseCase(uow, clock=clock)
    result = await use_case.execute(
        user_id,
        _organization_uuid(organization_id),
        request.email,
        request.strategy,
        keep_invitation_id=keep_invitation_id,
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{organization_id}/invitations/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    organization_id: str,
    invitation_id: str,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Revoke Invitation

    Withdraws a pending invitation. Its token and code stop resolving at once.

    Raises:
        - 400 Bad Request: ORGANIZATION_NOT_FOUND, INVALID_INVITATION_ID
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 404 Not Found: INVITATION_NOT_FOUND (unknown or in another organization)
        - 409 Conflict: INVITATION_CONFLICT (no longer pending)
    """
    invitation_uuid = _parse_uuid(
        invitation_id, "INVALID_INVITATION_ID", "Invalid invitation ID format"
    )

    use_case = RevokeInvitationUseCase(uow, clock=clock)
    result = await use_case.execute(
        user_id, _organization_uuid(organization_id), invitation_uuid
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
