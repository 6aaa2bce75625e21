"""
Create Invitation Use Case

Issues a new pending invitation with fresh credentials.
"""

import asyncio
import logging
from typing import Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email

from src.app.repositories.errors import (
    ConstraintViolationError,
    DuplicateKeyError,
    ForeignKeyError,
)
from src.app.services.clock import Clock, SystemClock
from src.app.services.invitation_display import UNKNOWN_ORGANIZATION
from src.app.services.invitation_notifier import (
    IInvitationNotifier,
    InvitationNotice,
    dispatch_notice,
)
from src.app.services.invitation_policy import InvitationPolicy
from src.app.services.token_generator import TokenGenerationError, TokenGenerator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email
from src.domain.entities import AuditEvent, Invitation, MembershipRole
from src.domain.invitation_state import is_open
from src.domain.result import Error, Result, Return

from .dtos import CreateInvitationCommand, InvitationCreatedResponse

logger = logging.getLogger(__name__)

ROLE_CHOICES = ", ".join(role.value for role in MembershipRole)


class CreateInvitationUseCase:
    """
    Use case for inviting a person into an organization.

    Business Rules:
    - Email, full name, role and organization are required
    - Email is validated and stored lowercased
    - Role must be employee, manager or admin
    - Organization must exist; a team, when given, must belong to it
    - Existing pending invitations for the same email never block creation;
      they are reported back so the caller can pick a conflict strategy
    - An existing active membership is reported so the caller can switch to
      a role update instead of a second membership
    - Credentials are regenerated with backoff on a unique-key collision,
      then creation fails with CODE_GENERATION_FAILED
    - Expires after the policy validity window (7 days by default)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: IInvitationNotifier,
        policy: Optional[InvitationPolicy] = None,
        token_generator: Optional[TokenGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.notifier = notifier
        self.policy = policy or InvitationPolicy()
        self.token_generator = token_generator or TokenGenerator()
        self.clock = clock or SystemClock()

    async def execute(
        self, inviter_user_id: Optional[UUID], command: CreateInvitationCommand
    ) -> Result[InvitationCreatedResponse]:
        """
        Execute create invitation use case.

        Args:
            inviter_user_id: Identity issuing the invitation
            command: Invitation target and options

        Returns:
            Result with InvitationCreatedResponse DTO, or Error
        """
        validation_error = self._validate(command)
        if validation_error:
            return Return.err(validation_error)

        email = normalize_email(command.email)
        role = MembershipRole(command.role)

        async with self.uow:
            organization = await self.uow.organizations.get_by_id(command.organization_id)
            if organization is None:
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization does not exist")
                )

            team = None
            if command.team_id is not None:
                team = await self.uow.teams.get_by_id(command.team_id)
                if team is None or team.organization_id != organization.id:
                    return Return.err(
                        Error("TEAM_NOT_FOUND", "Team does not exist in this organization")
                    )

            now = self.clock.now()

            # Open invitations for the same pair are surfaced, not blocked
            conflicting = [
                inv
                for inv in await self.uow.invitations.find_pending_by_email_and_org(
                    email, organization.id
                )
                if is_open(inv, now)
            ]
            active_membership = (
                await self.uow.memberships.get_active_by_email_and_organization(
                    email, organization.id
                )
            )

            template = dict(
                email=email,
                full_name=command.full_name.strip(),
                birth_date=command.birth_date,
                role=role,
                organization_id=organization.id,
                team_id=team.id if team else None,
                invited_by=inviter_user_id,
                personal_message=command.personal_message,
                created_at=now,
                updated_at=now,
                expires_at=now + self.policy.validity,
            )
            result = await self._insert_with_fresh_credentials(template)
            if result.is_err():
                return result
            invitation = result.value

            audit = AuditEvent(
                organization_id=organization.id,
                user_id=inviter_user_id,
                action="invitation_created",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "invited_email": email,
                    "role": role.value,
                    "conflicting_invitations": len(conflicting),
                },
                created_at=now,
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

        logger.info(
            "Invitation created (invitation_id=%s, organization_id=%s)",
            invitation.id,
            organization.id,
        )

        notice = InvitationNotice(
            invitation_id=invitation.id,
            email=invitation.email,
            full_name=invitation.full_name,
            organization_name=organization.name or UNKNOWN_ORGANIZATION,
            team_name=team.name if team else None,
            role=role.value,
            personal_message=invitation.personal_message,
            accept_url=self.policy.accept_url(invitation.token),
            invitation_code=invitation.invitation_code,
            expires_at=invitation.expires_at,
        )
        notification_sent = await dispatch_notice(
            self.notifier, notice, self.policy.notifier_timeout_seconds
        )

        return Return.ok(
            InvitationCreatedResponse(
                id=str(invitation.id),
                email=invitation.email,
                full_name=invitation.full_name,
                role=invitation.role.value,
                organization_id=str(invitation.organization_id),
                team_id=str(invitation.team_id) if invitation.team_id else None,
                personal_message=invitation.personal_message,
                birth_date=invitation.birth_date,
                status=invitation.status.value,
                token=invitation.token,
                invitation_code=invitation.invitation_code,
                created_at=invitation.created_at,
                expires_at=invitation.expires_at,
                notification_sent=notification_sent,
                has_active_membership=active_membership is not None,
                conflicting_invitation_ids=[str(inv.id) for inv in conflicting],
            )
        )

    def _validate(self, command: CreateInvitationCommand) -> Optional[Error]:
        if not command.email or not command.email.strip():
            return Error("EMAIL_REQUIRED", "Email is required")

        try:
            validate_email(command.email.strip(), check_deliverability=False)
        except EmailNotValidError:
            return Error("INVALID_EMAIL", "Email address is not valid")

        if not command.full_name or not command.full_name.strip():
            return Error("FULL_NAME_REQUIRED", "Full name is required")

        try:
            MembershipRole(command.role)
        except ValueError:
            return Error(
                "INVALID_ROLE",
                f"Invalid role: {command.role}. Must be one of: {ROLE_CHOICES}",
            )

        if command.organization_id is None:
            return Error("ORGANIZATION_REQUIRED", "Organization is required")

        return None

    async def _insert_with_fresh_credentials(self, template: dict) -> Result[Invitation]:
        attempts = self.policy.max_generation_attempts

        for attempt in range(1, attempts + 1):
            try:
                invitation = Invitation(
                    token=self.token_generator.generate_token(),
                    invitation_code=self.token_generator.generate_code(),
                    **template,
                )
            except TokenGenerationError:
                logger.exception("Secure random source failed while issuing invitation")
                return Return.err(
                    Error("CODE_GENERATION_FAILED", "Could not generate invitation credentials")
                )

            try:
                return Return.ok(await self.uow.invitations.insert(invitation))
            except DuplicateKeyError as exc:
                logger.warning(
                    "Invitation credential collision on %s (attempt %d/%d)",
                    exc.field,
                    attempt,
                    attempts,
                )
                if attempt < attempts:
                    await asyncio.sleep(
                        self.policy.generation_backoff_seconds * 2 ** (attempt - 1)
                    )
            except ForeignKeyError as exc:
                if exc.field == "team_id":
                    return Return.err(
                        Error("TEAM_NOT_FOUND", "Team does not exist in this organization")
                    )
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization does not exist")
                )
            except ConstraintViolationError as exc:
                logger.error("Invitation row refused by the store: %s", exc.detail)
                return Return.err(
                    Error("INVALID_INVITATION", "Invitation data was rejected by the store")
                )

        logger.error("Invitation credentials collided %d times, giving up", attempts)
        return Return.err(
            Error("CODE_GENERATION_FAILED", "Could not generate invitation credentials")
        )
