from typing import Optional, Tuple

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Invitation

UNKNOWN_ORGANIZATION = "Unknown Organization"


async def resolve_display_names(
    uow: UnitOfWork, invitation: Invitation
) -> Tuple[str, Optional[str]]:
    """Organization name (with fallback) and team name (None without a team)"""
    organization = await uow.organizations.get_by_id(invitation.organization_id)
    organization_name = (
        organization.name if organization and organization.name else UNKNOWN_ORGANIZATION
    )

    team_name = None
    if invitation.team_id is not None:
        team = await uow.teams.get_by_id(invitation.team_id)
        team_name = team.name if team else None

    return organization_name, team_name
