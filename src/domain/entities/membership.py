"""
Membership Entity

Links an identity to an organization with a role.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Uuid
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import JoinMethod, MembershipRole


class Membership(SQLModel, table=True):
    """
    Membership entity - binds an identity to an organization with a role.

    Business Rules:
    - (user_id, organization_id) is unique; leaving deactivates, never deletes
    - Accepting an invitation reactivates an existing row in place
    - The first active membership of an identity becomes its default
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)
    organization_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    team_id: Optional[UUID] = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
    )

    role: MembershipRole = Field(nullable=False)
    is_active: bool = Field(default=True)
    is_default: bool = Field(default=False)
    joined_via: JoinMethod = Field(default=JoinMethod.invitation)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_membership_user_org", "user_id", "organization_id", unique=True),
        Index("idx_membership_email_org", "email", "organization_id"),
    )
