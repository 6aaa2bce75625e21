"""
Invitation Entity

Time-bounded, single-use credential granting a named person a role inside
an organization.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Uuid
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import InvitationStatus, MembershipRole


class Invitation(SQLModel, table=True):
    """
    Invitation entity - pending invitation to join an organization.

    Business Rules:
    - Email is stored lowercased; every comparison uses the lowercased form
    - token and invitation_code are unique and drawn from a secure random source
    - expires_at is fixed at creation (default 7 days) and never changes
    - Status leaves pending exactly once and never comes back
    - Team reference is weak: deleting the team nulls team_id
    - Deleting the organization deletes its invitations
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    email: str = Field(max_length=255, nullable=False, index=True)
    full_name: str = Field(max_length=255, nullable=False)
    birth_date: Optional[date] = Field(default=None)
    role: MembershipRole = Field(nullable=False)

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
        sa_column=Column(
            Uuid,
            ForeignKey("teams.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    invited_by: Optional[UUID] = Field(default=None)

    token: str = Field(unique=True, index=True, max_length=64)
    invitation_code: str = Field(unique=True, index=True, max_length=16)

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    personal_message: Optional[str] = Field(default=None, max_length=2000)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    accepted_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_email_org_status", "email", "organization_id", "status"),
        Index("idx_invitation_expires_at", "expires_at"),
        Index("idx_invitation_status", "status"),
    )
