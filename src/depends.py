from datetime import timedelta
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.database import create_engine
from src.adapter.services.logging_notifier import LoggingInvitationNotifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.app.services.clock import Clock, SystemClock
from src.app.services.invitation_notifier import IInvitationNotifier
from src.app.services.invitation_policy import InvitationPolicy

engine = create_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Clock:
    return SystemClock()


def get_notifier() -> IInvitationNotifier:
    return LoggingInvitationNotifier()


def get_invitation_policy() -> InvitationPolicy:
    return InvitationPolicy(
        validity=timedelta(days=ApplicationConfig.INVITATION_VALIDITY_DAYS),
        retention=timedelta(days=ApplicationConfig.INVITATION_RETENTION_DAYS),
        max_generation_attempts=ApplicationConfig.CODE_GENERATION_MAX_ATTEMPTS,
        generation_backoff_seconds=ApplicationConfig.CODE_GENERATION_BACKOFF_SECONDS,
        notifier_timeout_seconds=ApplicationConfig.NOTIFIER_TIMEOUT_SECONDS,
        base_url=ApplicationConfig.APP_BASE_URL,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id and email

    Raises:
        HTTPException: 401 if token is missing, invalid, expired or carries
            a malformed user_id or email claim
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = verify_jwt(credentials.credentials)

    if (
        payload is None
        or _parse_user_id(payload.get("user_id")) is None
        or not isinstance(payload.get("email"), str)
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload


async def get_current_user_id(current_user: dict = Depends(get_current_user)) -> UUID:
    """Identity of the caller as a UUID; the claim was validated with the token"""
    return _parse_user_id(current_user["user_id"])


def _parse_user_id(value) -> Optional[UUID]:
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError):
        return None
