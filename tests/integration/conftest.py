from uuid import uuid4

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.api import auth_headers
from tests.fixtures.clock import FixedClock
from tests.fixtures.json_loader import TestDataLoader
from src.adapter.database import create_engine
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.invitation_notifier import IInvitationNotifier
from src.app.services.invitation_policy import InvitationPolicy
from src.depends import (
    get_clock,
    get_invitation_policy,
    get_notifier,
    get_unit_of_work,
)
from src.domain.entities import Organization, Team


class RecordingNotifier(IInvitationNotifier):
    def __init__(self):
        self.notices = []

    async def send_invitation(self, notice):
        self.notices.append(notice)


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
def clock():
    return FixedClock()


@pytest_asyncio.fixture
def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, clock, notifier):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_invitation_policy] = lambda: InvitationPolicy(
        generation_backoff_seconds=0
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def isolated_client(engine, clock, notifier):
    """Client whose requests each get their own session, as in production"""
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    Session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_invitation_policy] = lambda: InvitationPolicy(
        generation_backoff_seconds=0
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def organization(db_session, test_data, clock):
    """Seeded organization with one team; ids only, never ORM instances"""
    org = Organization(
        id=uuid4(), name=test_data.get("organization")["name"], created_at=clock.now()
    )
    team = Team(
        id=uuid4(),
        organization_id=org.id,
        name=test_data.get("team")["name"],
        created_at=clock.now(),
    )
    db_session.add(org)
    db_session.add(team)
    await db_session.commit()
    return {"id": str(org.id), "team_id": str(team.id)}


@pytest_asyncio.fixture
def inviter_headers(test_data):
    return auth_headers(test_data.get("inviter")["email"])
