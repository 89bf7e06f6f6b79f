"""
Centralized Test Configuration.
"""

import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from greenpages.app.main import app
from greenpages.app.db.session import get_db, Base
from greenpages.app.core.jwt import create_access_token
from greenpages.app.models.user import User
from greenpages.app.models.agent import Agent
from greenpages.app.models.business import Business, BusinessTranslation
from greenpages.app.models.enums import UserRole

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# Event handler to enable foreign keys for SQLite
@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
def apply_overrides():
    """Route the app's database dependency to the in-memory test database."""
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


class FakeClock:
    """Deterministic clock for ledger timestamps."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


async def create_finance_world(session: AsyncSession) -> dict:
    """Insert an accountant, an agent (with its user), a second agent and two businesses."""
    accountant = User(email="accountant@test.com", role=UserRole.ADMIN, is_active=True)
    agent_user = User(email="agent1@test.com", role=UserRole.AGENT, is_active=True)
    other_agent_user = User(email="agent2@test.com", role=UserRole.AGENT, is_active=True)
    session.add_all([accountant, agent_user, other_agent_user])
    await session.flush()

    agent = Agent(employee_code="AG-001", user_id=agent_user.id, is_active=True)
    other_agent = Agent(employee_code="AG-002", user_id=other_agent_user.id, is_active=True)
    bakery = Business()
    garage = Business()
    session.add_all([agent, other_agent, bakery, garage])
    await session.flush()

    session.add_all([
        BusinessTranslation(business_id=bakery.id, locale="ar", name="مخبز النور"),
        BusinessTranslation(business_id=bakery.id, locale="en", name="Al Noor Bakery"),
        BusinessTranslation(business_id=garage.id, locale="en", name="City Garage"),
    ])
    await session.commit()

    return {
        "accountant_id": accountant.id,
        "agent_user_id": agent_user.id,
        "agent_id": agent.id,
        "other_agent_id": other_agent.id,
        "business_id": bakery.id,
        "untranslated_business_id": garage.id,
    }


@pytest.fixture
async def finance_world(db_session):
    return await create_finance_world(db_session)


def bearer(user_id: str, role: UserRole) -> dict:
    token = create_access_token(data={"sub": f"user-{user_id}", "user_id": user_id, "role": role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(finance_world):
    return bearer(finance_world["accountant_id"], UserRole.ADMIN)


@pytest.fixture
def agent_headers(finance_world):
    return bearer(finance_world["agent_user_id"], UserRole.AGENT)


@pytest.fixture
def world_factory():
    return create_finance_world


@pytest.fixture
def make_headers():
    return bearer
