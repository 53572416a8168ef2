"""
Centralized Test Configuration.
"""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from crm_backend.app.main import app
from crm_backend.app.db.session import get_db, Base
from crm_backend.app.models.activity import Activity
from crm_backend.app.models.human import Human
from crm_backend.app.models.geo_interest import GeoInterest
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix
from crm_backend.app.services.display_ids import new_id, next_display_id

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(test_engine.sync_engine, "connect", set_sqlite_pragma)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def apply_overrides(session_factory):
    """Route the app's get_db dependency to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_human(db_session):
    """Insert a human and return it."""

    async def _make_human(first_name: str = "Ada", last_name: str = "Lovelace") -> Human:
        human = Human(
            id=new_id(),
            display_id=await next_display_id(db_session, DisplayIdPrefix.HUMAN),
            first_name=first_name,
            last_name=last_name,
        )
        db_session.add(human)
        await db_session.commit()
        return human

    return _make_human


@pytest.fixture
def make_activity(db_session):
    """Insert an activity and return it."""

    async def _make_activity(subject: str = "Intro call", human_id: str = None) -> Activity:
        activity = Activity(
            id=new_id(),
            display_id=await next_display_id(db_session, DisplayIdPrefix.ACTIVITY),
            type="phone_call",
            subject=subject,
            human_id=human_id,
        )
        db_session.add(activity)
        await db_session.commit()
        return activity

    return _make_activity


@pytest.fixture
def make_geo_interest(db_session):
    """Insert a geo-interest directly, bypassing the dedupe service."""

    async def _make_geo_interest(city: str, country: str) -> GeoInterest:
        geo_interest = GeoInterest(
            id=new_id(),
            display_id=await next_display_id(db_session, DisplayIdPrefix.GEO_INTEREST),
            city=city,
            country=country,
            created_at=datetime.now(timezone.utc),
        )
        db_session.add(geo_interest)
        await db_session.commit()
        return geo_interest

    return _make_geo_interest
