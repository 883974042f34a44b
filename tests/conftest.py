"""Shared test fixtures for Slotwise API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os
from datetime import date, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "")
os.environ.setdefault("TWILIO_AUTH_TOKEN", "")
os.environ.setdefault("TWILIO_PHONE_NUMBER", "")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from slotwise.core.database import Base, get_db
from slotwise.main import app
from slotwise.scheduling.intervals import sunday_weekday
from slotwise.services.auth import create_access_token

# Import all models to ensure they're registered with Base.metadata
from slotwise.models.business import Business
from slotwise.models.user import User
from slotwise.models.appointment_type import AppointmentType
from slotwise.models.appointment import Appointment  # noqa: F401


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def next_weekday(weekday: int, min_days_ahead: int = 3) -> date:
    """First date at least ``min_days_ahead`` days out falling on ``weekday`` (0=Sunday)."""
    day = date.today() + timedelta(days=min_days_ahead)
    while sunday_weekday(day) != weekday:
        day += timedelta(days=1)
    return day


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


@pytest_asyncio.fixture
async def business(db):
    """A business open 09:00-17:00, Sunday to Thursday, 30 minute grid."""
    biz = Business(
        name="Studio Nine",
        slug="studio-nine",
        owner_phone="+15550001111",
        timezone="UTC",
        is_active=True,
        sms_notifications_enabled=False,
    )
    db.add(biz)
    await db.commit()
    await db.refresh(biz)
    return biz


@pytest_asyncio.fixture
async def owner(db, business):
    user = User(
        email="owner@studio-nine.example",
        full_name="Dana Owner",
        business_id=business.id,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_headers(owner):
    token = create_access_token({"sub": str(owner.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def haircut(db, business):
    """A 60 minute appointment type."""
    appointment_type = AppointmentType(
        business_id=business.id,
        name="Haircut",
        duration_minutes=60,
        price=40,
    )
    db.add(appointment_type)
    await db.commit()
    await db.refresh(appointment_type)
    return appointment_type


@pytest.fixture
def monday():
    """A Monday far enough ahead to be outside the cancellation window."""
    return next_weekday(1)
