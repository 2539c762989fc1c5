import os

# Settings are read at import time, so the environment has to be in place first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DISPLAY_TIMEZONE"] = "America/New_York"
os.environ["WEEK_STARTS_ON"] = "sunday"
os.environ["ENV"] = "test"

from datetime import UTC, datetime  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import app.models  # noqa: E402,F401
from app.api.deps import get_display_zone  # noqa: E402
from app.core.db import get_session  # noqa: E402
from app.core.security import create_access_token, hash_password  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.models.appointment import Appointment, AppointmentRecord  # noqa: E402
from app.models.contact import Contact  # noqa: E402
from app.models.customer import CustomerRecord  # noqa: E402
from app.models.location import Country, FirstLevelDivision  # noqa: E402
from app.models.user import User  # noqa: E402

NEW_YORK = "America/New_York"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def seed(session):
    """A user, two countries with one division each, a contact and a customer."""
    user = User(username="test", hashed_password=hash_password("test"))
    us = Country(name="U.S")
    uk = Country(name="UK")
    session.add_all([user, us, uk])
    await session.flush()
    ohio = FirstLevelDivision(name="Ohio", country_id=us.id)
    england = FirstLevelDivision(name="England", country_id=uk.id)
    contact = Contact(name="Anika Costa", email="acoasta@company.com")
    session.add_all([ohio, england, contact])
    await session.flush()
    now = datetime(2024, 1, 1, 12, 0)
    customer = CustomerRecord(
        name="Daddy Warbucks",
        address="1919 Boardwalk",
        postal_code="01291",
        phone="869-908-1875",
        create_date=now,
        created_by="script",
        last_update=now,
        last_updated_by="script",
        division_id=ohio.id,
    )
    session.add(customer)
    await session.commit()
    return SimpleNamespace(
        user=user, us=us, uk=uk, ohio=ohio, england=england, contact=contact, customer=customer
    )


@pytest.fixture
def make_appointment():
    def _make(**overrides) -> Appointment:
        values = dict(
            title="Planning",
            description="Quarterly planning",
            location="Phoenix, Arizona",
            type="Planning Session",
            start=datetime(2024, 3, 12, 15, 0, tzinfo=UTC),
            end=datetime(2024, 3, 12, 16, 0, tzinfo=UTC),
            create_date=datetime(2024, 3, 1, 9, 0, tzinfo=UTC),
            created_by="script",
            last_update=datetime(2024, 3, 1, 9, 0, tzinfo=UTC),
            last_updated_by="script",
            customer_id=1,
            user_id=1,
            contact_id=1,
        )
        values.update(overrides)
        return Appointment(**values)

    return _make


@pytest.fixture
def add_appointment(session, seed, make_appointment):
    async def _add(**overrides) -> Appointment:
        overrides.setdefault("customer_id", seed.customer.id)
        overrides.setdefault("user_id", seed.user.id)
        overrides.setdefault("contact_id", seed.contact.id)
        record: AppointmentRecord = make_appointment(**overrides).to_record()
        session.add(record)
        await session.commit()
        return Appointment.from_record(record)

    return _add


@pytest.fixture
async def client(session_maker, seed):
    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_session] = override_get_session
    fastapi_app.dependency_overrides[get_display_zone] = lambda: NEW_YORK
    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(seed):
    return {"Authorization": f"Bearer {create_access_token(seed.user.id)}"}
