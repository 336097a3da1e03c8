"""Test configuration and fixtures."""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from tourism_api.core.config import Settings
from tourism_api.core.database import get_engine, init_db
from tourism_api.core.dependencies import get_settings
from tourism_api.models import Tour, User
from tourism_api.repositories import ReservationRepository, TourRepository, UserRepository

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def test_settings():
    """Settings used by the test application."""
    return Settings(environment="development", cancellation_cutoff_hours=24)


@pytest_asyncio.fixture(scope="function")
async def test_app(test_engine, test_settings):
    """Create a test FastAPI application."""
    from fastapi import FastAPI

    from tourism_api.core.middleware import setup_middleware
    from tourism_api.main import include_routers, register_exception_handlers

    # Simplified test app without lifespan
    app = FastAPI(
        title="Tourism API (Test)",
        description="Test version of the API",
        version="1.0.0-test",
    )

    setup_middleware(app, enable_logging=True)
    register_exception_handlers(app)
    include_routers(app)

    app.dependency_overrides[get_engine] = lambda: test_engine
    app.dependency_overrides[get_settings] = lambda: test_settings

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def tour_repository(test_engine):
    return TourRepository(test_engine)


@pytest.fixture
def user_repository(test_engine):
    return UserRepository(test_engine)


@pytest.fixture
def reservation_repository(test_engine):
    return ReservationRepository(test_engine)


@pytest_asyncio.fixture
async def guide(user_repository):
    """A stored guide."""
    return await user_repository.create(User(username="marko", role="guide"))


@pytest_asyncio.fixture
async def tourist(user_repository):
    """A stored tourist."""
    return await user_repository.create(User(username="ana", role="tourist"))


@pytest_asyncio.fixture
async def other_tourist(user_repository):
    """A second stored tourist."""
    return await user_repository.create(User(username="jovan", role="tourist"))


def make_tour(guide_id: int, starts_in: timedelta = timedelta(days=7), **overrides) -> Tour:
    """Build an unsaved, valid tour starting ``starts_in`` from now."""
    fields = {
        "name": "Fortress Walk",
        "description": "A walk through the Petrovaradin fortress",
        "date_time": (datetime.now() + starts_in).replace(microsecond=0),
        "max_guests": 10,
        "guide_id": guide_id,
        "status": "published",
    }
    fields.update(overrides)
    return Tour(**fields)


@pytest_asyncio.fixture
async def future_tour(tour_repository, guide):
    """A stored tour starting in a week."""
    return await tour_repository.create(make_tour(guide.id))


@pytest_asyncio.fixture
async def soon_tour(tour_repository, guide):
    """A stored tour starting in two hours."""
    return await tour_repository.create(
        make_tour(guide.id, starts_in=timedelta(hours=2), name="Sunset Cruise")
    )


@pytest.fixture
def sample_tour_data():
    """Sample tour payload in wire format."""
    return {
        "name": "Danube Kayaking",
        "description": "Half-day kayaking trip along the Danube",
        "dateTime": (datetime.now() + timedelta(days=10)).replace(microsecond=0).isoformat(),
        "maxGuests": 12,
        "status": "published",
    }


@pytest.fixture
def tour_factory():
    """Factory for unsaved, valid tours."""
    return make_tour
