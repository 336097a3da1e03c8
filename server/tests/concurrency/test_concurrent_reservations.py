"""Concurrency tests for reservation writes on a file database."""

import asyncio

import pytest
import pytest_asyncio

from tourism_api.core.database import create_engine, init_db
from tourism_api.models import Reservation, Tour, User
from tourism_api.repositories import ReservationRepository, TourRepository, UserRepository


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """Engine on a SQLite file, one connection per repository call."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'tourism.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_reservations_all_persist(file_engine, tour_factory):
    users = UserRepository(file_engine)
    tours = TourRepository(file_engine)
    reservations = ReservationRepository(file_engine)

    guide = await users.create(User(username="guide", role="guide"))
    tour = await tours.create(tour_factory(guide.id, max_guests=80))
    tourists = [
        await users.create(User(username=f"tourist_{i}", role="tourist"))
        for i in range(10)
    ]

    created = await asyncio.gather(*[
        reservations.create(Reservation(tour_id=tour.id, user_id=t.id, number_of_guests=2))
        for t in tourists
    ])

    assert len({r.id for r in created}) == 10
    assert await reservations.get_total_guests_for_tour(tour.id) == 20
    assert len(await reservations.get_by_tour_id(tour.id)) == 10


@pytest.mark.asyncio
async def test_concurrent_reads_see_same_tour(file_engine, tour_factory):
    users = UserRepository(file_engine)
    tours = TourRepository(file_engine)

    guide = await users.create(User(username="guide", role="guide"))
    tour: Tour = await tours.create(tour_factory(guide.id))

    results = await asyncio.gather(*[tours.get_by_id(tour.id) for _ in range(20)])

    assert all(r == tour for r in results)
