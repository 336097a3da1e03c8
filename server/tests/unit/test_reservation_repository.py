"""Unit tests for the reservation repository."""

from datetime import datetime, timedelta

import pytest

from tourism_api.models import Reservation


@pytest.mark.asyncio
async def test_create_stamps_date_and_status(reservation_repository, future_tour, tourist):
    before = datetime.now().replace(microsecond=0)

    created = await reservation_repository.create(Reservation(
        tour_id=future_tour.id,
        user_id=tourist.id,
        number_of_guests=3,
        status="Cancelled",
        reservation_date=datetime(2000, 1, 1),
    ))

    assert created.id > 0
    assert created.status == "Active"
    assert before <= created.reservation_date <= datetime.now()


@pytest.mark.asyncio
async def test_get_by_id_includes_tour(reservation_repository, future_tour, tourist):
    created = await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=tourist.id, number_of_guests=2)
    )

    found = await reservation_repository.get_by_id(created.id)

    assert found.id == created.id
    assert found.number_of_guests == 2
    assert found.tour.name == future_tour.name
    assert found.tour.date_time == future_tour.date_time
    assert found.tour.max_guests == future_tour.max_guests


@pytest.mark.asyncio
async def test_get_by_id_without_tour(reservation_repository, tour_repository, future_tour, tourist):
    created = await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=tourist.id, number_of_guests=2)
    )
    await tour_repository.delete(future_tour.id)

    found = await reservation_repository.get_by_id(created.id)

    assert found is not None
    assert found.tour is None


@pytest.mark.asyncio
async def test_get_by_id_not_found(reservation_repository):
    assert await reservation_repository.get_by_id(77) is None


@pytest.mark.asyncio
async def test_get_by_user_id_joins_display_fields(
    reservation_repository, future_tour, soon_tour, tourist, other_tourist
):
    first = await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=tourist.id, number_of_guests=1)
    )
    second = await reservation_repository.create(
        Reservation(tour_id=soon_tour.id, user_id=tourist.id, number_of_guests=4)
    )
    await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=other_tourist.id, number_of_guests=2)
    )

    reservations = await reservation_repository.get_by_user_id(tourist.id)

    # Same-second reservations are ordered newest ID first
    assert [r.id for r in reservations] == [second.id, first.id]
    assert reservations[0].tour.name == soon_tour.name
    assert reservations[0].user.username == tourist.username


@pytest.mark.asyncio
async def test_get_by_tour_id(reservation_repository, future_tour, soon_tour, tourist, other_tourist):
    await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=tourist.id, number_of_guests=1)
    )
    await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=other_tourist.id, number_of_guests=2)
    )
    await reservation_repository.create(
        Reservation(tour_id=soon_tour.id, user_id=tourist.id, number_of_guests=5)
    )

    reservations = await reservation_repository.get_by_tour_id(future_tour.id)

    assert [r.user_id for r in reservations] == [tourist.id, other_tourist.id]
    assert all(r.tour is None and r.user is None for r in reservations)


@pytest.mark.asyncio
async def test_total_guests_counts_active_only(
    reservation_repository, test_engine, future_tour, tourist, other_tourist
):
    from sqlalchemy import text

    assert await reservation_repository.get_total_guests_for_tour(future_tour.id) == 0

    await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=tourist.id, number_of_guests=3)
    )
    cancelled = await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=other_tourist.id, number_of_guests=4)
    )
    async with test_engine.begin() as conn:
        await conn.execute(
            text("UPDATE Reservations SET Status = 'Cancelled' WHERE Id = :Id"),
            {"Id": cancelled.id}
        )

    assert await reservation_repository.get_total_guests_for_tour(future_tour.id) == 3


@pytest.mark.asyncio
async def test_cancel_reservation_deletes_row(reservation_repository, future_tour, tourist):
    created = await reservation_repository.create(
        Reservation(tour_id=future_tour.id, user_id=tourist.id, number_of_guests=1)
    )

    assert await reservation_repository.cancel_reservation(created.id) is True
    assert await reservation_repository.get_by_id(created.id) is None
    assert await reservation_repository.cancel_reservation(created.id) is False


@pytest.mark.asyncio
async def test_stored_dates_use_database_format(reservation_repository, test_engine, soon_tour, tourist):
    from sqlalchemy import text

    await reservation_repository.create(
        Reservation(tour_id=soon_tour.id, user_id=tourist.id, number_of_guests=1)
    )

    async with test_engine.connect() as conn:
        stored = (await conn.execute(text("SELECT ReservationDate FROM Reservations"))).scalar_one()

    assert datetime.strptime(stored, "%Y-%m-%d %H:%M:%S") <= datetime.now() + timedelta(seconds=1)
