"""Unit tests for the tour repository."""

from datetime import datetime, timedelta

import pytest

from tourism_api.repositories.base import from_db_datetime, to_db_datetime


@pytest.mark.asyncio
async def test_create_and_get_tour(tour_repository, guide, tour_factory):
    created = await tour_repository.create(tour_factory(guide.id))

    assert created.id > 0

    found = await tour_repository.get_by_id(created.id)
    assert found == created


@pytest.mark.asyncio
async def test_get_tour_by_id_not_found(tour_repository):
    assert await tour_repository.get_by_id(999) is None


@pytest.mark.asyncio
async def test_update_tour(tour_repository, future_tour):
    changed = future_tour.model_copy(update={"name": "Night Fortress Walk", "max_guests": 25})

    updated = await tour_repository.update(changed)

    assert updated == changed
    assert (await tour_repository.get_by_id(future_tour.id)).max_guests == 25


@pytest.mark.asyncio
async def test_update_missing_tour_returns_none(tour_repository, guide, tour_factory):
    assert await tour_repository.update(tour_factory(guide.id, id=404)) is None


@pytest.mark.asyncio
async def test_delete_tour(tour_repository, future_tour):
    assert await tour_repository.delete(future_tour.id) is True
    assert await tour_repository.get_by_id(future_tour.id) is None
    assert await tour_repository.delete(future_tour.id) is False


@pytest.mark.asyncio
async def test_get_by_guide(tour_repository, user_repository, guide, tour_factory):
    from tourism_api.models import User

    other_guide = await user_repository.create(User(username="petar", role="guide"))
    await tour_repository.create(tour_factory(guide.id, name="A"))
    await tour_repository.create(tour_factory(guide.id, name="B"))
    await tour_repository.create(tour_factory(other_guide.id, name="C"))

    tours = await tour_repository.get_by_guide(guide.id)

    assert sorted(t.name for t in tours) == ["A", "B"]
    assert all(t.guide_id == guide.id for t in tours)


@pytest.mark.asyncio
async def test_get_paged_orders_and_pages(tour_repository, guide, tour_factory):
    for name, guests in [("Charlie", 5), ("Alpha", 30), ("Bravo", 12), ("Delta", 1)]:
        await tour_repository.create(tour_factory(guide.id, name=name, max_guests=guests))

    first = await tour_repository.get_paged(1, 2, "Name", "ASC")
    second = await tour_repository.get_paged(2, 2, "Name", "ASC")
    by_guests = await tour_repository.get_paged(1, 10, "MaxGuests", "DESC")

    assert [t.name for t in first] == ["Alpha", "Bravo"]
    assert [t.name for t in second] == ["Charlie", "Delta"]
    assert [t.max_guests for t in by_guests] == [30, 12, 5, 1]


@pytest.mark.asyncio
async def test_get_paged_unknown_ordering_falls_back(tour_repository, guide, tour_factory):
    for name in ["Zeta", "Eta", "Beta"]:
        await tour_repository.create(tour_factory(guide.id, name=name))

    tours = await tour_repository.get_paged(1, 10, "Name; DROP TABLE Tours", "sideways")

    assert [t.name for t in tours] == ["Beta", "Eta", "Zeta"]
    assert await tour_repository.count_all() == 3


@pytest.mark.asyncio
async def test_get_paged_by_date(tour_repository, guide, tour_factory):
    await tour_repository.create(tour_factory(guide.id, name="Later", starts_in=timedelta(days=30)))
    await tour_repository.create(tour_factory(guide.id, name="Sooner", starts_in=timedelta(days=3)))

    tours = await tour_repository.get_paged(1, 10, "DateTime", "ASC")

    assert [t.name for t in tours] == ["Sooner", "Later"]


@pytest.mark.asyncio
async def test_status_filter_and_count(tour_repository, guide, tour_factory):
    await tour_repository.create(tour_factory(guide.id, name="Draft", status="not ready"))
    await tour_repository.create(tour_factory(guide.id, name="Live", status="published"))

    published = await tour_repository.get_paged(1, 10, "Name", "ASC", "published")

    assert [t.name for t in published] == ["Live"]
    assert await tour_repository.count_all("published") == 1
    assert await tour_repository.count_all() == 2


def test_db_datetime_format():
    assert to_db_datetime(datetime(2030, 5, 1, 9, 30, 15, 999)) == "2030-05-01 09:30:15"
    assert to_db_datetime(datetime(999, 6, 1, 10, 0)) == "0999-06-01 10:00:00"
    assert from_db_datetime("0999-06-01 10:00:00") == datetime(999, 6, 1, 10, 0)


@pytest.mark.asyncio
async def test_early_year_tour_round_trip(tour_repository, guide, tour_factory):
    created = await tour_repository.create(tour_factory(guide.id, date_time=datetime(999, 6, 1, 10, 0)))

    assert (await tour_repository.get_by_id(created.id)).date_time == datetime(999, 6, 1, 10, 0)
    assert await tour_repository.get_paged(1, 10, "DateTime", "ASC") == [created]


@pytest.mark.asyncio
async def test_create_and_update_drop_microseconds(tour_repository, guide, tour_factory):
    start = datetime(2031, 1, 2, 3, 4, 5, 678901)

    created = await tour_repository.create(tour_factory(guide.id, date_time=start))
    assert created.date_time == start.replace(microsecond=0)
    assert await tour_repository.get_by_id(created.id) == created

    updated = await tour_repository.update(created.model_copy(update={"date_time": start}))
    assert updated == created
