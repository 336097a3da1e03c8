"""Database failures surface as generic 500 Problem Details responses."""

import logging

import pytest
from sqlalchemy import text


async def _drop(engine, table: str) -> None:
    async with engine.begin() as conn:
        await conn.execute(text(f"DROP TABLE {table}"))


@pytest.mark.asyncio
async def test_tour_listing_database_failure(test_client, test_engine, caplog):
    await _drop(test_engine, "Tours")

    with caplog.at_level(logging.ERROR):
        response = await test_client.get("/api/tours")

    assert response.status_code == 500
    data = response.json()
    assert data["title"] == "Internal Server Error"
    assert data["detail"] == "An error occurred while fetching tours."
    assert "error_id" in data
    # SQL details are logged, never returned
    assert "no such table" not in response.text
    assert any("no such table" in str(getattr(r, "error", "")) for r in caplog.records)


@pytest.mark.asyncio
async def test_get_tour_database_failure(test_client, test_engine):
    await _drop(test_engine, "Tours")

    response = await test_client.get("/api/tours/1")

    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while fetching the tour."


@pytest.mark.asyncio
async def test_create_reservation_database_failure(test_client, test_engine, future_tour, tourist):
    await _drop(test_engine, "Reservations")

    response = await test_client.post(
        f"/api/tours/{future_tour.id}/reservations",
        params={"userId": tourist.id},
        json={"numberOfGuests": 1},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while creating the reservation."


@pytest.mark.asyncio
async def test_cancel_reservation_database_failure(test_client, test_engine, tourist):
    await _drop(test_engine, "Reservations")

    response = await test_client.delete("/api/tours/reservations/1", params={"userId": tourist.id})

    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while cancelling the reservation."


@pytest.mark.asyncio
async def test_problem_details_media_type(test_client):
    response = await test_client.get("/api/tours/77")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["instance"] == "/api/tours/77"
