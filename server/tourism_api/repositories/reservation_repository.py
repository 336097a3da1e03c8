"""Reservation repository: SQL access to the Reservations table."""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy import text

from ..models.reservation import Reservation, ReservationStatus
from ..models.tour import Tour
from ..models.user import User
from .base import BaseRepository, from_db_datetime, to_db_datetime

logger = logging.getLogger(__name__)

RESERVATION_COLUMNS = "r.Id, r.TourId, r.UserId, r.NumberOfGuests, r.ReservationDate, r.Status"


def map_reservation(row: Mapping[str, Any]) -> Reservation:
    """
    Build a Reservation from a Reservations row.

    Joined display columns (TourName, TourDateTime, MaxGuests, Username)
    populate the nested tour and user when present and non-null.
    """
    reservation = Reservation(
        id=row["Id"],
        tour_id=row["TourId"],
        user_id=row["UserId"],
        number_of_guests=row["NumberOfGuests"],
        reservation_date=from_db_datetime(row["ReservationDate"]),
        status=row["Status"],
    )

    if row.get("TourName") is not None:
        reservation.tour = Tour(
            id=row["TourId"],
            name=row["TourName"],
            date_time=from_db_datetime(row["TourDateTime"]),
            max_guests=row["MaxGuests"],
        )

    if row.get("Username") is not None:
        reservation.user = User(id=row["UserId"], username=row["Username"])

    return reservation


class ReservationRepository(BaseRepository):
    """Repository for operations on the Reservations table."""

    async def create(self, reservation: Reservation) -> Reservation:
        """
        Insert a reservation stamped with the current time and Active status.

        Returns:
            The stored reservation with its database-assigned ID
        """
        created = reservation.model_copy(update={
            "reservation_date": datetime.now().replace(microsecond=0),
            "status": ReservationStatus.ACTIVE.value,
        })

        query = """
            INSERT INTO Reservations (TourId, UserId, NumberOfGuests, ReservationDate, Status)
            VALUES (:TourId, :UserId, :NumberOfGuests, :ReservationDate, :Status)
        """

        async with self._connection("create", write=True) as conn:
            result = await conn.execute(text(query), {
                "TourId": created.tour_id,
                "UserId": created.user_id,
                "NumberOfGuests": created.number_of_guests,
                "ReservationDate": to_db_datetime(created.reservation_date),
                "Status": created.status,
            })
            created.id = result.lastrowid

        logger.info(
            "Reservation inserted",
            extra={
                "reservation_id": created.id,
                "tour_id": created.tour_id,
                "user_id": created.user_id,
                "number_of_guests": created.number_of_guests,
            }
        )
        return created

    async def get_by_user_id(self, user_id: int) -> list[Reservation]:
        """Get a user's reservations with tour and user display fields, newest first."""
        query = f"""
            SELECT {RESERVATION_COLUMNS},
                   t.Name AS TourName, t.DateTime AS TourDateTime, t.MaxGuests,
                   u.Username
            FROM Reservations r
            INNER JOIN Tours t ON r.TourId = t.Id
            INNER JOIN Users u ON r.UserId = u.Id
            WHERE r.UserId = :UserId
            ORDER BY r.ReservationDate DESC, r.Id DESC
        """

        async with self._connection("get_by_user_id") as conn:
            result = await conn.execute(text(query), {"UserId": user_id})
            return [map_reservation(row) for row in result.mappings()]

    async def get_by_tour_id(self, tour_id: int) -> list[Reservation]:
        """Get all reservations for a tour, without joined display fields."""
        query = f"""
            SELECT {RESERVATION_COLUMNS}
            FROM Reservations r
            WHERE r.TourId = :TourId
            ORDER BY r.Id ASC
        """

        async with self._connection("get_by_tour_id") as conn:
            result = await conn.execute(text(query), {"TourId": tour_id})
            return [map_reservation(row) for row in result.mappings()]

    async def get_by_id(self, reservation_id: int) -> Optional[Reservation]:
        """
        Get reservation by ID with its tour's display fields.

        A reservation whose tour row no longer exists is still returned,
        with ``tour`` left as None.
        """
        query = f"""
            SELECT {RESERVATION_COLUMNS},
                   t.Name AS TourName, t.DateTime AS TourDateTime, t.MaxGuests
            FROM Reservations r
            LEFT JOIN Tours t ON r.TourId = t.Id
            WHERE r.Id = :Id
        """

        async with self._connection("get_by_id") as conn:
            result = await conn.execute(text(query), {"Id": reservation_id})
            row = result.mappings().first()
            return map_reservation(row) if row else None

    async def cancel_reservation(self, reservation_id: int) -> bool:
        """Delete a reservation; returns True if a row was removed."""
        async with self._connection("cancel_reservation", write=True) as conn:
            result = await conn.execute(
                text("DELETE FROM Reservations WHERE Id = :Id"),
                {"Id": reservation_id}
            )
            return result.rowcount > 0

    async def get_total_guests_for_tour(self, tour_id: int) -> int:
        """Sum the guests of all Active reservations for a tour."""
        query = """
            SELECT COALESCE(SUM(NumberOfGuests), 0)
            FROM Reservations
            WHERE TourId = :TourId AND Status = :Status
        """

        async with self._connection("get_total_guests_for_tour") as conn:
            result = await conn.execute(
                text(query),
                {"TourId": tour_id, "Status": ReservationStatus.ACTIVE.value}
            )
            return result.scalar_one()
