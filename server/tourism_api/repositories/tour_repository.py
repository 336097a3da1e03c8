"""Tour repository: SQL access to the Tours table."""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import text

from ..models.tour import Tour
from ..schemas.tour import normalize_ordering
from .base import BaseRepository, from_db_datetime, to_db_datetime

logger = logging.getLogger(__name__)

TOUR_COLUMNS = "Id, Name, Description, DateTime, MaxGuests, Status, GuideId"


def map_tour(row: Mapping[str, Any]) -> Tour:
    """Build a Tour from a full Tours row."""
    return Tour(
        id=row["Id"],
        name=row["Name"],
        description=row["Description"],
        date_time=from_db_datetime(row["DateTime"]),
        max_guests=row["MaxGuests"],
        status=row["Status"],
        guide_id=row["GuideId"],
    )


def _tour_params(tour: Tour) -> dict[str, Any]:
    return {
        "Name": tour.name,
        "Description": tour.description,
        "DateTime": to_db_datetime(tour.date_time),
        "MaxGuests": tour.max_guests,
        "Status": tour.status,
        "GuideId": tour.guide_id,
    }


def _as_stored(tour: Tour) -> Tour:
    """The tour as a later read returns it: DateTime kept to whole seconds."""
    return tour.model_copy(update={"date_time": tour.date_time.replace(microsecond=0)})


class TourRepository(BaseRepository):
    """Repository for CRUD operations on the Tours table."""

    async def get_paged(
        self,
        page: int,
        page_size: int,
        order_by: str = "Name",
        order_direction: str = "ASC",
        status: str = "",
    ) -> list[Tour]:
        """
        Get one page of tours.

        Args:
            page: 1-based page number
            page_size: Tours per page
            order_by: Sort column; unknown names sort by Name
            order_direction: ASC or DESC; anything else sorts ascending
            status: When non-empty, only tours with exactly this status

        Returns:
            Tours on the requested page
        """
        # Only whitelisted identifiers reach the SQL text
        order_by, order_direction = normalize_ordering(order_by, order_direction)

        query = f"SELECT {TOUR_COLUMNS} FROM Tours"
        params: dict[str, Any] = {
            "Limit": page_size,
            "Offset": (page - 1) * page_size,
        }
        if status:
            query += " WHERE Status = :Status"
            params["Status"] = status
        query += f" ORDER BY {order_by} {order_direction}, Id ASC LIMIT :Limit OFFSET :Offset"

        async with self._connection("get_paged") as conn:
            result = await conn.execute(text(query), params)
            return [map_tour(row) for row in result.mappings()]

    async def count_all(self, status: str = "") -> int:
        """Count tours, optionally only those with the given status."""
        query = "SELECT COUNT(*) FROM Tours"
        params = {}
        if status:
            query += " WHERE Status = :Status"
            params["Status"] = status

        async with self._connection("count_all") as conn:
            result = await conn.execute(text(query), params)
            return result.scalar_one()

    async def get_by_guide(self, guide_id: int) -> list[Tour]:
        """Get all tours owned by a guide."""
        query = f"SELECT {TOUR_COLUMNS} FROM Tours WHERE GuideId = :GuideId ORDER BY DateTime ASC, Id ASC"

        async with self._connection("get_by_guide") as conn:
            result = await conn.execute(text(query), {"GuideId": guide_id})
            return [map_tour(row) for row in result.mappings()]

    async def get_by_id(self, tour_id: int) -> Optional[Tour]:
        """
        Get tour by ID.

        Returns:
            Tour if found, None otherwise
        """
        query = f"SELECT {TOUR_COLUMNS} FROM Tours WHERE Id = :Id"

        async with self._connection("get_by_id") as conn:
            result = await conn.execute(text(query), {"Id": tour_id})
            row = result.mappings().first()
            return map_tour(row) if row else None

    async def create(self, tour: Tour) -> Tour:
        """
        Insert a tour.

        Returns:
            Copy of the tour carrying the database-assigned ID
        """
        query = """
            INSERT INTO Tours (Name, Description, DateTime, MaxGuests, Status, GuideId)
            VALUES (:Name, :Description, :DateTime, :MaxGuests, :Status, :GuideId)
        """

        async with self._connection("create", write=True) as conn:
            result = await conn.execute(text(query), _tour_params(tour))
            created = _as_stored(tour).model_copy(update={"id": result.lastrowid})

        logger.info(
            "Tour inserted",
            extra={"tour_id": created.id, "guide_id": created.guide_id}
        )
        return created

    async def update(self, tour: Tour) -> Optional[Tour]:
        """
        Replace every column of an existing tour.

        Returns:
            The updated tour, or None if no tour has ``tour.id``
        """
        query = """
            UPDATE Tours
            SET Name = :Name, Description = :Description, DateTime = :DateTime,
                MaxGuests = :MaxGuests, Status = :Status, GuideId = :GuideId
            WHERE Id = :Id
        """

        async with self._connection("update", write=True) as conn:
            result = await conn.execute(text(query), {**_tour_params(tour), "Id": tour.id})
            return _as_stored(tour) if result.rowcount > 0 else None

    async def delete(self, tour_id: int) -> bool:
        """Delete a tour; returns True if a row was removed."""
        async with self._connection("delete", write=True) as conn:
            result = await conn.execute(text("DELETE FROM Tours WHERE Id = :Id"), {"Id": tour_id})
            return result.rowcount > 0
