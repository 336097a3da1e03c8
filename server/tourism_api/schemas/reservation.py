"""Reservation request schemas."""

from pydantic import Field

from ..models.base import Entity

__all__ = ["CreateReservationRequest"]


class CreateReservationRequest(Entity):
    """Request body for booking a tour; tour and user come from the URL."""

    number_of_guests: int = Field(0, description="Number of guests to book")
