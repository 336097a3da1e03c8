"""Reservation entity."""

from datetime import datetime
from enum import Enum

from .base import Entity
from .tour import Tour
from .user import User

MAX_GUESTS_PER_RESERVATION = 80


class ReservationStatus(str, Enum):
    """Reservation status enumeration."""
    ACTIVE = "Active"
    CANCELLED = "Cancelled"


class Reservation(Entity):
    """
    A booking by a user against a tour for a number of guests.

    ``tour`` and ``user`` carry display fields filled in by joined reads;
    they are ``None`` on plain reads and on freshly created reservations.
    """

    id: int = 0
    tour_id: int = 0
    user_id: int = 0
    number_of_guests: int = 0
    reservation_date: datetime | None = None
    status: str = ReservationStatus.ACTIVE.value

    tour: Tour | None = None
    user: User | None = None

    def is_valid(self) -> bool:
        return (
            self.tour_id > 0
            and self.user_id > 0
            and 0 < self.number_of_guests <= MAX_GUESTS_PER_RESERVATION
            and self.status in (ReservationStatus.ACTIVE.value, ReservationStatus.CANCELLED.value)
        )
