"""Domain entities exchanged between repositories and routers."""

from .reservation import Reservation, ReservationStatus
from .tour import Tour, TourStatus
from .user import User, UserRole

__all__ = [
    "Tour",
    "TourStatus",
    "User",
    "UserRole",
    "Reservation",
    "ReservationStatus",
]
