"""Repository layer: parameterized SQL against the SQLite database."""

from .reservation_repository import ReservationRepository
from .tour_repository import TourRepository
from .user_repository import UserRepository

__all__ = [
    "ReservationRepository",
    "TourRepository",
    "UserRepository",
]
