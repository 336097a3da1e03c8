"""FastAPI dependencies that hand repositories to the routers."""

from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncEngine

from ..models.base import MAX_DB_INTEGER
from ..repositories import ReservationRepository, TourRepository, UserRepository
from .config import Settings, settings
from .database import get_engine


def get_settings() -> Settings:
    """Application settings; overridable in tests."""
    return settings


def get_tour_repository(engine: AsyncEngine = Depends(get_engine)) -> TourRepository:
    return TourRepository(engine)


def get_user_repository(engine: AsyncEngine = Depends(get_engine)) -> UserRepository:
    return UserRepository(engine)


def get_reservation_repository(engine: AsyncEngine = Depends(get_engine)) -> ReservationRepository:
    return ReservationRepository(engine)


# Module-level dependency markers, to avoid B008 linting errors in signatures
SettingsDependency = Depends(get_settings)
EngineDependency = Depends(get_engine)
TourRepositoryDependency = Depends(get_tour_repository)
UserRepositoryDependency = Depends(get_user_repository)
ReservationRepositoryDependency = Depends(get_reservation_repository)

# Path IDs must fit a SQLite INTEGER; anything larger is a 400
PathId = Annotated[int, Path(ge=-MAX_DB_INTEGER - 1, le=MAX_DB_INTEGER)]
