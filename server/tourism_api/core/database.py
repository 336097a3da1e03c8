"""Database engine configuration and schema bootstrap."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS Users (
        Id INTEGER PRIMARY KEY AUTOINCREMENT,
        Username TEXT NOT NULL UNIQUE,
        Role TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Tours (
        Id INTEGER PRIMARY KEY AUTOINCREMENT,
        Name TEXT NOT NULL,
        Description TEXT NOT NULL,
        DateTime TEXT NOT NULL,
        MaxGuests INTEGER NOT NULL,
        Status TEXT NOT NULL,
        GuideId INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Reservations (
        Id INTEGER PRIMARY KEY AUTOINCREMENT,
        TourId INTEGER NOT NULL,
        UserId INTEGER NOT NULL,
        NumberOfGuests INTEGER NOT NULL,
        ReservationDate TEXT NOT NULL,
        Status TEXT NOT NULL DEFAULT 'Active'
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_tours_guide_id ON Tours (GuideId)",
    "CREATE INDEX IF NOT EXISTS ix_reservations_user_id ON Reservations (UserId)",
    "CREATE INDEX IF NOT EXISTS ix_reservations_tour_id ON Reservations (TourId)",
)


def create_engine(database_url: str = settings.database_url) -> AsyncEngine:
    """
    Create an async engine for a SQLite database URL.

    In-memory databases share a single connection so every repository call
    sees the same data; file databases open a fresh connection per call.
    """
    in_memory = ":memory:" in database_url or database_url.endswith("://")
    return create_async_engine(
        database_url,
        echo=settings.database_echo,
        poolclass=StaticPool if in_memory else NullPool,
        connect_args={"check_same_thread": False},
    )


# Create async engine
engine = create_engine()


def get_engine() -> AsyncEngine:
    """
    Dependency function that returns the application engine.

    Returns:
        AsyncEngine: Database engine
    """
    return engine


async def init_db(target: AsyncEngine | None = None) -> None:
    """Create the Users, Tours and Reservations tables if they are missing."""
    target = target or engine
    async with target.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(text(statement))
    logger.info("Database schema ensured", extra={"url": str(target.url)})


async def check_db(target: AsyncEngine | None = None) -> bool:
    """Return True if the database answers a trivial query."""
    target = target or engine
    async with target.connect() as conn:
        result = await conn.execute(text("SELECT 1"))
        return result.scalar_one() == 1


async def close_db(target: AsyncEngine | None = None) -> None:
    """Close database connections."""
    await (target or engine).dispose()
