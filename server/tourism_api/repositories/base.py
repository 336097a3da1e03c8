"""Connection handling shared by all repositories."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

logger = logging.getLogger(__name__)

def to_db_datetime(value: datetime) -> str:
    # "YYYY-MM-DD HH:MM:SS", four-digit year even before 1000
    return value.replace(tzinfo=None).isoformat(sep=" ", timespec="seconds")


def from_db_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class BaseRepository:
    """
    Base class for repositories.

    Every public method opens its own connection through :meth:`_connection`
    and closes it before returning. Failures are logged and re-raised
    unchanged; turning them into HTTP responses is the router's job.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @asynccontextmanager
    async def _connection(self, operation: str, write: bool = False) -> AsyncIterator[AsyncConnection]:
        """
        Open a connection for one repository call.

        Args:
            operation: Name of the calling method, used in log records
            write: Run inside a transaction that commits on success
        """
        try:
            if write:
                async with self.engine.begin() as conn:
                    yield conn
            else:
                async with self.engine.connect() as conn:
                    yield conn
        except SQLAlchemyError as e:
            logger.error(
                "Database error while executing SQL",
                extra={
                    "repository": type(self).__name__,
                    "operation": operation,
                    "error": str(e),
                }
            )
            raise
        except Exception as e:
            logger.error(
                "Unexpected repository error",
                extra={
                    "repository": type(self).__name__,
                    "operation": operation,
                    "error": str(e),
                }
            )
            raise
