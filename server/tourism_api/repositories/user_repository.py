"""User repository: SQL access to the Users table."""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import text

from ..models.user import User
from .base import BaseRepository

logger = logging.getLogger(__name__)


def map_user(row: Mapping[str, Any]) -> User:
    return User(id=row["Id"], username=row["Username"], role=row["Role"])


class UserRepository(BaseRepository):
    """Repository for operations on the Users table."""

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User if found, None otherwise
        """
        async with self._connection("get_by_id") as conn:
            result = await conn.execute(
                text("SELECT Id, Username, Role FROM Users WHERE Id = :Id"),
                {"Id": user_id}
            )
            row = result.mappings().first()
            return map_user(row) if row else None

    async def get_by_username(self, username: str) -> Optional[User]:
        async with self._connection("get_by_username") as conn:
            result = await conn.execute(
                text("SELECT Id, Username, Role FROM Users WHERE Username = :Username"),
                {"Username": username}
            )
            row = result.mappings().first()
            return map_user(row) if row else None

    async def get_all(self, role: str = "") -> list[User]:
        """List users ordered by username, optionally only one role."""
        query = "SELECT Id, Username, Role FROM Users"
        params = {}
        if role:
            query += " WHERE Role = :Role"
            params["Role"] = role
        query += " ORDER BY Username ASC"

        async with self._connection("get_all") as conn:
            result = await conn.execute(text(query), params)
            return [map_user(row) for row in result.mappings()]

    async def create(self, user: User) -> User:
        """
        Insert a user.

        Raises:
            sqlalchemy.exc.IntegrityError: If the username is taken
        """
        async with self._connection("create", write=True) as conn:
            result = await conn.execute(
                text("INSERT INTO Users (Username, Role) VALUES (:Username, :Role)"),
                {"Username": user.username, "Role": user.role}
            )
            created = user.model_copy(update={"id": result.lastrowid})

        logger.info(
            "User inserted",
            extra={"user_id": created.id, "role": created.role}
        )
        return created
