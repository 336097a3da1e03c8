"""User entity."""

from enum import Enum

from pydantic import Field

from .base import MAX_DB_INTEGER, Entity


class UserRole(str, Enum):
    """User role enumeration."""
    GUIDE = "guide"
    TOURIST = "tourist"


class User(Entity):
    """A guide who owns tours or a tourist who books them."""

    id: int = Field(0, le=MAX_DB_INTEGER, description="Database ID, assigned on insert")
    username: str = Field("", description="Unique login name")
    role: str = Field("", description="guide or tourist")

    def is_valid(self) -> bool:
        return bool(self.username.strip()) and self.role in (UserRole.GUIDE.value, UserRole.TOURIST.value)
