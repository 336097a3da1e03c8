"""Tour entity."""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from .base import MAX_DB_INTEGER, Entity


class TourStatus(str, Enum):
    """Well-known tour statuses."""
    NOT_READY = "not ready"
    PUBLISHED = "published"


class Tour(Entity):
    """A scheduled guided activity with a guest capacity and an owning guide."""

    id: int = Field(0, le=MAX_DB_INTEGER, description="Database ID, assigned on insert")
    name: str = Field("", description="Tour name")
    description: str = Field("", description="Tour description")
    date_time: datetime | None = Field(None, description="Tour start (local time)")
    max_guests: int = Field(0, le=MAX_DB_INTEGER, description="Guest capacity")
    guide_id: int = Field(0, le=MAX_DB_INTEGER, description="ID of the guide who owns the tour")
    status: str = Field(TourStatus.NOT_READY.value, description="Publication status")

    @field_validator("date_time")
    @classmethod
    def to_naive_local(cls, v: datetime | None) -> datetime | None:
        """Store aware timestamps as naive local time, like the database does."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    def is_valid(self) -> bool:
        return (
            bool(self.name.strip())
            and bool(self.description.strip())
            and self.date_time is not None
            and self.max_guests > 0
            and self.guide_id > 0
            and bool(self.status)
        )