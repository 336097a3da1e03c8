"""Tour listing schemas."""

from pydantic import Field

from ..models.base import Entity
from ..models.tour import Tour

__all__ = ["PagedTours", "ORDER_BY_COLUMNS", "ORDER_DIRECTIONS", "normalize_ordering"]

ORDER_BY_COLUMNS = ("Name", "Description", "DateTime", "MaxGuests")
ORDER_DIRECTIONS = ("ASC", "DESC")


def normalize_ordering(order_by: str, order_direction: str) -> tuple[str, str]:
    """Return the sort column and direction, falling back to Name/ASC for unknown values."""
    if order_by not in ORDER_BY_COLUMNS:
        order_by = "Name"
    if order_direction not in ORDER_DIRECTIONS:
        order_direction = "ASC"
    return order_by, order_direction


class PagedTours(Entity):
    """One page of tours plus the number of tours across all pages."""

    data: list[Tour] = Field(default_factory=list, description="Tours on this page")
    total_count: int = Field(0, description="Number of matching tours")
