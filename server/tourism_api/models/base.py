"""Shared configuration for domain entities."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

# Largest value a SQLite INTEGER column can hold
MAX_DB_INTEGER = 2**63 - 1


class Entity(BaseModel):
    """Base entity: camelCase on the wire, snake_case in Python."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
