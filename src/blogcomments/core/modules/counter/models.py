"""Auto-incrementing counters for sequential ids."""

from enum import StrEnum

from pydantic import Field

from blogcomments.core.db import MongoModel


class CounterType(StrEnum):
    """Types of entities that use sequential numbering."""

    COMMENT = "comment"


class Counter(MongoModel):
    """Atomic counter for sequential ids.

    The counter type is the document `_id`, so there is one counter per type.
    """

    id: CounterType = Field(alias="_id", serialization_alias="id")
    seq: int = 0  # Current value; next id will be seq + 1
