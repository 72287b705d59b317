from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Self

import structlog
from pydantic import BaseModel, ConfigDict
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.errors import PyMongoError

from blogcomments.errors import StoreError

logger = structlog.get_logger(__name__)


class MongoModel(BaseModel):
    """Base for documents stored in MongoDB. Subclasses declare `id` aliased to `_id`."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StoreError, keeping the driver's message."""
    try:
        yield
    except PyMongoError as e:
        logger.error("store_operation_failed", operation=operation, error=str(e))
        raise StoreError(str(e)) from e
