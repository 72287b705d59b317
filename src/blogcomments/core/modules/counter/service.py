from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from blogcomments.core.core import Service
from blogcomments.core.db import store_errors
from blogcomments.core.modules.counter.models import Counter, CounterType


class CounterService(Service):
    """Service for managing auto-incrementing id sequences."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def get_next_sequence(self, counter_type: CounterType) -> int:
        """Atomically increment and return the next sequence number for a type."""
        with store_errors("next_sequence"):
            result = await self._collection.find_one_and_update(
                {"_id": counter_type},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        # An upserted counter starts at 1
        return Counter.model_validate(result).seq
