from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from blogcomments.core.core import Service
from blogcomments.core.db import store_errors
from blogcomments.core.modules.comment.models import (
    DEVICE_TOKEN_MAX_LENGTH,
    MESSAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    POST_ID_MAX_LENGTH,
    Comment,
)
from blogcomments.core.modules.counter.models import CounterType
from blogcomments.errors import AccessDeniedError, ValidationError
from blogcomments.utils import parse_numeric_id, sanitize_text

logger = structlog.get_logger(__name__)


class CommentService(Service):
    """Stores post comments and soft-deletes them on behalf of their device token."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("comments")

    async def on_start(self) -> None:
        """Create index for per-post chronological listing."""
        with store_errors("create_indexes"):
            await self._collection.create_index([("post_id", 1), ("created_at", 1)])

    async def list_comments(self, post_id: str) -> list[Comment]:
        """Get all comments of a post, hidden ones included, oldest first."""
        with store_errors("list_comments"):
            cursor = self._collection.find({"post_id": post_id}).sort([("created_at", 1), ("_id", 1)])
            return await Comment.list_cursor(cursor)

    async def get_comment(self, comment_id: int) -> Comment | None:
        with store_errors("get_comment"):
            doc = await self._collection.find_one({"_id": comment_id})
        return Comment.model_validate(doc) if doc else None

    async def create_comment(
        self, post_id: Any, parent_id: Any, name: Any, message: Any, device_token: Any
    ) -> Comment:
        """Sanitize raw input and insert a new visible comment.

        Text fields are trimmed and truncated before the emptiness check, so
        whitespace-only input is rejected. A parent must belong to the same post.
        """
        post_id = sanitize_text(post_id, POST_ID_MAX_LENGTH)
        name = sanitize_text(name, NAME_MAX_LENGTH)
        message = sanitize_text(message, MESSAGE_MAX_LENGTH)
        device_token = sanitize_text(device_token, DEVICE_TOKEN_MAX_LENGTH)

        if not post_id or not name or not message or not device_token:
            raise ValidationError("Missing fields")

        resolved_parent_id: int | None = None
        if parent_id is not None:
            resolved_parent_id = parse_numeric_id(parent_id)
            if resolved_parent_id is None:
                raise ValidationError("Bad parentId")
            parent = await self.get_comment(resolved_parent_id)
            if parent is None or parent.post_id != post_id:
                raise ValidationError("Bad parentId")

        comment = Comment(
            id=await self.core.services.counter.get_next_sequence(CounterType.COMMENT),
            post_id=post_id,
            parent_id=resolved_parent_id,
            name=name,
            message=message,
            device_token=device_token,
        )
        with store_errors("create_comment"):
            await self._collection.insert_one(comment.to_mongo())

        logger.info("comment_created", comment_id=comment.id, post_id=post_id, parent_id=resolved_parent_id)
        return comment

    async def hide_comment(self, comment_id: Any, device_token: Any) -> None:
        """Soft-delete a comment if the device token owns it.

        Ownership is checked inside the update filter, so there is no gap between
        check and write. A missing comment and a foreign one both raise AccessDeniedError.
        """
        resolved_id = parse_numeric_id(comment_id)
        device_token = sanitize_text(device_token, DEVICE_TOKEN_MAX_LENGTH)
        if not resolved_id or not device_token:
            raise ValidationError("Missing fields")

        with store_errors("hide_comment"):
            result = await self._collection.update_one(
                {"_id": resolved_id, "device_token": device_token},
                {"$set": {"hidden": True}},
            )

        if result.matched_count == 0:
            logger.info("comment_hide_denied", comment_id=resolved_id)
            raise AccessDeniedError
        logger.info("comment_hidden", comment_id=resolved_id)
