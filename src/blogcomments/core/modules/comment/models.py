from datetime import datetime

from pydantic import Field

from blogcomments.core.db import MongoModel
from blogcomments.utils import now

POST_ID_MAX_LENGTH = 200
NAME_MAX_LENGTH = 80
MESSAGE_MAX_LENGTH = 2000
DEVICE_TOKEN_MAX_LENGTH = 128


class Comment(MongoModel):
    """Comment on a blog post, optionally replying to another comment of the same post."""

    id: int = Field(alias="_id", serialization_alias="id")
    post_id: str
    parent_id: int | None = None  # None for top-level comments
    name: str
    message: str
    device_token: str  # Opaque client credential, only compared for equality
    hidden: bool = False  # Soft-deleted; kept so replies stay attached
    created_at: datetime = Field(default_factory=now)


class CommentNode(Comment):
    """Comment with its replies, rebuilt on every load and never persisted."""

    replies: list["CommentNode"] = Field(default_factory=list)

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentNode":
        return cls.model_validate({**comment.model_dump(), "replies": []})
