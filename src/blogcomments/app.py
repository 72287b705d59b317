from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from blogcomments.config import Config
from blogcomments.core.core import Core
from blogcomments.core.modules.comment.models import Comment
from blogcomments.core.modules.comment.tree import build_comment_tree
from blogcomments.core.modules.comment.view import CommentView, ViewOptions, build_comment_views


class App:
    """Facade for all application operations, delegating to Core services."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def list_comments(self, post_id: str | None) -> list[Comment]:
        """Get flat comment list for a post. No post id yields an empty list."""
        if not post_id:
            return []
        return await self._core.services.comment.list_comments(post_id)

    async def create_comment(self, post_id: Any, parent_id: Any, name: Any, message: Any, device_token: Any) -> Comment:
        """Add a comment or reply to a post."""
        return await self._core.services.comment.create_comment(post_id, parent_id, name, message, device_token)

    async def hide_comment(self, comment_id: Any, device_token: Any) -> None:
        """Soft-delete own comment."""
        await self._core.services.comment.hide_comment(comment_id, device_token)

    async def get_comment_tree(self, post_id: str | None, device_token: str | None, expand: bool = False) -> list[CommentView]:
        """Get the post's comments as nested views, marking those owned by the device token."""
        comments = await self.list_comments(post_id)
        options = ViewOptions.from_config(self._core.config, expand=expand)
        return build_comment_views(build_comment_tree(comments), device_token, options)
