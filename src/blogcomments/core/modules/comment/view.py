"""Display-ready projection of a comment tree."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field

from blogcomments.config import Config
from blogcomments.core.modules.comment.models import CommentNode
from blogcomments.core.modules.comment.tree import walk_comment_tree

REMOVED_PLACEHOLDER = "This comment was removed."


class ViewOptions(BaseModel):
    """Presentation settings, passed explicitly to every render."""

    reply_preview: int = Field(3, ge=0, description="Replies shown before collapsing")
    long_content_chars: int = Field(450, ge=1)
    long_content_lines: int = Field(8, ge=1)
    expand: bool = Field(False, description="Show all replies instead of the preview")

    @classmethod
    def from_config(cls, config: Config, expand: bool = False) -> Self:
        return cls(
            reply_preview=config.reply_preview,
            long_content_chars=config.long_content_chars,
            long_content_lines=config.long_content_lines,
            expand=expand,
        )


class CommentView(BaseModel):
    """Comment as shown to a reader. Never carries the author's device token."""

    id: int
    parent_id: int | None
    depth: int
    created_at: datetime
    hidden: bool
    name: str | None = Field(None, description="Author name, null when hidden")
    message: str | None = Field(None, description="Comment text, null when hidden")
    message_placeholder: str | None = Field(None, description="Text shown instead of a hidden message")
    initials: str
    is_long: bool
    is_owner: bool
    hidden_reply_count: int = 0
    replies: list["CommentView"] = Field(default_factory=list)


def initials(name: str | None) -> str:
    """Up to two upper-case initials from the first two words, '?' for an empty name."""
    parts = (name or "").split()
    if not parts:
        return "?"
    return "".join(part[0] for part in parts[:2]).upper()


def is_long_content(message: str | None, max_chars: int = 450, max_lines: int = 8) -> bool:
    text = message or ""
    if len(text) > max_chars:
        return True
    return len(text.replace("\r\n", "\n").split("\n")) >= max_lines


def build_comment_views(roots: list[CommentNode], device_token: str | None, options: ViewOptions) -> list[CommentView]:
    """Project a comment tree into views, collapsing long reply lists unless expanded."""
    views: dict[int, CommentView] = {}
    top_level: list[CommentView] = []

    for node, depth in walk_comment_tree(roots):
        view = CommentView(
            id=node.id,
            parent_id=node.parent_id,
            depth=depth,
            created_at=node.created_at,
            hidden=node.hidden,
            name=None if node.hidden else node.name,
            message=None if node.hidden else node.message,
            message_placeholder=REMOVED_PLACEHOLDER if node.hidden else None,
            initials=initials(None if node.hidden else node.name),
            is_long=not node.hidden
            and is_long_content(node.message, options.long_content_chars, options.long_content_lines),
            is_owner=bool(device_token) and node.device_token == device_token,
        )
        views[node.id] = view
        if depth == 0 or node.parent_id is None:
            top_level.append(view)
        else:
            views[node.parent_id].replies.append(view)

    if not options.expand:
        for view in views.values():
            if len(view.replies) > options.reply_preview:
                view.hidden_reply_count = len(view.replies) - options.reply_preview
                view.replies = view.replies[: options.reply_preview]

    return top_level
