"""HTTP client for the comments API, as used by a blog page."""

import secrets
import threading
from typing import Any

import requests
import structlog
from pydantic import ValidationError

from blogcomments.core.modules.comment.models import Comment, CommentNode
from blogcomments.core.modules.comment.tree import build_comment_tree

logger = structlog.get_logger(__name__)


class CommentsClientError(Exception):
    """Raised when a request to the comments API fails."""


def generate_device_token() -> str:
    """Random 16-byte token in hex, kept by the client in place of an account."""
    return secrets.token_hex(16)


class CommentsClient:
    """Comments of one post, seen from one device.

    Every write is followed by a reload, and a second submit is refused while
    one is in flight. Failures are logged and raised as CommentsClientError;
    nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        post_id: str,
        device_token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.post_id = post_id
        self.device_token = device_token or generate_device_token()
        self.session = session or requests.Session()
        self._submit_lock = threading.Lock()
        self.comments: list[Comment] = []

    @property
    def submitting(self) -> bool:
        """Whether a submit is in flight."""
        return self._submit_lock.locked()

    @property
    def _url(self) -> str:
        return f"{self.base_url}/api/comments"

    def load(self) -> list[CommentNode]:
        """Fetch the post's comments and return them as a reply tree."""
        if not self.post_id:
            self.comments = []
            return []
        data = self._send("get", params={"postId": self.post_id})
        try:
            self.comments = [Comment.model_validate(item) for item in data] if isinstance(data, list) else []
        except ValidationError as e:
            logger.exception("comments_response_invalid", post_id=self.post_id)
            raise CommentsClientError(f"Unexpected comment data: {e}") from e
        return build_comment_tree(self.comments)

    def submit(self, name: str, message: str, parent_id: int | None = None) -> list[CommentNode] | None:
        """Post a comment and return the reloaded tree.

        Returns None without sending when name or message is blank, or when
        another submit has not finished yet.
        """
        if not name.strip() or not message.strip():
            return None
        if not self._submit_lock.acquire(blocking=False):
            logger.debug("comment_submit_skipped", post_id=self.post_id)
            return None

        try:
            self._send(
                "post",
                json={
                    "postId": self.post_id,
                    "parentId": parent_id,
                    "name": name.strip(),
                    "message": message.strip(),
                    "deviceToken": self.device_token,
                },
            )
            return self.load()
        finally:
            self._submit_lock.release()

    def delete(self, comment_id: int) -> list[CommentNode]:
        """Hide one of this device's comments and return the reloaded tree."""
        self._send("delete", json={"commentId": comment_id, "deviceToken": self.device_token})
        return self.load()

    def is_owner(self, comment: Comment) -> bool:
        return comment.device_token == self.device_token

    def _send(self, method: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method.upper(), self._url, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.exception("comments_request_failed", method=method, post_id=self.post_id)
            raise CommentsClientError(f"Comment request failed: {e}") from e
