"""Comment-related API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from blogcomments.core.modules.comment.models import Comment
from blogcomments.core.modules.comment.view import CommentView
from blogcomments.web.deps import AppDep
from blogcomments.web.openapi import ErrorResponse, SuccessResponse

router: APIRouter = APIRouter(tags=["comments"])


# Raw JSON values; coercion, trimming and length caps happen in CommentService.
class CreateCommentRequest(BaseModel):
    """Request to create a new comment or reply."""

    post_id: Any = Field(None, alias="postId", description="Post the comment belongs to")
    parent_id: Any = Field(None, alias="parentId", description="Numeric id of the comment replied to, or null")
    name: Any = Field(None, description="Display name, up to 80 characters")
    message: Any = Field(None, description="Comment text, up to 2000 characters")
    device_token: Any = Field(None, alias="deviceToken", description="Opaque client-generated token")


class DeleteCommentRequest(BaseModel):
    """Request to hide one's own comment."""

    comment_id: Any = Field(None, alias="commentId", description="Numeric comment id")
    device_token: Any = Field(None, alias="deviceToken", description="Token the comment was created with")


@router.get(
    "/comments",
    summary="List post comments",
    description="Get all comments of a post, hidden ones included, oldest first. Without postId the list is empty.",
    operation_id="listComments",
    responses={
        200: {"description": "Flat list of comments"},
        500: {"model": ErrorResponse, "description": "Comment store failure"},
    },
)
async def list_comments(
    app: AppDep,
    post_id: Annotated[str | None, Query(alias="postId", description="Post identifier")] = None,
) -> list[Comment]:
    return await app.list_comments(post_id)


@router.get(
    "/comments/tree",
    summary="Get comment tree",
    description=(
        "Get the comments of a post as nested reply threads ready for display. Hidden comments "
        "are placeholders, and long reply lists are collapsed unless expand is set."
    ),
    operation_id="getCommentTree",
    responses={
        200: {"description": "Top-level comments with nested replies"},
        500: {"model": ErrorResponse, "description": "Comment store failure"},
    },
)
async def get_comment_tree(
    app: AppDep,
    post_id: Annotated[str | None, Query(alias="postId", description="Post identifier")] = None,
    device_token: Annotated[str | None, Query(alias="deviceToken", description="Marks the caller's own comments")] = None,
    expand: Annotated[bool, Query(description="Return all replies")] = False,
) -> list[CommentView]:
    return await app.get_comment_tree(post_id, device_token, expand)


@router.post(
    "/comments",
    summary="Create comment",
    description="Add a comment to a post, or a reply when parentId is set.",
    operation_id="createComment",
    responses={
        200: {"description": "Comment created"},
        400: {"model": ErrorResponse, "description": "Missing fields, bad parentId or invalid JSON"},
        500: {"model": ErrorResponse, "description": "Comment store failure"},
    },
)
async def create_comment(request: CreateCommentRequest, app: AppDep) -> SuccessResponse:
    await app.create_comment(request.post_id, request.parent_id, request.name, request.message, request.device_token)
    return SuccessResponse()


@router.delete(
    "/comments",
    summary="Hide comment",
    description=(
        "Soft-delete a comment created with the given device token. Replies stay in place. "
        "Unknown ids and foreign comments are both reported as forbidden."
    ),
    operation_id="hideComment",
    responses={
        200: {"description": "Comment hidden"},
        400: {"model": ErrorResponse, "description": "Missing fields or invalid JSON"},
        403: {"model": ErrorResponse, "description": "No comment with this id and device token"},
        500: {"model": ErrorResponse, "description": "Comment store failure"},
    },
)
async def hide_comment(request: DeleteCommentRequest, app: AppDep) -> SuccessResponse:
    await app.hide_comment(request.comment_id, request.device_token)
    return SuccessResponse()
