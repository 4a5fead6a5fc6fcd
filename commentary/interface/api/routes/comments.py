"""Comment thread routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, Response, status
from pydantic import BaseModel

from commentary.adapter.error import ContentServiceError
from commentary.application.usecase.comment import (
    CommentItem,
    EditCommentRequest,
    EditCommentUseCase,
    GetModerationQueueRequest,
    GetModerationQueueUseCase,
    ListCommentsResponse,
    ListRepliesRequest,
    ListRepliesUseCase,
    ListTopLevelCommentsRequest,
    ListTopLevelCommentsUseCase,
    ModerateCommentRequest,
    ModerateCommentUseCase,
    RemoveCommentRequest,
    RemoveCommentUseCase,
    SubmitCommentRequest,
    SubmitCommentUseCase,
)
from commentary.domain.error import (
    ConflictError,
    CounterIntegrityError,
    DeadlineExceededError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from commentary.domain.value import ApprovalState, ModerationDecision

router = APIRouter(tags=["comments"], route_class=DishkaRoute)


def to_http_error(e: Exception, action: str) -> HTTPException:
    """Map a domain or adapter error to an HTTP error.

    Args:
        e: Error raised by a use case
        action: What the request was doing (for logs)

    Returns:
        HTTPException to raise
    """
    if isinstance(e, ValidationError):
        logfire.warn(f"{action} rejected", error=str(e))
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, NotFoundError):
        logfire.warn(f"{action} failed - not found", error=str(e))
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, ForbiddenError):
        logfire.warn(f"{action} forbidden", error=str(e))
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not allowed to {e.action} {e.resource_id}",
        )
    if isinstance(e, ConflictError):
        logfire.warn(f"{action} conflict", error=str(e), retryable=e.retryable)
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, DeadlineExceededError):
        logfire.warn(f"{action} timed out", error=str(e))
        return HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(e)
        )
    if isinstance(e, ContentServiceError):
        logfire.error(f"{action} failed - content service", error=str(e))
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Content service unavailable",
        )
    if isinstance(e, CounterIntegrityError):
        logfire.error(f"{action} failed - counter integrity", error=str(e))
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action.lower()}",
        )
    logfire.warn(f"{action} failed", error=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


class SubmitCommentAPIRequest(BaseModel):
    """API request for submitting a comment."""

    body: str
    parent_id: str | None = None  # Parent comment ID for replies


class EditCommentAPIRequest(BaseModel):
    """API request for editing a comment."""

    body: str


@router.post(
    "/content/{content_item_id}/comments",
    response_model=CommentItem,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def submit_comment(
    content_item_id: str,
    request: SubmitCommentAPIRequest,
    submit_comment_use_case: FromDishka[SubmitCommentUseCase],
    auth_token: str | None = Cookie(default=None),
) -> CommentItem:
    """Comment on a content item or reply to another comment.

    Requires authentication. Comments by moderators are published
    immediately; everyone else's wait for moderation.

    Args:
        content_item_id: Content item UUID
        request: Comment body and optional parent
        submit_comment_use_case: Submit comment use case from DI
        auth_token: JWT token from cookie

    Returns:
        Created comment

    Raises:
        HTTPException: 400, 403, 404, 409 or 502
    """
    try:
        use_case_request = SubmitCommentRequest(
            content_item_id=content_item_id,
            parent_id=request.parent_id,
            body=request.body,
            auth_token=auth_token,
        )
        return await submit_comment_use_case.execute(use_case_request)
    except (DomainError, ContentServiceError) as e:
        raise to_http_error(e, "Comment submission")


@router.get(
    "/content/{content_item_id}/comments",
    response_model=ListCommentsResponse,
    response_model_exclude_unset=True,
)
async def list_top_level_comments(
    content_item_id: str,
    list_top_level_use_case: FromDishka[ListTopLevelCommentsUseCase],
    cursor: str | None = Query(default=None),
    limit: int | None = Query(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ListCommentsResponse:
    """List top-level comments of a content item, oldest first.

    Args:
        content_item_id: Content item UUID
        list_top_level_use_case: List top-level comments use case from DI
        cursor: Opaque cursor from a previous page
        limit: Page size
        auth_token: JWT token from cookie (optional)

    Returns:
        Page of comments visible to the caller and the next cursor
    """
    try:
        use_case_request = ListTopLevelCommentsRequest(
            content_item_id=content_item_id,
            cursor=cursor,
            limit=limit,
            auth_token=auth_token,
        )
        return await list_top_level_use_case.execute(use_case_request)
    except DomainError as e:
        raise to_http_error(e, "Comment listing")


@router.get(
    "/comments/{comment_id}/replies",
    response_model=ListCommentsResponse,
    response_model_exclude_unset=True,
)
async def list_replies(
    comment_id: str,
    list_replies_use_case: FromDishka[ListRepliesUseCase],
    cursor: str | None = Query(default=None),
    limit: int | None = Query(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ListCommentsResponse:
    """List direct replies of a comment, oldest first.

    Replies stay listable after their parent was deleted.
    """
    try:
        use_case_request = ListRepliesRequest(
            parent_id=comment_id,
            cursor=cursor,
            limit=limit,
            auth_token=auth_token,
        )
        return await list_replies_use_case.execute(use_case_request)
    except DomainError as e:
        raise to_http_error(e, "Reply listing")


@router.patch(
    "/comments/{comment_id}",
    response_model=CommentItem,
    response_model_exclude_unset=True,
)
async def edit_comment(
    comment_id: str,
    request: EditCommentAPIRequest,
    edit_comment_use_case: FromDishka[EditCommentUseCase],
    auth_token: str | None = Cookie(default=None),
) -> CommentItem:
    """Replace a comment's body (author or moderator)."""
    try:
        use_case_request = EditCommentRequest(
            comment_id=comment_id,
            body=request.body,
            auth_token=auth_token,
        )
        return await edit_comment_use_case.execute(use_case_request)
    except DomainError as e:
        raise to_http_error(e, "Comment edit")


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: str,
    remove_comment_use_case: FromDishka[RemoveCommentUseCase],
    auth_token: str | None = Cookie(default=None),
) -> Response:
    """Delete a comment (author or moderator).

    The comment is tombstoned; its replies stay in place.
    """
    try:
        await remove_comment_use_case.execute(
            RemoveCommentRequest(comment_id=comment_id, auth_token=auth_token)
        )
    except DomainError as e:
        raise to_http_error(e, "Comment removal")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _moderate(
    comment_id: str,
    decision: ModerationDecision,
    use_case: ModerateCommentUseCase,
    auth_token: str | None,
) -> CommentItem:
    try:
        use_case_request = ModerateCommentRequest(
            comment_id=comment_id, decision=decision, auth_token=auth_token
        )
        return await use_case.execute(use_case_request)
    except DomainError as e:
        raise to_http_error(e, "Comment moderation")


@router.post(
    "/comments/{comment_id}/approve",
    response_model=CommentItem,
    response_model_exclude_unset=True,
)
async def approve_comment(
    comment_id: str,
    moderate_comment_use_case: FromDishka[ModerateCommentUseCase],
    auth_token: str | None = Cookie(default=None),
) -> CommentItem:
    """Approve a pending comment (moderators only)."""
    return await _moderate(
        comment_id, ModerationDecision.APPROVE, moderate_comment_use_case, auth_token
    )


@router.post(
    "/comments/{comment_id}/reject",
    response_model=CommentItem,
    response_model_exclude_unset=True,
)
async def reject_comment(
    comment_id: str,
    moderate_comment_use_case: FromDishka[ModerateCommentUseCase],
    auth_token: str | None = Cookie(default=None),
) -> CommentItem:
    """Reject a pending comment (moderators only)."""
    return await _moderate(
        comment_id, ModerationDecision.REJECT, moderate_comment_use_case, auth_token
    )


@router.get(
    "/moderation/comments",
    response_model=ListCommentsResponse,
    response_model_exclude_unset=True,
)
async def get_moderation_queue(
    get_moderation_queue_use_case: FromDishka[GetModerationQueueUseCase],
    state: ApprovalState = Query(default=ApprovalState.PENDING),
    content_item_id: str | None = Query(default=None),
    cursor: str | None = Query(default=None),
    limit: int | None = Query(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ListCommentsResponse:
    """List comments in one approval state (moderators only).

    Args:
        get_moderation_queue_use_case: Moderation queue use case from DI
        state: Approval state to list (defaults to pending)
        content_item_id: Restrict to one content item
        cursor: Opaque cursor from a previous page
        limit: Page size
        auth_token: JWT token from cookie
    """
    try:
        use_case_request = GetModerationQueueRequest(
            approval_state=state,
            content_item_id=content_item_id,
            cursor=cursor,
            limit=limit,
            auth_token=auth_token,
        )
        return await get_moderation_queue_use_case.execute(use_case_request)
    except DomainError as e:
        raise to_http_error(e, "Moderation queue")
