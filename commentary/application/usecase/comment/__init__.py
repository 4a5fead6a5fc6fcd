"""Comment use cases."""

from .edit_comment import EditCommentRequest, EditCommentUseCase
from .get_moderation_queue import GetModerationQueueRequest, GetModerationQueueUseCase
from .item import CommentItem
from .list_comments import (
    ListCommentsResponse,
    ListRepliesRequest,
    ListRepliesUseCase,
    ListTopLevelCommentsRequest,
    ListTopLevelCommentsUseCase,
)
from .moderate_comment import ModerateCommentRequest, ModerateCommentUseCase
from .remove_comment import (
    RemoveCommentRequest,
    RemoveCommentResponse,
    RemoveCommentUseCase,
)
from .submit_comment import SubmitCommentRequest, SubmitCommentUseCase

__all__ = [
    "CommentItem",
    "EditCommentRequest",
    "EditCommentUseCase",
    "GetModerationQueueRequest",
    "GetModerationQueueUseCase",
    "ListCommentsResponse",
    "ListRepliesRequest",
    "ListRepliesUseCase",
    "ListTopLevelCommentsRequest",
    "ListTopLevelCommentsUseCase",
    "ModerateCommentRequest",
    "ModerateCommentUseCase",
    "RemoveCommentRequest",
    "RemoveCommentResponse",
    "RemoveCommentUseCase",
    "SubmitCommentRequest",
    "SubmitCommentUseCase",
]
