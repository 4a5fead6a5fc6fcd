"""Comment representation shared by the comment use cases."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from commentary.config import ThreadSettings
from commentary.domain.error import ValidationError
from commentary.domain.model import Comment, Viewer
from commentary.domain.service import ModerationGate


class CommentItem(BaseModel):
    """Comment item in response.

    approval_state is only set for the author and moderators, and
    total_reply_count only for moderators. Routes serialize with
    exclude_unset, so the fields are left out entirely for everyone else.
    """

    id: str
    content_item_id: str
    author_id: str
    body: str
    parent_id: str | None
    root_id: str
    depth: int
    display_depth: int  # depth capped for rendering
    reply_count: int
    total_reply_count: int | None = None
    approval_state: str | None = None
    created_at: datetime
    updated_at: datetime


def to_comment_item(
    comment: Comment,
    viewer: Viewer,
    moderation_gate: ModerationGate,
    thread_settings: ThreadSettings,
) -> CommentItem:
    """Project a comment for one viewer."""
    gated: dict[str, Any] = {}
    if moderation_gate.can_see_reply_split(viewer):
        gated["total_reply_count"] = comment.total_reply_count
    if moderation_gate.can_see_true_state(comment, viewer):
        gated["approval_state"] = comment.approval_state.value

    return CommentItem(
        id=str(comment.id),
        content_item_id=str(comment.content_item_id),
        author_id=str(comment.author_id),
        body=comment.body,
        parent_id=str(comment.parent_id) if comment.parent_id else None,
        root_id=str(comment.root_id),
        depth=comment.depth,
        display_depth=min(comment.depth, thread_settings.max_display_depth),
        reply_count=comment.reply_count,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        **gated,
    )


def parse_id(value: str, kind: str) -> UUID:
    """Parse a UUID string coming from a request.

    Raises:
        ValidationError: If value is not a UUID
    """
    try:
        return UUID(value)
    except ValueError:
        raise ValidationError(f"Invalid {kind} ID: {value}")
