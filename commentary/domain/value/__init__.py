"""Domain value objects for comment threads."""

from commentary.domain.value.identifiers import CommentId, ContentItemId, UserId
from commentary.domain.value.types import (
    ApprovalState,
    Cursor,
    ModerationDecision,
    Role,
)

__all__ = [
    # Identifiers
    "CommentId",
    "ContentItemId",
    "UserId",
    # Types
    "ApprovalState",
    "Cursor",
    "ModerationDecision",
    "Role",
]
