"""Comment entity.

Comments form a tree attached to a content item. Each node keeps an explicit
parent reference plus a denormalized root reference, so traversal is always
done through the store by id and never by following in-memory pointers.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from commentary.domain.model.common import DomainModel, utc_now
from commentary.domain.value import ApprovalState, CommentId, ContentItemId, UserId
from commentary.domain.value.types import Cursor


class Comment(DomainModel):
    """Comment entity.

    Represents a top-level comment on a content item or a reply to another
    comment. Nesting depth is unbounded; presentation layers may cap the
    visual indent, but parent_id always carries the true ancestry.

    Threading is managed through:
    - parent_id: Direct parent comment (None for top-level)
    - root_id: Top-level ancestor, equal to id for top-level comments
    - depth: Nesting level (0 for top-level, parent depth + 1 for replies)

    Counters are caches of the direct children and are only ever changed
    through relative increments by the ReplyCounter:
    - reply_count: non-deleted children in the approved state
    - total_reply_count: non-deleted children in any state
    """

    id: CommentId
    content_item_id: ContentItemId
    author_id: UserId
    body: str = Field(min_length=1)  # Upper bound comes from ThreadSettings
    parent_id: Optional[CommentId] = None
    root_id: CommentId
    depth: int = Field(default=0, ge=0)
    approval_state: ApprovalState = ApprovalState.PENDING
    reply_count: int = Field(default=0, ge=0)
    total_reply_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_threading(self) -> "Comment":
        """Validate root and depth are consistent with the parent reference."""
        if self.parent_id is None:
            if self.root_id != self.id:
                raise ValueError("Top-level comments must be their own root")
            if self.depth != 0:
                raise ValueError("Top-level comments must have depth 0")
        elif self.depth == 0:
            raise ValueError("Replies must have depth greater than 0")
        if self.total_reply_count < self.reply_count:
            raise ValueError("total_reply_count cannot be lower than reply_count")
        return self

    @property
    def is_deleted(self) -> bool:
        """Whether the comment has been tombstoned."""
        return self.deleted_at is not None

    @property
    def cursor(self) -> Cursor:
        """Pagination cursor positioned right after this comment."""
        return Cursor(created_at=self.created_at, comment_id=self.id)
