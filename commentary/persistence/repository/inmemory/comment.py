"""In-memory comment repository for testing."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from commentary.domain.error import ConflictError, CounterIntegrityError, NotFoundError
from commentary.domain.model.comment import Comment
from commentary.domain.model.common import utc_now
from commentary.domain.repository.comment import CommentRepository, CommentSlice
from commentary.domain.value import ApprovalState, CommentId, ContentItemId, Cursor


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing.

    Transactions are serialized with a lock and rolled back by restoring a
    snapshot of the table taken when the block was entered.
    """

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Serialize the block and undo its writes if it raises."""
        async with self._lock:
            snapshot = dict(self._comments)
            try:
                yield
            except BaseException:
                self._comments = snapshot
                raise

    async def insert(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        if comment.id in self._comments:
            raise ConflictError(f"Comment {comment.id} already exists")
        self._comments[comment.id] = comment
        return comment

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID, tombstoned comments included."""
        return self._comments.get(comment_id)

    async def list_children(
        self,
        parent_id: Optional[CommentId],
        content_item_id: ContentItemId,
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        """List non-deleted direct children of a parent."""
        return self._slice(
            lambda c: c.parent_id == parent_id and c.content_item_id == content_item_id,
            cursor,
            limit,
        )

    async def list_by_state(
        self,
        approval_state: ApprovalState,
        content_item_id: Optional[ContentItemId],
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        """List non-deleted comments in one approval state."""
        return self._slice(
            lambda c: c.approval_state is approval_state
            and (content_item_id is None or c.content_item_id == content_item_id),
            cursor,
            limit,
        )

    def _slice(
        self,
        matches: Callable[[Comment], bool],
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        comments = [
            c for c in self._comments.values() if c.deleted_at is None and matches(c)
        ]
        comments.sort(key=lambda c: (c.created_at, c.id))

        if cursor is not None:
            comments = [c for c in comments if (c.created_at, c.id) > cursor.key]

        page = comments[:limit]
        next_cursor = page[-1].cursor if len(comments) > limit and page else None
        return CommentSlice(rows=page, next_cursor=next_cursor)

    async def soft_delete(
        self, comment_id: CommentId, expected_state: ApprovalState
    ) -> Comment:
        """Tombstone a comment if it is live and still in expected_state."""
        comment = self._comments.get(comment_id)
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))
        if comment.is_deleted:
            raise ConflictError("Comment was already deleted")
        if comment.approval_state is not expected_state:
            raise ConflictError(
                "Comment approval state changed during deletion", retryable=True
            )

        now = utc_now()
        deleted = comment.model_copy(update={"deleted_at": now, "updated_at": now})
        self._comments[comment_id] = deleted
        return deleted

    async def set_approval(
        self,
        comment_id: CommentId,
        state: ApprovalState,
        expected_state: ApprovalState,
    ) -> Comment:
        """Move a live comment from expected_state to state."""
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_deleted:
            raise NotFoundError("Comment", str(comment_id))
        if comment.approval_state is not expected_state:
            raise ConflictError(
                f"Comment is {comment.approval_state.value}, "
                f"expected {expected_state.value}",
                retryable=True,
            )

        updated = comment.model_copy(
            update={"approval_state": state, "updated_at": utc_now()}
        )
        self._comments[comment_id] = updated
        return updated

    async def update_body(self, comment_id: CommentId, body: str) -> Comment:
        """Replace the body of a non-deleted comment."""
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_deleted:
            raise NotFoundError("Comment", str(comment_id))

        updated = comment.model_copy(update={"body": body, "updated_at": utc_now()})
        self._comments[comment_id] = updated
        return updated

    async def adjust_reply_counts(
        self,
        parent_id: CommentId,
        approved_delta: int,
        total_delta: int,
    ) -> None:
        """Apply relative increments to a parent's counters."""
        parent = self._comments.get(parent_id)
        if parent is None:
            raise CounterIntegrityError(str(parent_id))

        reply_count = parent.reply_count + approved_delta
        total_reply_count = parent.total_reply_count + total_delta
        if reply_count < 0 or total_reply_count < reply_count:
            raise CounterIntegrityError(str(parent_id))

        self._comments[parent_id] = parent.model_copy(
            update={
                "reply_count": reply_count,
                "total_reply_count": total_reply_count,
            }
        )
