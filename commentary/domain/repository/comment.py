"""Comment repository interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import List, Optional

from commentary.domain.model.comment import Comment
from commentary.domain.model.common import DomainModel
from commentary.domain.value import ApprovalState, CommentId, ContentItemId, Cursor


class CommentSlice(DomainModel):
    """One raw keyset page read from the store.

    next_cursor is None once the store has no rows after the last one
    returned.
    """

    rows: List[Comment]
    next_cursor: Optional[Cursor] = None


class CommentRepository(ABC):
    """Repository for Comment entity.

    The single source of truth for comment nodes and their relationships.
    Every listing is ordered by (created_at, id) ascending and paginated by
    keyset cursor. Mutations never hard-delete rows.

    Implementations live in the persistence layer.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic unit of work.

        Every mutation issued inside the block is applied together or not at
        all. Transient store contention surfaces as ContentionError.
        """
        pass

    @abstractmethod
    async def insert(self, comment: Comment) -> Comment:
        """Insert a new comment.

        Args:
            comment: The comment to insert

        Returns:
            The stored comment
        """
        pass

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID, tombstoned comments included.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_children(
        self,
        parent_id: Optional[CommentId],
        content_item_id: ContentItemId,
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        """List non-deleted direct children of a parent.

        Args:
            parent_id: Parent comment ID, or None for top-level comments
            content_item_id: Content item the thread belongs to
            cursor: Return only rows strictly after this position
            limit: Maximum number of rows to return

        Returns:
            Rows in (created_at, id) order and the cursor for the next slice
        """
        pass

    @abstractmethod
    async def list_by_state(
        self,
        approval_state: ApprovalState,
        content_item_id: Optional[ContentItemId],
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        """List non-deleted comments in a given approval state.

        Args:
            approval_state: State to filter by
            content_item_id: Restrict to one content item (None for all)
            cursor: Return only rows strictly after this position
            limit: Maximum number of rows to return

        Returns:
            Rows in (created_at, id) order and the cursor for the next slice
        """
        pass

    @abstractmethod
    async def soft_delete(
        self, comment_id: CommentId, expected_state: ApprovalState
    ) -> Comment:
        """Tombstone a comment, compare-and-swap on its approval state.

        Args:
            comment_id: The comment ID to tombstone
            expected_state: State the caller based its counter update on

        Returns:
            The tombstoned comment

        Raises:
            NotFoundError: If the comment does not exist
            ConflictError: If already tombstoned (not retryable) or the
                approval state changed underneath the caller (retryable)
        """
        pass

    @abstractmethod
    async def set_approval(
        self,
        comment_id: CommentId,
        state: ApprovalState,
        expected_state: ApprovalState,
    ) -> Comment:
        """Move a comment to a new approval state, compare-and-swap.

        Args:
            comment_id: The comment ID
            state: New approval state
            expected_state: State the comment must currently be in

        Returns:
            The updated comment

        Raises:
            NotFoundError: If the comment does not exist or is tombstoned
            ConflictError: If the current state differs from expected_state
                (retryable)
        """
        pass

    @abstractmethod
    async def update_body(self, comment_id: CommentId, body: str) -> Comment:
        """Replace the body of a non-deleted comment.

        Raises:
            NotFoundError: If the comment does not exist or is tombstoned
        """
        pass

    @abstractmethod
    async def adjust_reply_counts(
        self,
        parent_id: CommentId,
        approved_delta: int,
        total_delta: int,
    ) -> None:
        """Apply relative increments to a parent's cached reply counters.

        Expressed as deltas (never read-modify-write) so concurrent writers
        compose. Tombstoned parents are still updated.

        Raises:
            CounterIntegrityError: If no row matched parent_id
        """
        pass
