"""PostgreSQL implementation of Comment repository."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import logfire
from sqlalchemy import Select, select, tuple_, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from commentary.domain.error import (
    ConflictError,
    ContentionError,
    CounterIntegrityError,
    NotFoundError,
)
from commentary.domain.model import Comment
from commentary.domain.model.common import utc_now
from commentary.domain.repository import CommentRepository, CommentSlice
from commentary.domain.value import ApprovalState, CommentId, ContentItemId, Cursor
from commentary.persistence.mappers import comment_to_dict, row_to_comment
from commentary.persistence.tables import comments_table

# serialization_failure, deadlock_detected, lock_not_available
CONTENTION_SQLSTATES = frozenset({"40001", "40P01", "55P03"})


def _sqlstate(error: DBAPIError) -> Optional[str]:
    orig = error.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository.

    Works on the request-scoped session; the session's outer transaction is
    committed by the provider that owns it. Each unit of work opened through
    transaction() runs in a SAVEPOINT so a failed attempt can be retried on
    the same session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run the block inside a SAVEPOINT, mapping contention to ContentionError."""
        try:
            async with self.session.begin_nested():
                yield
        except DBAPIError as e:
            if _sqlstate(e) in CONTENTION_SQLSTATES:
                logfire.warn("Store contention", sqlstate=_sqlstate(e))
                raise ContentionError(f"Store contention ({_sqlstate(e)})") from e
            raise

    async def insert(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        stmt = (
            comments_table.insert()
            .values(**comment_to_dict(comment))
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict()) if row else comment

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID, tombstoned comments included."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def list_children(
        self,
        parent_id: Optional[CommentId],
        content_item_id: ContentItemId,
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        """List non-deleted direct children of a parent in keyset order."""
        stmt = select(comments_table).where(
            comments_table.c.content_item_id == content_item_id
        )
        if parent_id is None:
            stmt = stmt.where(comments_table.c.parent_id.is_(None))
        else:
            stmt = stmt.where(comments_table.c.parent_id == parent_id)

        return await self._slice(stmt, cursor, limit)

    async def list_by_state(
        self,
        approval_state: ApprovalState,
        content_item_id: Optional[ContentItemId],
        cursor: Optional[Cursor],
        limit: int,
    ) -> CommentSlice:
        """List non-deleted comments in one approval state in keyset order."""
        stmt = select(comments_table).where(
            comments_table.c.approval_state == approval_state.value
        )
        if content_item_id is not None:
            stmt = stmt.where(comments_table.c.content_item_id == content_item_id)

        return await self._slice(stmt, cursor, limit)

    async def _slice(
        self, stmt: Select, cursor: Optional[Cursor], limit: int
    ) -> CommentSlice:
        stmt = stmt.where(comments_table.c.deleted_at.is_(None))
        if cursor is not None:
            stmt = stmt.where(
                tuple_(comments_table.c.created_at, comments_table.c.id)
                > tuple_(cursor.created_at, cursor.comment_id)
            )
        # One extra row tells whether another slice follows
        stmt = stmt.order_by(
            comments_table.c.created_at, comments_table.c.id
        ).limit(limit + 1)

        result = await self.session.execute(stmt)
        rows = [row_to_comment(row._asdict()) for row in result.fetchall()]
        has_more = len(rows) > limit
        rows = rows[:limit]
        next_cursor = rows[-1].cursor if has_more and rows else None
        return CommentSlice(rows=rows, next_cursor=next_cursor)

    async def soft_delete(
        self, comment_id: CommentId, expected_state: ApprovalState
    ) -> Comment:
        """Tombstone a comment if it is live and still in expected_state."""
        now = utc_now()
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .where(comments_table.c.deleted_at.is_(None))
            .where(comments_table.c.approval_state == expected_state.value)
            .values(deleted_at=now, updated_at=now)
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if row is not None:
            await self.session.flush()
            return row_to_comment(row._asdict())

        current = await self.find_by_id(comment_id)
        if current is None:
            raise NotFoundError("Comment", str(comment_id))
        if current.is_deleted:
            raise ConflictError("Comment was already deleted")
        raise ConflictError(
            "Comment approval state changed during deletion", retryable=True
        )

    async def set_approval(
        self,
        comment_id: CommentId,
        state: ApprovalState,
        expected_state: ApprovalState,
    ) -> Comment:
        """Move a live comment from expected_state to state."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .where(comments_table.c.deleted_at.is_(None))
            .where(comments_table.c.approval_state == expected_state.value)
            .values(approval_state=state.value, updated_at=utc_now())
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if row is not None:
            await self.session.flush()
            return row_to_comment(row._asdict())

        current = await self.find_by_id(comment_id)
        if current is None or current.is_deleted:
            raise NotFoundError("Comment", str(comment_id))
        raise ConflictError(
            f"Comment is {current.approval_state.value}, "
            f"expected {expected_state.value}",
            retryable=True,
        )

    async def update_body(self, comment_id: CommentId, body: str) -> Comment:
        """Replace the body of a non-deleted comment."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .where(comments_table.c.deleted_at.is_(None))
            .values(body=body, updated_at=utc_now())
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if row is None:
            raise NotFoundError("Comment", str(comment_id))

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def adjust_reply_counts(
        self,
        parent_id: CommentId,
        approved_delta: int,
        total_delta: int,
    ) -> None:
        """Atomically apply relative increments to a parent's counters."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == parent_id)
            .values(
                reply_count=comments_table.c.reply_count + approved_delta,
                total_reply_count=comments_table.c.total_reply_count + total_delta,
            )
            .returning(comments_table.c.id)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            # Check constraints reject counters going negative
            raise CounterIntegrityError(str(parent_id)) from e

        if result.fetchone() is None:
            raise CounterIntegrityError(str(parent_id))
        await self.session.flush()
