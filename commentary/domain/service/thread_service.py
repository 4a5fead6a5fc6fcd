"""Comment thread domain service."""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import uuid4

import logfire

from commentary.config import ThreadSettings
from commentary.domain.error import (
    ConflictError,
    DeadlineExceededError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from commentary.domain.model import Comment, Viewer
from commentary.domain.model.common import utc_now
from commentary.domain.repository import CommentRepository
from commentary.domain.value import (
    ApprovalState,
    CommentId,
    ContentItemId,
    Cursor,
    ModerationDecision,
)

from .base import Service
from .content_directory import ContentDirectory
from .moderation_gate import ModerationGate
from .reply_counter import ReplyCounter
from .thread_paginator import RepliesOf, ThreadPage, ThreadPaginator, TopLevel

T = TypeVar("T")


class ThreadService(Service):
    """Facade over the comment store, moderation policy, counters and pagination.

    Every mutation runs inside one repository transaction together with the
    reply counter update it implies, and is re-run once when it loses a
    retryable conflict. List operations are read-only and accept a deadline.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        moderation_gate: ModerationGate,
        reply_counter: ReplyCounter,
        thread_paginator: ThreadPaginator,
        content_directory: ContentDirectory,
        thread_settings: ThreadSettings,
    ) -> None:
        """Initialize thread service.

        Args:
            comment_repository: Comment repository
            moderation_gate: Moderation policy
            reply_counter: Reply counter maintenance
            thread_paginator: Per-viewer cursor pagination
            content_directory: Content item existence check
            thread_settings: Thread rules (body bounds, retries)
        """
        self.comment_repository = comment_repository
        self.moderation_gate = moderation_gate
        self.reply_counter = reply_counter
        self.thread_paginator = thread_paginator
        self.content_directory = content_directory
        self.settings = thread_settings

    async def submit(
        self,
        content_item_id: ContentItemId,
        parent_id: Optional[CommentId],
        author: Viewer,
        body: str,
    ) -> Comment:
        """Create a top-level comment or a reply.

        Args:
            content_item_id: Content item the thread is attached to
            parent_id: Parent comment ID for replies (None for top-level)
            author: Viewer writing the comment
            body: Comment text

        Returns:
            Created comment, approved when written by a moderator and
            pending otherwise

        Raises:
            ForbiddenError: If the author is anonymous
            ValidationError: If the body is invalid or the parent belongs
                to a different content item
            NotFoundError: If the content item or parent does not exist
        """
        with logfire.span(
            "thread_service.submit",
            content_item_id=str(content_item_id),
            parent_id=str(parent_id) if parent_id else None,
            author_id=str(author.id) if author.id else None,
        ):
            if not self.moderation_gate.can_submit(author):
                logfire.warn("Anonymous submission rejected")
                raise ForbiddenError("comment on", str(content_item_id), None)

            body = self._clean_body(body)

            if not await self.content_directory.exists(content_item_id):
                logfire.warn(
                    "Submission to missing content item",
                    content_item_id=str(content_item_id),
                )
                raise NotFoundError("Content item", str(content_item_id))

            async def create() -> Comment:
                comment_id = CommentId(uuid4())
                root_id = comment_id
                depth = 0
                if parent_id:
                    parent = await self._get_live(parent_id)
                    if parent.content_item_id != content_item_id:
                        logfire.error(
                            "Parent comment does not belong to content item",
                            parent_id=str(parent_id),
                            parent_content_item_id=str(parent.content_item_id),
                            target_content_item_id=str(content_item_id),
                        )
                        raise ValidationError(
                            "Parent comment does not belong to this content item"
                        )
                    root_id = parent.root_id
                    depth = parent.depth + 1

                state = self.moderation_gate.initial_state(author)
                now = utc_now()
                comment = Comment(
                    id=comment_id,
                    content_item_id=content_item_id,
                    author_id=author.id,
                    body=body,
                    parent_id=parent_id,
                    root_id=root_id,
                    depth=depth,
                    approval_state=state,
                    created_at=now,
                    updated_at=now,
                )
                saved = await self.comment_repository.insert(comment)
                await self.reply_counter.on_create(parent_id, state)
                return saved

            saved = await self._run_atomic("submit", create)
            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                content_item_id=str(content_item_id),
                approval_state=saved.approval_state.value,
                depth=saved.depth,
            )
            return saved

    async def remove(self, comment_id: CommentId, actor: Viewer) -> Comment:
        """Tombstone a comment.

        Children are left in place and stay reachable through their parent.

        Args:
            comment_id: Comment ID
            actor: Viewer requesting the removal

        Returns:
            The tombstoned comment

        Raises:
            NotFoundError: If the comment does not exist or is already deleted
            ForbiddenError: If the actor is neither the author nor a moderator
            ConflictError: If the comment was deleted concurrently
        """
        with logfire.span(
            "thread_service.remove",
            comment_id=str(comment_id),
            actor_id=str(actor.id) if actor.id else None,
        ):

            async def delete() -> Comment:
                comment = await self._get_live(comment_id)
                if not self.moderation_gate.can_remove(comment, actor):
                    logfire.warn(
                        "Removal forbidden",
                        comment_id=str(comment_id),
                        actor_id=str(actor.id) if actor.id else None,
                    )
                    raise ForbiddenError(
                        "delete", str(comment_id), str(actor.id) if actor.id else None
                    )
                deleted = await self.comment_repository.soft_delete(
                    comment.id, expected_state=comment.approval_state
                )
                await self.reply_counter.on_delete(
                    comment.parent_id, comment.approval_state
                )
                return deleted

            deleted = await self._run_atomic("remove", delete)
            logfire.info(
                "Comment removed",
                comment_id=str(comment_id),
                prior_state=deleted.approval_state.value,
            )
            return deleted

    async def moderate(
        self,
        comment_id: CommentId,
        decision: ModerationDecision,
        actor: Viewer,
    ) -> Comment:
        """Approve or reject a pending comment.

        Args:
            comment_id: Comment ID
            decision: Approve or reject
            actor: Moderator taking the decision

        Returns:
            The updated comment

        Raises:
            ForbiddenError: If the actor is not a moderator
            NotFoundError: If the comment does not exist or is deleted
            ConflictError: If the comment is no longer pending
        """
        with logfire.span(
            "thread_service.moderate",
            comment_id=str(comment_id),
            decision=decision.value,
            actor_id=str(actor.id) if actor.id else None,
        ):
            if not self.moderation_gate.can_moderate(actor):
                logfire.warn("Moderation forbidden", comment_id=str(comment_id))
                raise ForbiddenError(
                    decision.value, str(comment_id), str(actor.id) if actor.id else None
                )

            target = decision.target_state

            async def transition() -> Comment:
                comment = await self._get_live(comment_id)
                if comment.approval_state is not ApprovalState.PENDING:
                    raise ConflictError(
                        f"Cannot {decision.value} a comment that is "
                        f"{comment.approval_state.value}"
                    )
                updated = await self.comment_repository.set_approval(
                    comment.id, target, expected_state=ApprovalState.PENDING
                )
                await self.reply_counter.on_approval_change(
                    comment.parent_id, ApprovalState.PENDING, target
                )
                return updated

            updated = await self._run_atomic("moderate", transition)
            logfire.info(
                "Comment moderated",
                comment_id=str(comment_id),
                approval_state=updated.approval_state.value,
            )
            return updated

    async def edit(self, comment_id: CommentId, actor: Viewer, body: str) -> Comment:
        """Replace the body of a comment.

        Approval state and counters are left untouched.

        Raises:
            ValidationError: If the body is invalid
            NotFoundError: If the comment does not exist or is deleted
            ForbiddenError: If the actor is neither the author nor a moderator
        """
        with logfire.span(
            "thread_service.edit",
            comment_id=str(comment_id),
            actor_id=str(actor.id) if actor.id else None,
        ):
            body = self._clean_body(body)

            async def update() -> Comment:
                comment = await self._get_live(comment_id)
                if not self.moderation_gate.can_edit(comment, actor):
                    logfire.warn("Edit forbidden", comment_id=str(comment_id))
                    raise ForbiddenError(
                        "edit", str(comment_id), str(actor.id) if actor.id else None
                    )
                return await self.comment_repository.update_body(comment.id, body)

            updated = await self._run_atomic("edit", update)
            logfire.info(
                "Comment body updated",
                comment_id=str(comment_id),
                body_length=len(updated.body),
            )
            return updated

    async def list_top_level(
        self,
        content_item_id: ContentItemId,
        viewer: Viewer,
        cursor: Optional[Cursor],
        limit: int,
        timeout: Optional[float] = None,
    ) -> ThreadPage:
        """List top-level comments of a content item visible to viewer.

        Args:
            content_item_id: Content item ID
            viewer: Viewer the page is filtered for
            cursor: Position to continue from (None for the first page)
            limit: Maximum number of nodes
            timeout: Deadline in seconds (None waits indefinitely)

        Raises:
            ValidationError: If limit is out of range
            DeadlineExceededError: If the deadline passes first
        """
        return await self._with_deadline(
            "list_top_level",
            self.thread_paginator.page(
                TopLevel(content_item_id=content_item_id), viewer, cursor, limit
            ),
            timeout,
        )

    async def list_replies(
        self,
        parent_id: CommentId,
        viewer: Viewer,
        cursor: Optional[Cursor],
        limit: int,
        timeout: Optional[float] = None,
    ) -> ThreadPage:
        """List direct replies of a comment visible to viewer.

        Replies of a deleted parent are still listed.

        Raises:
            ValidationError: If limit is out of range
            NotFoundError: If the parent does not exist
            DeadlineExceededError: If the deadline passes first
        """
        return await self._with_deadline(
            "list_replies",
            self.thread_paginator.page(
                RepliesOf(parent_id=parent_id), viewer, cursor, limit
            ),
            timeout,
        )

    async def moderation_queue(
        self,
        viewer: Viewer,
        approval_state: ApprovalState,
        content_item_id: Optional[ContentItemId],
        cursor: Optional[Cursor],
        limit: int,
    ) -> ThreadPage:
        """List comments in one approval state for moderators.

        Raises:
            ForbiddenError: If the viewer is not a moderator
            ValidationError: If limit is out of range
        """
        with logfire.span(
            "thread_service.moderation_queue",
            approval_state=approval_state.value,
            content_item_id=str(content_item_id) if content_item_id else None,
        ):
            if not self.moderation_gate.can_moderate(viewer):
                raise ForbiddenError(
                    "browse", "moderation queue", str(viewer.id) if viewer.id else None
                )
            if limit < 1 or limit > self.settings.max_page_size:
                raise ValidationError(
                    f"limit must be between 1 and {self.settings.max_page_size}"
                )
            raw = await self.comment_repository.list_by_state(
                approval_state, content_item_id, cursor, limit
            )
            logfire.info("Moderation queue read", count=len(raw.rows))
            return ThreadPage(nodes=raw.rows, next_cursor=raw.next_cursor)

    def _clean_body(self, body: str) -> str:
        cleaned = body.strip()
        if len(cleaned) < self.settings.min_body_length:
            raise ValidationError("Comment body is required")
        if len(cleaned) > self.settings.max_body_length:
            raise ValidationError(
                f"Comment must not exceed {self.settings.max_body_length} characters"
            )
        return cleaned

    async def _get_live(self, comment_id: CommentId) -> Comment:
        comment = await self.comment_repository.find_by_id(comment_id)
        if comment is None or comment.is_deleted:
            logfire.warn("Comment not found", comment_id=str(comment_id))
            raise NotFoundError("Comment", str(comment_id))
        return comment

    async def _run_atomic(
        self, operation: str, work: Callable[[], Awaitable[T]]
    ) -> T:
        attempt = 0
        while True:
            try:
                async with self.comment_repository.transaction():
                    return await work()
            except ConflictError as e:
                attempt += 1
                if not e.retryable or attempt > self.settings.conflict_retries:
                    logfire.warn(
                        "Conflict surfaced", operation=operation, error=str(e)
                    )
                    raise
                logfire.warn(
                    "Retrying after conflict",
                    operation=operation,
                    attempt=attempt,
                    error=str(e),
                )

    async def _with_deadline(
        self, operation: str, work: Awaitable[T], timeout: Optional[float]
    ) -> T:
        if timeout is None:
            return await work
        try:
            return await asyncio.wait_for(work, timeout)
        except asyncio.TimeoutError:
            logfire.warn("Deadline exceeded", operation=operation, timeout=timeout)
            raise DeadlineExceededError(operation, timeout)
