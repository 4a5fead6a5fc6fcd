"""Thread pagination domain service."""

from typing import List, Optional, Union

import logfire

from commentary.domain.error import NotFoundError, ValidationError
from commentary.domain.model import Comment, Viewer
from commentary.domain.model.common import DomainModel
from commentary.domain.repository import CommentRepository
from commentary.domain.value import CommentId, ContentItemId, Cursor

from .base import Service
from .moderation_gate import ModerationGate


class TopLevel(DomainModel):
    """Scope of top-level comments attached to one content item."""

    content_item_id: ContentItemId


class RepliesOf(DomainModel):
    """Scope of direct replies to one comment."""

    parent_id: CommentId


Scope = Union[TopLevel, RepliesOf]


class ThreadPage(DomainModel):
    """A page of comments visible to a specific viewer."""

    nodes: List[Comment]
    next_cursor: Optional[Cursor] = None


class ThreadPaginator(Service):
    """Cursor pagination over one tree level, filtered per viewer.

    Each scope paginates independently. Filtering happens after the raw
    read, so when a raw slice is mostly invisible to the viewer the
    paginator keeps reading raw slices until the page is full or the store
    is exhausted; a page is never short while a next cursor is withheld.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        moderation_gate: ModerationGate,
        max_page_size: int,
    ) -> None:
        """Initialize thread paginator.

        Args:
            comment_repository: Comment repository
            moderation_gate: Visibility policy
            max_page_size: Upper bound accepted for limit
        """
        self.comment_repository = comment_repository
        self.moderation_gate = moderation_gate
        self.max_page_size = max_page_size

    async def page(
        self,
        scope: Scope,
        viewer: Viewer,
        cursor: Optional[Cursor],
        limit: int,
    ) -> ThreadPage:
        """Return up to limit visible comments after cursor in scope.

        Args:
            scope: TopLevel(content_item_id) or RepliesOf(parent_id)
            viewer: Viewer the page is filtered for
            cursor: Position after which to start (None for the first page)
            limit: Maximum number of nodes in the page

        Returns:
            Visible nodes and the cursor of the next page (None when done)

        Raises:
            ValidationError: If limit is out of range
            NotFoundError: If the parent of a RepliesOf scope does not exist
        """
        if limit < 1 or limit > self.max_page_size:
            raise ValidationError(f"limit must be between 1 and {self.max_page_size}")

        parent_id, content_item_id = await self._resolve_scope(scope)

        with logfire.span(
            "thread_paginator.page",
            content_item_id=str(content_item_id),
            parent_id=str(parent_id) if parent_id else None,
            viewer_id=str(viewer.id) if viewer.id else None,
            limit=limit,
        ):
            nodes: List[Comment] = []
            raw_cursor = cursor
            raw_reads = 0

            while True:
                raw = await self.comment_repository.list_children(
                    parent_id=parent_id,
                    content_item_id=content_item_id,
                    cursor=raw_cursor,
                    limit=limit,
                )
                raw_reads += 1

                for index, row in enumerate(raw.rows):
                    if not self.moderation_gate.visible(row, viewer):
                        continue
                    nodes.append(row)
                    if len(nodes) == limit:
                        more_in_slice = index < len(raw.rows) - 1
                        has_more = more_in_slice or raw.next_cursor is not None
                        return self._finish(nodes, has_more, raw_reads)

                if raw.next_cursor is None:
                    return self._finish(nodes, False, raw_reads)
                raw_cursor = raw.next_cursor

    async def _resolve_scope(
        self, scope: Scope
    ) -> tuple[Optional[CommentId], ContentItemId]:
        if isinstance(scope, TopLevel):
            return None, scope.content_item_id

        parent = await self.comment_repository.find_by_id(scope.parent_id)
        if parent is None:
            logfire.warn("Reply scope parent not found", parent_id=str(scope.parent_id))
            raise NotFoundError("Comment", str(scope.parent_id))
        # Tombstoned parents still scope their surviving replies
        return parent.id, parent.content_item_id

    def _finish(self, nodes: List[Comment], has_more: bool, raw_reads: int) -> ThreadPage:
        next_cursor = nodes[-1].cursor if has_more and nodes else None
        logfire.info(
            "Thread page assembled",
            count=len(nodes),
            has_more=next_cursor is not None,
            raw_reads=raw_reads,
        )
        return ThreadPage(nodes=nodes, next_cursor=next_cursor)
