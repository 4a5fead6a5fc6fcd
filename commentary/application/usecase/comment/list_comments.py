"""List comments use cases (top-level and replies)."""

from typing import Optional

from pydantic import BaseModel

from commentary.application.usecase.base import BaseUseCase
from commentary.config import ThreadSettings
from commentary.domain.model import Viewer
from commentary.domain.service import (
    IdentityService,
    ModerationGate,
    ThreadPage,
    ThreadService,
)
from commentary.domain.value import CommentId, ContentItemId, Cursor

from .item import CommentItem, parse_id, to_comment_item


class ListCommentsResponse(BaseModel):
    """One page of comments."""

    nodes: list[CommentItem]
    next_cursor: str | None = None  # Opaque; None when there are no more pages


class ListTopLevelCommentsRequest(BaseModel):
    """List top-level comments request."""

    content_item_id: str  # UUID string
    cursor: str | None = None
    limit: int | None = None  # Defaults to the configured page size
    auth_token: str | None = None


class ListRepliesRequest(BaseModel):
    """List replies request."""

    parent_id: str  # UUID string
    cursor: str | None = None
    limit: int | None = None
    auth_token: str | None = None


class _ListCommentsBase:
    def __init__(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> None:
        self.thread_service = thread_service
        self.identity_service = identity_service
        self.moderation_gate = moderation_gate
        self.thread_settings = thread_settings

    def _cursor(self, token: str | None) -> Optional[Cursor]:
        return Cursor.decode(token) if token else None

    def _limit(self, limit: int | None) -> int:
        return limit if limit is not None else self.thread_settings.default_page_size

    def _response(self, page: ThreadPage, viewer: Viewer) -> ListCommentsResponse:
        return ListCommentsResponse(
            nodes=[
                to_comment_item(
                    comment, viewer, self.moderation_gate, self.thread_settings
                )
                for comment in page.nodes
            ],
            next_cursor=page.next_cursor.encode() if page.next_cursor else None,
        )


class ListTopLevelCommentsUseCase(_ListCommentsBase, BaseUseCase):
    """Use case for paging through the top-level comments of a content item."""

    async def execute(
        self, request: ListTopLevelCommentsRequest
    ) -> ListCommentsResponse:
        """Execute list top-level comments flow.

        Raises:
            ValidationError: If IDs, cursor or limit are invalid
            DeadlineExceededError: If the listing took too long
        """
        viewer = self.identity_service.resolve_viewer(request.auth_token)
        content_item_id = ContentItemId(
            parse_id(request.content_item_id, "content item")
        )

        page = await self.thread_service.list_top_level(
            content_item_id=content_item_id,
            viewer=viewer,
            cursor=self._cursor(request.cursor),
            limit=self._limit(request.limit),
            timeout=self.thread_settings.list_timeout_seconds,
        )
        return self._response(page, viewer)


class ListRepliesUseCase(_ListCommentsBase, BaseUseCase):
    """Use case for paging through the direct replies of a comment."""

    async def execute(self, request: ListRepliesRequest) -> ListCommentsResponse:
        """Execute list replies flow.

        Raises:
            ValidationError: If IDs, cursor or limit are invalid
            NotFoundError: If the parent comment does not exist
            DeadlineExceededError: If the listing took too long
        """
        viewer = self.identity_service.resolve_viewer(request.auth_token)
        parent_id = CommentId(parse_id(request.parent_id, "comment"))

        page = await self.thread_service.list_replies(
            parent_id=parent_id,
            viewer=viewer,
            cursor=self._cursor(request.cursor),
            limit=self._limit(request.limit),
            timeout=self.thread_settings.list_timeout_seconds,
        )
        return self._response(page, viewer)
