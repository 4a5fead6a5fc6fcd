"""Moderation queue use case."""

from pydantic import BaseModel

from commentary.application.usecase.base import BaseUseCase
from commentary.config import ThreadSettings
from commentary.domain.service import IdentityService, ModerationGate, ThreadService
from commentary.domain.value import ApprovalState, ContentItemId, Cursor

from .item import parse_id, to_comment_item
from .list_comments import ListCommentsResponse


class GetModerationQueueRequest(BaseModel):
    """Moderation queue request."""

    approval_state: ApprovalState = ApprovalState.PENDING
    content_item_id: str | None = None  # Restrict to one content item
    cursor: str | None = None
    limit: int | None = None
    auth_token: str | None = None


class GetModerationQueueUseCase(BaseUseCase):
    """Use case for moderators browsing comments by approval state."""

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

    async def execute(
        self, request: GetModerationQueueRequest
    ) -> ListCommentsResponse:
        """Execute moderation queue flow.

        Raises:
            ForbiddenError: If the caller is not a moderator
            ValidationError: If IDs, cursor or limit are invalid
        """
        viewer = self.identity_service.resolve_viewer(request.auth_token)
        content_item_id = (
            ContentItemId(parse_id(request.content_item_id, "content item"))
            if request.content_item_id
            else None
        )

        page = await self.thread_service.moderation_queue(
            viewer=viewer,
            approval_state=request.approval_state,
            content_item_id=content_item_id,
            cursor=Cursor.decode(request.cursor) if request.cursor else None,
            limit=request.limit
            if request.limit is not None
            else self.thread_settings.default_page_size,
        )

        return ListCommentsResponse(
            nodes=[
                to_comment_item(
                    comment, viewer, self.moderation_gate, self.thread_settings
                )
                for comment in page.nodes
            ],
            next_cursor=page.next_cursor.encode() if page.next_cursor else None,
        )
