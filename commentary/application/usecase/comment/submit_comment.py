"""Submit comment use case."""

from pydantic import BaseModel

from commentary.application.usecase.base import BaseUseCase
from commentary.config import ThreadSettings
from commentary.domain.service import IdentityService, ModerationGate, ThreadService
from commentary.domain.value import CommentId, ContentItemId

from .item import CommentItem, parse_id, to_comment_item


class SubmitCommentRequest(BaseModel):
    """Submit comment request."""

    content_item_id: str  # UUID string
    parent_id: str | None = None  # Parent comment ID for replies
    body: str
    auth_token: str | None = None


class SubmitCommentUseCase(BaseUseCase):
    """Use case for posting a top-level comment or a reply."""

    def __init__(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> None:
        """Initialize submit comment use case.

        Args:
            thread_service: Comment thread domain service
            identity_service: Resolves the author from the auth token
            moderation_gate: Moderation policy (for the response projection)
            thread_settings: Thread rules
        """
        self.thread_service = thread_service
        self.identity_service = identity_service
        self.moderation_gate = moderation_gate
        self.thread_settings = thread_settings

    async def execute(self, request: SubmitCommentRequest) -> CommentItem:
        """Execute submit comment flow.

        The created comment is returned to its author with its approval
        state, so pending comments can be shown as awaiting moderation.

        Args:
            request: Submit comment request

        Returns:
            Created comment

        Raises:
            ForbiddenError: If the caller is anonymous
            ValidationError: If IDs or body are invalid
            NotFoundError: If the content item or parent does not exist
        """
        author = self.identity_service.resolve_viewer(request.auth_token)
        content_item_id = ContentItemId(parse_id(request.content_item_id, "content item"))
        parent_id = (
            CommentId(parse_id(request.parent_id, "parent comment"))
            if request.parent_id
            else None
        )

        comment = await self.thread_service.submit(
            content_item_id=content_item_id,
            parent_id=parent_id,
            author=author,
            body=request.body,
        )

        return to_comment_item(
            comment, author, self.moderation_gate, self.thread_settings
        )
