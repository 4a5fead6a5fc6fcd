"""Edit comment use case."""

from pydantic import BaseModel

from commentary.application.usecase.base import BaseUseCase
from commentary.config import ThreadSettings
from commentary.domain.service import IdentityService, ModerationGate, ThreadService
from commentary.domain.value import CommentId

from .item import CommentItem, parse_id, to_comment_item


class EditCommentRequest(BaseModel):
    """Edit comment request."""

    comment_id: str  # UUID string
    body: str
    auth_token: str | None = None


class EditCommentUseCase(BaseUseCase):
    """Use case for replacing a comment's body."""

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

    async def execute(self, request: EditCommentRequest) -> CommentItem:
        """Execute edit comment flow.

        Raises:
            ValidationError: If the ID or body is invalid
            NotFoundError: If the comment does not exist or is deleted
            ForbiddenError: If the caller is neither author nor moderator
        """
        actor = self.identity_service.resolve_viewer(request.auth_token)
        comment_id = CommentId(parse_id(request.comment_id, "comment"))

        updated = await self.thread_service.edit(comment_id, actor, request.body)

        return to_comment_item(
            updated, actor, self.moderation_gate, self.thread_settings
        )
