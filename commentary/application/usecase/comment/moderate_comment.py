"""Moderate comment use case."""

from pydantic import BaseModel

from commentary.application.usecase.base import BaseUseCase
from commentary.config import ThreadSettings
from commentary.domain.service import IdentityService, ModerationGate, ThreadService
from commentary.domain.value import CommentId, ModerationDecision

from .item import CommentItem, parse_id, to_comment_item


class ModerateCommentRequest(BaseModel):
    """Moderate comment request."""

    comment_id: str  # UUID string
    decision: ModerationDecision
    auth_token: str | None = None


class ModerateCommentUseCase(BaseUseCase):
    """Use case for approving or rejecting a pending comment."""

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

    async def execute(self, request: ModerateCommentRequest) -> CommentItem:
        """Execute moderation flow.

        Raises:
            ForbiddenError: If the caller is not a moderator
            NotFoundError: If the comment does not exist or is deleted
            ConflictError: If the comment is not pending
        """
        actor = self.identity_service.resolve_viewer(request.auth_token)
        comment_id = CommentId(parse_id(request.comment_id, "comment"))

        updated = await self.thread_service.moderate(
            comment_id, request.decision, actor
        )

        return to_comment_item(
            updated, actor, self.moderation_gate, self.thread_settings
        )
