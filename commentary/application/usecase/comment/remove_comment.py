"""Remove comment use case."""

from datetime import datetime

from pydantic import BaseModel

from commentary.application.usecase.base import BaseUseCase
from commentary.domain.service import IdentityService, ThreadService
from commentary.domain.value import CommentId

from .item import parse_id


class RemoveCommentRequest(BaseModel):
    """Remove comment request."""

    comment_id: str  # UUID string
    auth_token: str | None = None


class RemoveCommentResponse(BaseModel):
    """Remove comment response."""

    comment_id: str
    deleted_at: datetime


class RemoveCommentUseCase(BaseUseCase):
    """Use case for tombstoning a comment (author or moderator)."""

    def __init__(
        self, thread_service: ThreadService, identity_service: IdentityService
    ) -> None:
        self.thread_service = thread_service
        self.identity_service = identity_service

    async def execute(self, request: RemoveCommentRequest) -> RemoveCommentResponse:
        """Execute remove comment flow.

        Replies to the removed comment are kept.

        Raises:
            NotFoundError: If the comment does not exist or is already deleted
            ForbiddenError: If the caller may not remove the comment
        """
        actor = self.identity_service.resolve_viewer(request.auth_token)
        comment_id = CommentId(parse_id(request.comment_id, "comment"))

        deleted = await self.thread_service.remove(comment_id, actor)

        return RemoveCommentResponse(
            comment_id=str(deleted.id),
            # Set by the store when tombstoning
            deleted_at=deleted.deleted_at or deleted.updated_at,
        )
