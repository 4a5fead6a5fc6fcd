"""Reply counter domain service."""

from typing import Optional

import logfire

from commentary.domain.repository import CommentRepository
from commentary.domain.value import ApprovalState, CommentId

from .base import Service
from .moderation_gate import ModerationGate


class ReplyCounter(Service):
    """Keeps each parent's cached reply counters in step with its children.

    reply_count only moves on transitions into or out of the approved
    state; total_reply_count moves on create and delete. All updates are
    relative increments issued through the repository and must be called
    inside the same transaction as the mutation that triggered them.
    """

    def __init__(
        self, comment_repository: CommentRepository, moderation_gate: ModerationGate
    ) -> None:
        """Initialize reply counter.

        Args:
            comment_repository: Comment repository
            moderation_gate: Policy deciding which states count as replies
        """
        self.comment_repository = comment_repository
        self.moderation_gate = moderation_gate

    def _approved_weight(self, state: ApprovalState) -> int:
        return 1 if self.moderation_gate.counts_as_reply(state) else 0

    async def on_create(
        self, parent_id: Optional[CommentId], resulting_state: ApprovalState
    ) -> None:
        """Account for a new child created in resulting_state.

        Args:
            parent_id: Parent of the new comment (None for top-level)
            resulting_state: Approval state the child was created in
        """
        if parent_id is None:
            return
        await self._adjust(
            parent_id,
            approved_delta=self._approved_weight(resulting_state),
            total_delta=1,
            reason="create",
        )

    async def on_approval_change(
        self,
        parent_id: Optional[CommentId],
        from_state: ApprovalState,
        to_state: ApprovalState,
    ) -> None:
        """Account for a child moving between approval states.

        Args:
            parent_id: Parent of the child (None for top-level)
            from_state: Previous approval state
            to_state: New approval state
        """
        if parent_id is None:
            return
        delta = self._approved_weight(to_state) - self._approved_weight(from_state)
        if delta == 0:
            return
        await self._adjust(
            parent_id, approved_delta=delta, total_delta=0, reason="approval_change"
        )

    async def on_delete(
        self, parent_id: Optional[CommentId], prior_state: ApprovalState
    ) -> None:
        """Account for a child being tombstoned.

        Args:
            parent_id: Parent of the deleted comment (None for top-level)
            prior_state: Approval state the child had when it was deleted
        """
        if parent_id is None:
            return
        await self._adjust(
            parent_id,
            approved_delta=-self._approved_weight(prior_state),
            total_delta=-1,
            reason="delete",
        )

    async def _adjust(
        self,
        parent_id: CommentId,
        approved_delta: int,
        total_delta: int,
        reason: str,
    ) -> None:
        with logfire.span(
            "reply_counter.adjust",
            parent_id=str(parent_id),
            approved_delta=approved_delta,
            total_delta=total_delta,
            reason=reason,
        ):
            await self.comment_repository.adjust_reply_counts(
                parent_id,
                approved_delta=approved_delta,
                total_delta=total_delta,
            )
            logfire.debug(
                "Reply counters adjusted",
                parent_id=str(parent_id),
                approved_delta=approved_delta,
                total_delta=total_delta,
            )
