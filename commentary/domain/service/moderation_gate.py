"""Moderation policy.

This module is the only place that decides who may see what, which
comments count toward reply counters and who may act on a comment.
Storage and pagination code ask the gate instead of branching on roles.
"""

from commentary.domain.model import Comment, Viewer
from commentary.domain.value import ApprovalState, Role

from .base import Service


class ModerationGate(Service):
    """Pure, deterministic decisions keyed by comment state and viewer role."""

    def is_author(self, comment: Comment, viewer: Viewer) -> bool:
        """Whether the viewer wrote the comment."""
        return viewer.id is not None and viewer.id == comment.author_id

    def visible(self, comment: Comment, viewer: Viewer) -> bool:
        """Whether the viewer may see the comment in a listing.

        Approved comments are public. Authors always see their own pending
        or rejected comments, and moderators see everything. Tombstoned
        comments are never listed.
        """
        if comment.is_deleted:
            return False
        if comment.approval_state is ApprovalState.APPROVED:
            return True
        return viewer.is_moderator or self.is_author(comment, viewer)

    def can_see_true_state(self, comment: Comment, viewer: Viewer) -> bool:
        """Whether the viewer is told the comment's approval state."""
        return viewer.is_moderator or self.is_author(comment, viewer)

    def can_see_reply_split(self, viewer: Viewer) -> bool:
        """Whether the viewer is told the approved-vs-total reply split."""
        return viewer.is_moderator

    def counts_as_reply(self, state: ApprovalState) -> bool:
        """Whether a child in this state counts toward its parent's reply_count."""
        return state is ApprovalState.APPROVED

    def initial_state(self, author: Viewer) -> ApprovalState:
        """Approval state for a new comment written by the given author."""
        if author.role is Role.MODERATOR:
            return ApprovalState.APPROVED
        return ApprovalState.PENDING

    def can_submit(self, author: Viewer) -> bool:
        """Anonymous viewers may read but not write."""
        return not author.is_anonymous

    def can_remove(self, comment: Comment, actor: Viewer) -> bool:
        """Authors may remove their own comments; moderators may remove any."""
        return actor.is_moderator or self.is_author(comment, actor)

    def can_edit(self, comment: Comment, actor: Viewer) -> bool:
        """Authors may edit their own comments; moderators may edit any."""
        return actor.is_moderator or self.is_author(comment, actor)

    def can_moderate(self, actor: Viewer) -> bool:
        """Only moderators approve, reject or browse the moderation queue."""
        return actor.is_moderator
