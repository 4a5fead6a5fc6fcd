"""Unit tests for ModerationGate."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from commentary.domain.model import Viewer
from commentary.domain.service import ModerationGate
from commentary.domain.value import ApprovalState, ContentItemId, Role
from tests.conftest import make_comment, make_user


@pytest.fixture
def gate() -> ModerationGate:
    return ModerationGate()


class TestVisibility:
    """Tests for visible()."""

    @pytest.mark.parametrize(
        "state", [ApprovalState.PENDING, ApprovalState.REJECTED]
    )
    def test_unapproved_hidden_from_other_users(self, gate, state):
        """Other users and anonymous viewers never see unapproved comments."""
        comment = make_comment(ContentItemId(uuid4()), state=state)

        assert gate.visible(comment, make_user()) is False
        assert gate.visible(comment, Viewer.anonymous()) is False

    @pytest.mark.parametrize(
        "state", [ApprovalState.PENDING, ApprovalState.REJECTED]
    )
    def test_unapproved_visible_to_author_and_moderator(self, gate, state):
        """Authors see their own comments; moderators see everything."""
        author = make_user()
        comment = make_comment(ContentItemId(uuid4()), author_id=author.id, state=state)

        assert gate.visible(comment, author) is True
        assert gate.visible(comment, make_user(Role.MODERATOR)) is True

    def test_approved_visible_to_everyone(self, gate):
        """Approved comments are public."""
        comment = make_comment(ContentItemId(uuid4()), state=ApprovalState.APPROVED)

        assert gate.visible(comment, Viewer.anonymous()) is True
        assert gate.visible(comment, make_user()) is True

    def test_tombstoned_hidden_from_everyone(self, gate):
        """Deleted comments are never listed, not even for moderators."""
        author = make_user()
        comment = make_comment(ContentItemId(uuid4()), author_id=author.id)
        deleted = comment.model_copy(
            update={"deleted_at": datetime.now(timezone.utc)}
        )

        assert gate.visible(deleted, author) is False
        assert gate.visible(deleted, make_user(Role.MODERATOR)) is False


class TestDisclosure:
    """Tests for what a viewer is told about a comment."""

    def test_true_state_only_for_author_and_moderator(self, gate):
        author = make_user()
        comment = make_comment(ContentItemId(uuid4()), author_id=author.id)

        assert gate.can_see_true_state(comment, author) is True
        assert gate.can_see_true_state(comment, make_user(Role.MODERATOR)) is True
        assert gate.can_see_true_state(comment, make_user()) is False
        assert gate.can_see_true_state(comment, Viewer.anonymous()) is False

    def test_reply_split_only_for_moderators(self, gate):
        assert gate.can_see_reply_split(make_user(Role.MODERATOR)) is True
        assert gate.can_see_reply_split(make_user()) is False


class TestPermissions:
    """Tests for submission, removal, edit and moderation rights."""

    def test_initial_state_by_role(self, gate):
        """Moderators publish immediately; users wait for approval."""
        assert gate.initial_state(make_user(Role.MODERATOR)) is ApprovalState.APPROVED
        assert gate.initial_state(make_user()) is ApprovalState.PENDING

    def test_anonymous_cannot_submit(self, gate):
        assert gate.can_submit(Viewer.anonymous()) is False
        assert gate.can_submit(make_user()) is True

    def test_remove_and_edit_author_or_moderator(self, gate):
        author = make_user()
        comment = make_comment(ContentItemId(uuid4()), author_id=author.id)

        for check in (gate.can_remove, gate.can_edit):
            assert check(comment, author) is True
            assert check(comment, make_user(Role.MODERATOR)) is True
            assert check(comment, make_user()) is False
            assert check(comment, Viewer.anonymous()) is False

    def test_only_moderators_moderate(self, gate):
        assert gate.can_moderate(make_user(Role.MODERATOR)) is True
        assert gate.can_moderate(make_user()) is False
        assert gate.can_moderate(Viewer.anonymous()) is False

    def test_only_approved_counts_as_reply(self, gate):
        assert gate.counts_as_reply(ApprovalState.APPROVED) is True
        assert gate.counts_as_reply(ApprovalState.PENDING) is False
        assert gate.counts_as_reply(ApprovalState.REJECTED) is False
