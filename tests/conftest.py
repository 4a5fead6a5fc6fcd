"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire
import pytest

from commentary.domain.model import Comment, Viewer
from commentary.domain.value import (
    ApprovalState,
    CommentId,
    ContentItemId,
    Role,
    UserId,
)

# Keep spans local; nothing is exported during tests
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_user(role: Role = Role.USER) -> Viewer:
    """Build a signed-in viewer with a fresh ID."""
    return Viewer(id=UserId(uuid4()), role=role)


def make_comment(
    content_item_id: ContentItemId,
    author_id: UserId | None = None,
    parent: Comment | None = None,
    state: ApprovalState = ApprovalState.APPROVED,
    offset_seconds: int = 0,
    body: str = "A comment",
) -> Comment:
    """Build a comment row directly, bypassing the service.

    Args:
        content_item_id: Content item the comment belongs to
        author_id: Author (random when omitted)
        parent: Parent comment for replies
        state: Approval state
        offset_seconds: Seconds after BASE_TIME for created_at
        body: Comment body
    """
    comment_id = CommentId(uuid4())
    created_at = BASE_TIME + timedelta(seconds=offset_seconds)
    return Comment(
        id=comment_id,
        content_item_id=content_item_id,
        author_id=author_id or UserId(uuid4()),
        body=body,
        parent_id=parent.id if parent else None,
        root_id=parent.root_id if parent else comment_id,
        depth=parent.depth + 1 if parent else 0,
        approval_state=state,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def content_item_id() -> ContentItemId:
    """Fresh content item ID."""
    return ContentItemId(uuid4())


@pytest.fixture
def moderator() -> Viewer:
    """Signed-in moderator."""
    return make_user(Role.MODERATOR)


@pytest.fixture
def author() -> Viewer:
    """Signed-in regular user."""
    return make_user()
