"""Unit tests for the comment use cases."""

from uuid import uuid4

import pytest

from commentary.application.usecase.comment import (
    EditCommentRequest,
    EditCommentUseCase,
    GetModerationQueueRequest,
    GetModerationQueueUseCase,
    ListRepliesRequest,
    ListRepliesUseCase,
    ListTopLevelCommentsRequest,
    ListTopLevelCommentsUseCase,
    ModerateCommentRequest,
    ModerateCommentUseCase,
    RemoveCommentRequest,
    RemoveCommentUseCase,
    SubmitCommentRequest,
    SubmitCommentUseCase,
)
from commentary.domain.error import ForbiddenError, NotFoundError, ValidationError
from commentary.domain.repository import CommentRepository
from commentary.domain.service import IdentityService
from commentary.domain.value import (
    ApprovalState,
    ModerationDecision,
    Role,
    UserId,
)
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def token_for(unit_env, role: Role = Role.USER) -> str:
    identity_service = await unit_env.get(IdentityService)
    return identity_service.issue_token(UserId(uuid4()), role)


class TestSubmitCommentUseCase:
    """Tests for SubmitCommentUseCase."""

    @pytest.mark.asyncio
    async def test_author_sees_pending_state(self, unit_env, content_item_id):
        # Arrange
        use_case = await unit_env.get(SubmitCommentUseCase)
        token = await token_for(unit_env)

        # Act
        item = await use_case.execute(
            SubmitCommentRequest(
                content_item_id=str(content_item_id), body="hello", auth_token=token
            )
        )

        # Assert
        assert item.approval_state == "pending"
        assert item.total_reply_count is None
        assert item.parent_id is None
        assert item.root_id == item.id

    @pytest.mark.asyncio
    async def test_anonymous_forbidden(self, unit_env, content_item_id):
        use_case = await unit_env.get(SubmitCommentUseCase)

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                SubmitCommentRequest(content_item_id=str(content_item_id), body="hi")
            )

    @pytest.mark.asyncio
    async def test_invalid_parent_id_rejected(self, unit_env, content_item_id):
        use_case = await unit_env.get(SubmitCommentUseCase)
        token = await token_for(unit_env)

        with pytest.raises(ValidationError):
            await use_case.execute(
                SubmitCommentRequest(
                    content_item_id=str(content_item_id),
                    parent_id="not-a-uuid",
                    body="hi",
                    auth_token=token,
                )
            )

    @pytest.mark.asyncio
    async def test_display_depth_is_capped(self, unit_env, content_item_id):
        # Arrange
        use_case = await unit_env.get(SubmitCommentUseCase)
        token = await token_for(unit_env, Role.MODERATOR)
        parent_id = None

        # Act
        for _ in range(6):
            item = await use_case.execute(
                SubmitCommentRequest(
                    content_item_id=str(content_item_id),
                    parent_id=parent_id,
                    body="deeper",
                    auth_token=token,
                )
            )
            parent_id = item.id

        # Assert
        assert item.depth == 5
        assert item.display_depth == 3


class TestListCommentsUseCases:
    """Tests for the list use cases."""

    @pytest.mark.asyncio
    async def test_public_projection_hides_moderation_fields(
        self, unit_env, content_item_id
    ):
        # Arrange
        repo = await unit_env.get(CommentRepository)
        use_case = await unit_env.get(ListTopLevelCommentsUseCase)
        comment = make_comment(content_item_id)
        await repo.insert(comment)

        # Act
        response = await use_case.execute(
            ListTopLevelCommentsRequest(content_item_id=str(content_item_id))
        )

        # Assert
        assert [c.id for c in response.nodes] == [str(comment.id)]
        assert response.nodes[0].approval_state is None
        assert response.nodes[0].total_reply_count is None
        assert response.next_cursor is None
        dumped = response.model_dump(exclude_unset=True)
        assert "approval_state" not in dumped["nodes"][0]
        assert "total_reply_count" not in dumped["nodes"][0]
        assert dumped["next_cursor"] is None

    @pytest.mark.asyncio
    async def test_moderator_projection_shows_reply_split(
        self, unit_env, content_item_id
    ):
        # Arrange
        repo = await unit_env.get(CommentRepository)
        use_case = await unit_env.get(ListTopLevelCommentsUseCase)
        await repo.insert(make_comment(content_item_id))

        # Act
        response = await use_case.execute(
            ListTopLevelCommentsRequest(
                content_item_id=str(content_item_id),
                auth_token=await token_for(unit_env, Role.MODERATOR),
            )
        )

        # Assert
        assert response.nodes[0].approval_state == "approved"
        assert response.nodes[0].total_reply_count == 0

    @pytest.mark.asyncio
    async def test_cursor_token_walks_pages(self, unit_env, content_item_id):
        # Arrange
        repo = await unit_env.get(CommentRepository)
        use_case = await unit_env.get(ListTopLevelCommentsUseCase)
        seeded = [make_comment(content_item_id, offset_seconds=i) for i in range(5)]
        for comment in seeded:
            await repo.insert(comment)

        # Act
        seen: list[str] = []
        cursor = None
        while True:
            response = await use_case.execute(
                ListTopLevelCommentsRequest(
                    content_item_id=str(content_item_id), cursor=cursor, limit=2
                )
            )
            seen.extend(c.id for c in response.nodes)
            cursor = response.next_cursor
            if cursor is None:
                break

        # Assert
        assert seen == [str(c.id) for c in seeded]

    @pytest.mark.asyncio
    async def test_malformed_cursor_rejected(self, unit_env, content_item_id):
        use_case = await unit_env.get(ListTopLevelCommentsUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                ListTopLevelCommentsRequest(
                    content_item_id=str(content_item_id), cursor="%%%"
                )
            )

    @pytest.mark.asyncio
    async def test_limit_out_of_range_rejected(self, unit_env, content_item_id):
        use_case = await unit_env.get(ListTopLevelCommentsUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                ListTopLevelCommentsRequest(
                    content_item_id=str(content_item_id), limit=0
                )
            )

    @pytest.mark.asyncio
    async def test_replies_of_unknown_parent_not_found(self, unit_env):
        use_case = await unit_env.get(ListRepliesUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(ListRepliesRequest(parent_id=str(uuid4())))


class TestModerationUseCases:
    """Tests for moderate, remove, edit and the moderation queue."""

    @pytest.mark.asyncio
    async def test_queue_then_approve(self, unit_env, content_item_id):
        # Arrange
        repo = await unit_env.get(CommentRepository)
        queue = await unit_env.get(GetModerationQueueUseCase)
        moderate = await unit_env.get(ModerateCommentUseCase)
        moderator_token = await token_for(unit_env, Role.MODERATOR)
        pending = make_comment(content_item_id, state=ApprovalState.PENDING)
        await repo.insert(pending)

        # Act
        before = await queue.execute(
            GetModerationQueueRequest(auth_token=moderator_token)
        )
        item = await moderate.execute(
            ModerateCommentRequest(
                comment_id=str(pending.id),
                decision=ModerationDecision.APPROVE,
                auth_token=moderator_token,
            )
        )
        after = await queue.execute(
            GetModerationQueueRequest(auth_token=moderator_token)
        )

        # Assert
        assert [c.id for c in before.nodes] == [str(pending.id)]
        assert item.approval_state == "approved"
        assert after.nodes == []

    @pytest.mark.asyncio
    async def test_queue_forbidden_for_users(self, unit_env):
        queue = await unit_env.get(GetModerationQueueUseCase)

        with pytest.raises(ForbiddenError):
            await queue.execute(
                GetModerationQueueRequest(auth_token=await token_for(unit_env))
            )

    @pytest.mark.asyncio
    async def test_remove_returns_tombstone_time(self, unit_env, content_item_id):
        # Arrange
        submit = await unit_env.get(SubmitCommentUseCase)
        remove = await unit_env.get(RemoveCommentUseCase)
        token = await token_for(unit_env)
        item = await submit.execute(
            SubmitCommentRequest(
                content_item_id=str(content_item_id), body="oops", auth_token=token
            )
        )

        # Act
        response = await remove.execute(
            RemoveCommentRequest(comment_id=item.id, auth_token=token)
        )

        # Assert
        assert response.comment_id == item.id
        assert response.deleted_at >= item.created_at

    @pytest.mark.asyncio
    async def test_edit_by_author(self, unit_env, content_item_id):
        # Arrange
        submit = await unit_env.get(SubmitCommentUseCase)
        edit = await unit_env.get(EditCommentUseCase)
        token = await token_for(unit_env)
        item = await submit.execute(
            SubmitCommentRequest(
                content_item_id=str(content_item_id), body="frist", auth_token=token
            )
        )

        # Act
        edited = await edit.execute(
            EditCommentRequest(comment_id=item.id, body="first", auth_token=token)
        )

        # Assert
        assert edited.body == "first"
        assert edited.approval_state == "pending"
